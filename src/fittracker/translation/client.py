"""HTTP client for the free MyMemory translation API."""

from __future__ import annotations

import logging
import re
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.mymemory.translated.net/get"
USER_AGENT = "Mozilla/5.0 (compatible; FitnessTracker/1.0)"
_WHITESPACE_RE = re.compile(r"\s+")


class MyMemoryClient:
    """Translate short texts through MyMemory; failures yield ``None``."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    def translate(self, text: str, target_lang: str, source_lang: str = "en") -> Optional[str]:
        params = {"q": text.strip(), "langpair": f"{source_lang}|{target_lang}"}
        try:
            with httpx.Client(
                timeout=self._timeout,
                headers={"User-Agent": USER_AGENT},
                transport=self._transport,
            ) as client:
                response = client.get(self._base_url, params=params)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Translation request failed target=%s: %s", target_lang, exc)
            return None

        data = body.get("responseData") if isinstance(body, dict) else None
        translated = data.get("translatedText") if isinstance(data, dict) else None
        if not isinstance(translated, str) or not translated.strip():
            logger.warning("Translation response missing translatedText target=%s", target_lang)
            return None
        return _WHITESPACE_RE.sub(" ", translated).strip()


__all__ = ["DEFAULT_API_URL", "MyMemoryClient"]
