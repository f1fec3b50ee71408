"""LLM strategy for turning OCR receipt text into a structured receipt."""
# mypy: ignore-errors

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

import httpx

from fittracker import metrics
from fittracker.config import Settings, get_settings
from fittracker.models.receipt import (
    DEFAULT_CURRENCY,
    UNKNOWN_ITEM_NAME,
    UNKNOWN_MERCHANT,
    ParsedReceipt,
    ReceiptItem,
    clamp_confidence,
)
from fittracker.ocr.parser import normalize_receipt_date

LLM_NOTE = "Tesseract OCR + LLM elemzés"
DEFAULT_LLM_CONFIDENCE = 0.8
MAX_PROMPT_CHARS = 4000
_JSON_BLOCK_RE = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)

RECEIPT_SYSTEM_PROMPT = (
    "You are a receipt parser. Convert receipt text produced by OCR into JSON with the structure:\n"
    "{\n"
    '  "totalAmount": number,\n'
    '  "merchant": string,\n'
    '  "date": string (YYYY-MM-DD format),\n'
    '  "items": [\n'
    '    { "name": string, "price": number, "quantity": number }\n'
    "  ],\n"
    '  "currency": string,\n'
    '  "confidence": number (0-1)\n'
    "}\n\n"
    "Important rules:\n"
    '- Extract the total amount from lines containing "ÖSSZESEN", "TOTAL", "ÖSSZEG", or "FIZETENDŐ"\n'
    "- Extract merchant name from the top of the receipt (LIDL, TESCO, SPAR, ALDI, PENNY, CBA, etc.)\n"
    "- Extract date in YYYY-MM-DD format\n"
    "- For items, extract name and price from each line\n"
    "- Set quantity to 1 if not specified\n"
    '- Currency should be "HUF" for Hungarian receipts\n'
    "- Confidence should be 0.8-0.95 for good OCR text\n"
    "Return only JSON."
)

RECEIPT_USER_PROMPT = 'Receipt text:\n"""{ocr_text}"""'

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LLMParseOutcome:
    """Result of one LLM parse attempt; failures are values, not exceptions."""

    success: bool
    receipt: Optional[ParsedReceipt] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, receipt: ParsedReceipt) -> "LLMParseOutcome":
        return cls(success=True, receipt=receipt)

    @classmethod
    def failure(cls, error: str) -> "LLMParseOutcome":
        return cls(success=False, error=error)


class ReceiptLLMClient:
    """Call an OpenAI/Ollama-compatible chat endpoint to parse receipt text."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str,
        model: str,
        provider: str = "openai",
        temperature: float = 0.0,
        max_tokens: int = 1000,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._provider = (provider or "openai").strip().lower()
        self._temperature = max(0.0, float(temperature))
        self._max_tokens = max(1, int(max_tokens))
        self._timeout = timeout
        self._transport = transport

    def parse_receipt(self, ocr_text: str) -> LLMParseOutcome:
        """Ask the model for a structured receipt; every failure is returned as an outcome."""

        try:
            messages = self._build_messages(ocr_text)
            content = self._execute_chat(messages)
            payload = json.loads(_extract_json_blob(content))
            if not isinstance(payload, dict):
                return self._failed(f"expected a JSON object, got {type(payload).__name__}")
            receipt = coerce_parsed_receipt(payload)
        except httpx.HTTPError as exc:
            return self._failed(f"request failed: {exc}")
        except json.JSONDecodeError as exc:
            return self._failed(f"invalid JSON: {exc}")
        except (ValueError, TypeError, AttributeError) as exc:
            # Malformed response envelopes (wrong types where objects or strings belong).
            return self._failed(str(exc) or type(exc).__name__)
        except Exception as exc:
            # Invalid base URLs (httpx.InvalidURL), pathological nesting (RecursionError).
            logger.exception("Unexpected receipt LLM error")
            return self._failed(f"unexpected error: {type(exc).__name__}: {exc}")

        metrics.RECEIPT_LLM_REQUESTS.labels(status="succeeded").inc()
        return LLMParseOutcome.ok(receipt)

    @staticmethod
    def _failed(reason: str) -> LLMParseOutcome:
        logger.warning("Receipt LLM parsing failed: %s", reason)
        metrics.RECEIPT_LLM_REQUESTS.labels(status="failed").inc()
        return LLMParseOutcome.failure(reason)

    def _build_messages(self, ocr_text: str) -> list[dict[str, str]]:
        trimmed_text = ocr_text.strip()
        if len(trimmed_text) > MAX_PROMPT_CHARS:
            trimmed_text = trimmed_text[:MAX_PROMPT_CHARS] + "\n...[truncated]"
        return [
            {"role": "system", "content": RECEIPT_SYSTEM_PROMPT},
            {"role": "user", "content": RECEIPT_USER_PROMPT.format(ocr_text=trimmed_text)},
        ]

    def _client(self) -> httpx.Client:
        headers = {"Authorization": f"Bearer {self._api_key}"}
        return httpx.Client(timeout=self._timeout, headers=headers, transport=self._transport)

    def _execute_chat(self, messages: list[dict[str, str]]) -> str:
        if self._provider == "ollama":
            endpoint = self._base_url
            if not endpoint.endswith("/api/chat"):
                endpoint = f"{endpoint}/api/chat"
            payload = {
                "model": self._model,
                "messages": messages,
                "stream": False,
                "format": "json",
                "options": {
                    "temperature": self._temperature,
                    "num_predict": self._max_tokens,
                },
            }
            with self._client() as client:
                response = client.post(endpoint, json=payload)
            response.raise_for_status()
            message = _response_body(response).get("message") or {}
            content = (message.get("content") or "").strip()
            if not content:
                raise ValueError("Ollama receipt response did not include content.")
            return content

        endpoint = self._base_url
        if not endpoint.endswith("/chat/completions"):
            endpoint = f"{endpoint}/chat/completions"
        payload = {
            "model": self._model,
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
            "response_format": {"type": "json_object"},
            "messages": messages,
        }
        with self._client() as client:
            response = client.post(endpoint, json=payload)
        response.raise_for_status()
        choices = _response_body(response).get("choices") or []
        if not choices:
            raise ValueError("Receipt LLM returned no choices.")
        message = choices[0].get("message") or {}
        content = (message.get("content") or "").strip()
        if not content:
            raise ValueError("Receipt LLM returned an empty response.")
        return content


def _response_body(response: httpx.Response) -> dict[str, Any]:
    body = response.json()
    if not isinstance(body, dict):
        raise ValueError("Receipt LLM response body is not a JSON object.")
    return body


def _extract_json_blob(text: str) -> str:
    match = _JSON_BLOCK_RE.search(text)
    if match:
        return match.group(1).strip()

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        return text[start : end + 1].strip()
    return text.strip()


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(" ", "").replace(",", ".")
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number


def _to_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _to_date(value: Any) -> date:
    text = _to_text(value)
    if text:
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            parsed = normalize_receipt_date(text)
            if parsed is not None:
                return parsed
    return date.today()


def _coerce_item(entry: Any) -> Optional[ReceiptItem]:
    if not isinstance(entry, dict):
        return None
    price = _to_float(entry.get("price"))
    quantity = _to_float(entry.get("quantity"))
    return ReceiptItem(
        name=_to_text(entry.get("name")) or UNKNOWN_ITEM_NAME,
        price=max(price or 0.0, 0.0),
        quantity=max(int(round(quantity)), 1) if quantity else 1,
    )


def coerce_parsed_receipt(payload: dict[str, Any]) -> ParsedReceipt:
    """Build a fully typed receipt from an untyped model response, defaulting per field."""

    raw_items = payload.get("items")
    items = []
    if isinstance(raw_items, list):
        items = [item for item in map(_coerce_item, raw_items) if item is not None]

    total = _to_float(payload.get("totalAmount"))
    confidence = _to_float(payload.get("confidence"))
    currency = _to_text(payload.get("currency"))
    return ParsedReceipt(
        total_amount=max(total or 0.0, 0.0),
        merchant=_to_text(payload.get("merchant")) or UNKNOWN_MERCHANT,
        purchase_date=_to_date(payload.get("date")),
        items=items,
        currency=currency.upper() if currency else DEFAULT_CURRENCY,
        confidence=clamp_confidence(confidence or DEFAULT_LLM_CONFIDENCE),
        note=LLM_NOTE,
    )


def build_receipt_llm_client(settings: Settings | None = None) -> ReceiptLLMClient | None:
    """Create an LLM client when an API key is configured, otherwise ``None``."""

    settings = settings or get_settings()
    if not settings.receipt_llm_api_key:
        logger.debug("Receipt LLM API key not configured; LLM parsing disabled.")
        return None

    return ReceiptLLMClient(
        api_key=settings.receipt_llm_api_key,
        base_url=settings.receipt_llm_base_url,
        model=settings.receipt_llm_model,
        provider=settings.receipt_llm_provider,
        temperature=settings.receipt_llm_temperature,
        max_tokens=settings.receipt_llm_max_tokens,
        timeout=settings.receipt_llm_timeout,
    )


__all__ = [
    "LLMParseOutcome",
    "ReceiptLLMClient",
    "build_receipt_llm_client",
    "coerce_parsed_receipt",
]
