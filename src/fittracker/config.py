"""Application configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

ENV_FILE_CANDIDATES = (Path(".env"), Path(".env.local"))


class Settings(BaseModel):
    """Global application settings loaded from environment variables or .env files."""

    api_token: Optional[str] = Field(
        default=None,
        description="Bearer token required for mutating endpoints.",
    )
    log_level: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(default="plain", description="Logging format (plain/json).")
    log_requests: bool = Field(default=True, description="Emit request access logs when true.")
    ocr_lang: str = Field(
        default="hun+eng",
        description="Tesseract language pair used for receipt OCR.",
    )
    image_fetch_timeout: float = Field(
        default=20.0,
        description="Seconds to wait when downloading a receipt image.",
    )
    default_currency: str = Field(
        default="HUF",
        description="Currency code assumed when a receipt does not state one.",
    )
    receipt_llm_api_key: Optional[str] = Field(
        default=None,
        description="API key for the receipt parsing LLM. LLM parsing is skipped when unset.",
    )
    receipt_llm_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI-compatible (or Ollama) base URL for receipt parsing.",
    )
    receipt_llm_model: str = Field(
        default="gpt-4o-mini",
        description="Model identifier for receipt parsing LLM calls.",
    )
    receipt_llm_provider: str = Field(
        default="openai",
        description="Receipt parsing LLM provider (openai or ollama).",
    )
    receipt_llm_temperature: float = Field(
        default=0.0,
        description="Sampling temperature for receipt parsing LLM.",
    )
    receipt_llm_max_tokens: int = Field(
        default=1000,
        description="Max tokens for receipt parsing LLM responses.",
    )
    receipt_llm_timeout: float = Field(
        default=30.0,
        description="Seconds to wait for a receipt parsing LLM response.",
    )
    translation_api_url: str = Field(
        default="https://api.mymemory.translated.net/get",
        description="MyMemory-compatible translation endpoint.",
    )
    translation_timeout: float = Field(
        default=10.0,
        description="Seconds to wait for a translation API response.",
    )
    translation_cache_size: int = Field(
        default=2048,
        description="Maximum number of cached translations kept by a translator.",
    )
    translation_batch_size: int = Field(
        default=3,
        description="Number of recipes translated per batch.",
    )
    translation_batch_delay: float = Field(
        default=0.5,
        description="Pause in seconds between recipe translation batches.",
    )

    model_config = ConfigDict(frozen=True)


def _coerce_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


# Environment variable -> (settings field, caster). Earlier keys win when a
# field is listed more than once.
_ENV_FIELDS: tuple[tuple[str, str, Callable[[str], object]], ...] = (
    ("FITTRACKER_API_TOKEN", "api_token", str),
    ("FITTRACKER_LOG_LEVEL", "log_level", str),
    ("FITTRACKER_LOG_FORMAT", "log_format", str),
    ("FITTRACKER_LOG_REQUESTS", "log_requests", _coerce_bool),
    ("FITTRACKER_OCR_LANG", "ocr_lang", str),
    ("FITTRACKER_IMAGE_FETCH_TIMEOUT", "image_fetch_timeout", float),
    ("FITTRACKER_DEFAULT_CURRENCY", "default_currency", str),
    ("FITTRACKER_RECEIPT_LLM_API_KEY", "receipt_llm_api_key", str),
    ("OPENAI_API_KEY", "receipt_llm_api_key", str),
    ("FITTRACKER_RECEIPT_LLM_BASE_URL", "receipt_llm_base_url", str),
    ("FITTRACKER_RECEIPT_LLM_MODEL", "receipt_llm_model", str),
    ("FITTRACKER_RECEIPT_LLM_PROVIDER", "receipt_llm_provider", str),
    ("FITTRACKER_RECEIPT_LLM_TEMPERATURE", "receipt_llm_temperature", float),
    ("FITTRACKER_RECEIPT_LLM_MAX_TOKENS", "receipt_llm_max_tokens", int),
    ("FITTRACKER_RECEIPT_LLM_TIMEOUT", "receipt_llm_timeout", float),
    ("FITTRACKER_TRANSLATION_API_URL", "translation_api_url", str),
    ("FITTRACKER_TRANSLATION_TIMEOUT", "translation_timeout", float),
    ("FITTRACKER_TRANSLATION_CACHE_SIZE", "translation_cache_size", int),
    ("FITTRACKER_TRANSLATION_BATCH_SIZE", "translation_batch_size", int),
    ("FITTRACKER_TRANSLATION_BATCH_DELAY", "translation_batch_delay", float),
)


def _parse_env_file(path: Path) -> dict[str, str]:
    payload: dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, raw_value = line.split("=", 1)
                payload[key.strip()] = raw_value.strip().strip("\"'")
    except FileNotFoundError:
        return {}
    return payload


def _load_env_file_values() -> dict[str, str]:
    values: dict[str, str] = {}
    for candidate in ENV_FILE_CANDIDATES:
        values.update(_parse_env_file(candidate))
    return values


def _load_from_env() -> dict[str, object]:
    """Load optional overrides from env vars (with .env fallbacks)."""

    file_values = _load_env_file_values()
    payload: dict[str, object] = {}
    for env_key, field_name, caster in _ENV_FIELDS:
        if field_name in payload:
            continue
        raw = os.environ.get(env_key) or file_values.get(env_key)
        if not raw:
            continue
        try:
            payload[field_name] = caster(raw)
        except ValueError:
            continue
    return payload


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings(**_load_from_env())
