"""Pydantic models for receipt (bill) analysis."""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MAX_RECEIPT_ITEMS = 20
UNKNOWN_MERCHANT = "Ismeretlen"
UNKNOWN_ITEM_NAME = "Ismeretlen tétel"
DEFAULT_CURRENCY = "HUF"


def clamp_confidence(value: float) -> float:
    """Clamp a confidence score into the closed ``[0, 1]`` interval."""

    return min(max(float(value), 0.0), 1.0)


class ReceiptText(BaseModel):
    """Raw OCR output for one receipt: ordered lines plus engine confidence (0-100)."""

    lines: tuple[str, ...] = ()
    confidence: float = Field(default=0.0, ge=0.0, le=100.0)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_raw(cls, text: str, confidence: float | None) -> "ReceiptText":
        value = float(confidence or 0.0)
        return cls(lines=tuple((text or "").splitlines()), confidence=min(max(value, 0.0), 100.0))

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


class ReceiptItem(BaseModel):
    """Single purchased line on a receipt."""

    name: str
    price: float = Field(default=0.0, ge=0.0)
    quantity: int = Field(default=1, ge=1)


class ParsedReceipt(BaseModel):
    """Structured, normalized view of a receipt."""

    total_amount: float = Field(default=0.0, ge=0.0)
    merchant: str = UNKNOWN_MERCHANT
    purchase_date: date = Field(default_factory=date.today, alias="date")
    items: list[ReceiptItem] = Field(default_factory=list)
    currency: str = DEFAULT_CURRENCY
    confidence: float = 0.0
    note: str = ""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("confidence")
    @classmethod
    def _clamp_confidence(cls, value: float) -> float:
        return clamp_confidence(value)

    @field_validator("items")
    @classmethod
    def _cap_items(cls, value: list[ReceiptItem]) -> list[ReceiptItem]:
        return value[:MAX_RECEIPT_ITEMS]


class BillAnalysisRequest(BaseModel):
    """Request body for analyzing an uploaded bill image."""

    image_url: str = Field(alias="imageUrl", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class BillAnalysisResult(BaseModel):
    """Outcome of a bill analysis request as returned to API callers."""

    success: bool
    analysis: Optional[ParsedReceipt] = None
    message: Optional[str] = None

    @classmethod
    def succeeded(cls, analysis: ParsedReceipt) -> "BillAnalysisResult":
        return cls(success=True, analysis=analysis)

    @classmethod
    def failed(cls, message: str) -> "BillAnalysisResult":
        return cls(success=False, message=message)

    def to_payload(self) -> dict[str, object]:
        """Return the JSON body with camelCase keys and unset fields dropped."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
