"""Pydantic models defining shared data contracts."""

from fittracker.models.receipt import (
    BillAnalysisRequest,
    BillAnalysisResult,
    ParsedReceipt,
    ReceiptItem,
    ReceiptText,
)
from fittracker.models.translation import (
    RecipeTranslationRequest,
    RecipeTranslationResponse,
    TranslationRequest,
    TranslationResult,
)

__all__ = [
    "BillAnalysisRequest",
    "BillAnalysisResult",
    "ParsedReceipt",
    "ReceiptItem",
    "ReceiptText",
    "RecipeTranslationRequest",
    "RecipeTranslationResponse",
    "TranslationRequest",
    "TranslationResult",
]
