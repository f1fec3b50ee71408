"""Receipt OCR pipeline utilities."""

from .acquisition import ReceiptImageLoader, UnsupportedReceiptError
from .engine import TesseractOcrEngine
from .llm_client import LLMParseOutcome, ReceiptLLMClient, build_receipt_llm_client
from .parser import HeuristicReceiptParser, normalize_receipt_date, parse_amount
from .pipeline import BillAnalysisService, analyze_bill_image, build_bill_analysis_service

__all__ = [
    "BillAnalysisService",
    "HeuristicReceiptParser",
    "LLMParseOutcome",
    "ReceiptImageLoader",
    "ReceiptLLMClient",
    "TesseractOcrEngine",
    "UnsupportedReceiptError",
    "analyze_bill_image",
    "build_bill_analysis_service",
    "build_receipt_llm_client",
    "normalize_receipt_date",
    "parse_amount",
]
