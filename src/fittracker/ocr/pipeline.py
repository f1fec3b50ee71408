"""Bill analysis pipeline: acquisition, OCR, then LLM or heuristic parsing."""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

from PIL import Image

from fittracker import metrics
from fittracker.config import Settings, get_settings
from fittracker.models.receipt import BillAnalysisResult, ParsedReceipt, ReceiptText
from fittracker.ocr.acquisition import ReceiptImageLoader
from fittracker.ocr.engine import TesseractOcrEngine
from fittracker.ocr.llm_client import LLMParseOutcome, build_receipt_llm_client
from fittracker.ocr.parser import HeuristicReceiptParser

logger = logging.getLogger(__name__)

ANALYSIS_FAILED_MESSAGE = "Failed to analyze image"


class ImageLoader(Protocol):
    def load(self, image_ref: str) -> Sequence[Image.Image]: ...


class OcrEngine(Protocol):
    def recognize(self, images: Sequence[Image.Image]) -> ReceiptText: ...


class ReceiptLLM(Protocol):
    def parse_receipt(self, ocr_text: str) -> LLMParseOutcome: ...


class BillAnalysisService:
    """Synchronous, single-request bill analysis.

    Acquisition and OCR failures are fatal and reported as a failed result.
    The LLM strategy runs only when a client is configured and OCR produced
    text; when it fails the heuristic parser, which cannot fail, takes over.
    """

    def __init__(
        self,
        *,
        loader: Optional[ImageLoader] = None,
        engine: Optional[OcrEngine] = None,
        llm_client: Optional[ReceiptLLM] = None,
        parser: Optional[HeuristicReceiptParser] = None,
    ) -> None:
        self._loader = loader or ReceiptImageLoader()
        self._engine = engine or TesseractOcrEngine()
        self._llm_client = llm_client
        self._parser = parser or HeuristicReceiptParser()

    def analyze(self, image_url: str) -> BillAnalysisResult:
        """Run the full pipeline for one image reference."""

        try:
            images = self._loader.load(image_url)
            receipt_text = self._engine.recognize(images)
            analysis = self.parse_text(receipt_text)
        except Exception:
            logger.exception("Bill analysis failed image_url=%s", _describe(image_url))
            metrics.BILL_ANALYSES.labels(outcome="failed").inc()
            return BillAnalysisResult.failed(ANALYSIS_FAILED_MESSAGE)
        return BillAnalysisResult.succeeded(analysis)

    def parse_text(self, receipt_text: ReceiptText) -> ParsedReceipt:
        """Parse OCR output, preferring the LLM and falling back to heuristics."""

        if self._llm_client is not None and receipt_text.text.strip():
            logger.debug("Parsing OCR text with receipt LLM")
            try:
                outcome = self._llm_client.parse_receipt(receipt_text.text)
            except Exception as exc:
                logger.exception("Receipt LLM strategy raised")
                outcome = LLMParseOutcome.failure(f"{type(exc).__name__}: {exc}")
            if outcome.success and outcome.receipt is not None:
                metrics.BILL_ANALYSES.labels(outcome="llm").inc()
                return outcome.receipt
            logger.info("Receipt LLM unavailable (%s); using heuristic parser", outcome.error)

        metrics.BILL_ANALYSES.labels(outcome="heuristic").inc()
        return self._parser.parse(receipt_text)


def _describe(image_url: str) -> str:
    # Data URLs carry the whole image; log only their header.
    if image_url and image_url.startswith("data:"):
        return image_url.split(",", 1)[0] + ",..."
    return image_url


def build_bill_analysis_service(settings: Settings | None = None) -> BillAnalysisService:
    """Create a pipeline wired from application settings."""

    settings = settings or get_settings()
    return BillAnalysisService(
        loader=ReceiptImageLoader(timeout=settings.image_fetch_timeout),
        engine=TesseractOcrEngine(lang=settings.ocr_lang),
        llm_client=build_receipt_llm_client(settings),
        parser=HeuristicReceiptParser(currency=settings.default_currency),
    )


def analyze_bill_image(image_url: str) -> BillAnalysisResult:
    """Analyze a receipt image and return ``{success, analysis?, message?}``."""

    return build_bill_analysis_service().analyze(image_url)


__all__ = [
    "ANALYSIS_FAILED_MESSAGE",
    "BillAnalysisService",
    "analyze_bill_image",
    "build_bill_analysis_service",
]
