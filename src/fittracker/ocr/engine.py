"""Tesseract text extraction for receipt images."""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

import pytesseract
from PIL import Image, ImageFilter, ImageOps
from pytesseract import Output

from fittracker.models.receipt import ReceiptText

logger = logging.getLogger(__name__)

DEFAULT_OCR_LANG = "hun+eng"


class TesseractOcrEngine:
    """Run Tesseract over receipt pages and report text with a 0-100 confidence."""

    def __init__(self, *, lang: str = DEFAULT_OCR_LANG) -> None:
        self._lang = lang

    @property
    def lang(self) -> str:
        return self._lang

    def recognize(self, images: Sequence[Image.Image]) -> ReceiptText:
        page_texts: List[str] = []
        confidences: List[float] = []
        total_pages = len(images)

        for page_number, raw_image in enumerate(images, start=1):
            processed = self._preprocess_image(raw_image)
            text = pytesseract.image_to_string(processed, lang=self._lang)
            data = pytesseract.image_to_data(processed, lang=self._lang, output_type=Output.DICT)
            page_texts.append(text.strip())
            confidences.extend(self._word_confidences(data))
            logger.debug(
                "OCR progress: %d%% (page %s/%s)",
                round(page_number * 100 / total_pages),
                page_number,
                total_pages,
            )

        confidence = sum(confidences) / len(confidences) if confidences else 0.0
        text_output = "\n".join(entry for entry in page_texts if entry)
        logger.info(
            "OCR completed pages=%s lines=%s confidence=%.1f",
            total_pages,
            len(text_output.splitlines()),
            confidence,
        )
        return ReceiptText.from_raw(text_output, confidence)

    def _preprocess_image(self, image: Image.Image) -> Image.Image:
        processed = ImageOps.grayscale(image)
        processed = ImageOps.autocontrast(processed)
        processed = processed.filter(ImageFilter.MedianFilter(size=3))
        try:
            osd = pytesseract.image_to_osd(processed)
        except pytesseract.TesseractError as exc:
            # Orientation detection fails on small or sparse images.
            logger.debug("Skipping orientation correction: %s", exc)
            return processed
        rotation = self._parse_rotation_from_osd(osd)
        if rotation:
            processed = processed.rotate(-rotation, expand=True, fillcolor=255)
        return processed

    @staticmethod
    def _parse_rotation_from_osd(osd: str) -> int:
        match = re.search(r"Rotate: (\d+)", osd or "")
        if not match:
            return 0
        return int(match.group(1)) % 360

    @staticmethod
    def _word_confidences(data: dict[str, list]) -> List[float]:
        values: List[float] = []
        texts = data.get("text", [])
        for idx, raw_conf in enumerate(data.get("conf", [])):
            word = texts[idx] if idx < len(texts) else ""
            if not str(word or "").strip():
                continue
            confidence = _safe_float(raw_conf)
            if confidence is not None and confidence >= 0:
                values.append(confidence)
        return values


def _safe_float(value: object) -> Optional[float]:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


__all__ = ["DEFAULT_OCR_LANG", "TesseractOcrEngine"]
