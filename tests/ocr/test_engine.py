"""Tests for the Tesseract OCR engine wrapper."""

from __future__ import annotations

import shutil
from types import SimpleNamespace

import pytest
from PIL import Image, ImageDraw

from fittracker.ocr import engine
from fittracker.ocr.engine import TesseractOcrEngine


class DummyTesseractError(Exception):
    pass


class DummyPytesseract:
    TesseractError = DummyTesseractError

    def __init__(self, osd: str = "Rotate: 0", osd_error: bool = False) -> None:
        self.osd = osd
        self.osd_error = osd_error
        self.string_calls: list[str] = []
        self.rotated_sizes: list[tuple[int, int]] = []

    def image_to_string(self, image, lang):
        self.string_calls.append(lang)
        self.rotated_sizes.append(image.size)
        return "  LIDL\nTej 2L 450\n"

    @staticmethod
    def image_to_data(image, lang, output_type):
        assert output_type == "DICT"
        return {
            "text": ["LIDL", "", "Tej", "2L", "450", "noise"],
            "conf": ["90", "-1", "80", "70", 100, "-1"],
        }

    def image_to_osd(self, image):
        if self.osd_error:
            raise DummyTesseractError("Too few characters")
        return self.osd


@pytest.fixture()
def install_tesseract(monkeypatch):
    def _install(**options) -> DummyPytesseract:
        dummy = DummyPytesseract(**options)
        monkeypatch.setattr(engine, "pytesseract", dummy)
        monkeypatch.setattr(engine, "Output", SimpleNamespace(DICT="DICT"))
        return dummy

    return _install


def _page(size=(40, 20)) -> Image.Image:
    return Image.new("RGB", size, color=(255, 255, 255))


def test_recognize_joins_pages_and_averages_word_confidence(install_tesseract):
    dummy_tesseract = install_tesseract()
    result = TesseractOcrEngine(lang="hun+eng").recognize([_page(), _page()])

    assert result.lines == ("LIDL", "Tej 2L 450", "LIDL", "Tej 2L 450")
    # blank words and negative confidences are ignored
    assert result.confidence == pytest.approx((90 + 80 + 70 + 100) / 4)
    assert dummy_tesseract.string_calls == ["hun+eng", "hun+eng"]


def test_recognize_without_pages_returns_empty_text(install_tesseract):
    install_tesseract()
    result = TesseractOcrEngine().recognize([])

    assert result.text == ""
    assert result.confidence == 0.0


def test_preprocess_applies_osd_rotation(install_tesseract):
    dummy_tesseract = install_tesseract(osd="Page number: 0\nRotate: 90\nOrientation confidence: 4.2")
    TesseractOcrEngine().recognize([_page((40, 20))])

    assert dummy_tesseract.rotated_sizes == [(20, 40)]


def test_preprocess_survives_osd_failure(install_tesseract):
    dummy_tesseract = install_tesseract(osd_error=True)
    result = TesseractOcrEngine().recognize([_page((40, 20))])

    assert dummy_tesseract.rotated_sizes == [(40, 20)]
    assert result.lines[0] == "LIDL"


@pytest.mark.parametrize(
    ("osd", "expected"),
    [("Rotate: 180", 180), ("Rotate: 360", 0), ("garbage", 0), ("", 0)],
)
def test_parse_rotation_from_osd(osd, expected):
    assert TesseractOcrEngine._parse_rotation_from_osd(osd) == expected


@pytest.mark.real_ocr
def test_real_tesseract_reads_rendered_text():
    pytest.importorskip("pytesseract")
    from pytesseract import get_tesseract_version

    if not shutil.which("tesseract"):
        pytest.skip("tesseract binary not available")
    try:
        get_tesseract_version()
    except Exception:  # pragma: no cover
        pytest.skip("pytesseract cannot reach tesseract executable")

    image = Image.new("RGB", (400, 80), color=(255, 255, 255))
    ImageDraw.Draw(image).text((10, 30), "TOTAL 450", fill=(0, 0, 0))

    result = TesseractOcrEngine(lang="eng").recognize([image])

    assert 0.0 <= result.confidence <= 100.0
