"""Tests for the fittracker command-line interface."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from fittracker import cli
from fittracker.models.receipt import BillAnalysisResult, ParsedReceipt

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setenv("FITTRACKER_LOG_LEVEL", "WARNING")


class StubService:
    def __init__(self, result: BillAnalysisResult) -> None:
        self.result = result
        self.calls: list[str] = []

    def analyze(self, image_url):
        self.calls.append(image_url)
        return self.result


def test_analyze_bill_prints_payload(monkeypatch):
    service = StubService(BillAnalysisResult.succeeded(ParsedReceipt(merchant="ALDI", total_amount=99)))
    monkeypatch.setattr(cli, "build_bill_analysis_service", lambda: service)

    result = runner.invoke(cli.app, ["analyze-bill", "bill.png", "--no-pretty"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["success"] is True
    assert payload["analysis"]["merchant"] == "ALDI"
    assert service.calls == ["bill.png"]


def test_analyze_bill_failure_exits_non_zero(monkeypatch):
    service = StubService(BillAnalysisResult.failed("Failed to analyze image"))
    monkeypatch.setattr(cli, "build_bill_analysis_service", lambda: service)

    result = runner.invoke(cli.app, ["analyze-bill", "bill.png"])

    assert result.exit_code == 1
    assert json.loads(result.stdout) == {"message": "Failed to analyze image", "success": False}


def test_parse_text_runs_heuristic_parser(tmp_path, lidl_receipt_text):
    path = tmp_path / "receipt.txt"
    path.write_text(lidl_receipt_text, encoding="utf-8")

    result = runner.invoke(cli.app, ["parse-text", str(path), "--confidence", "80"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["merchant"] == "LIDL Magyarország Bt."
    assert payload["totalAmount"] == 2346.8
    assert payload["date"] == "2024-03-15"
    assert payload["confidence"] == pytest.approx(0.8)


def test_parse_text_rejects_out_of_range_confidence(tmp_path):
    path = tmp_path / "receipt.txt"
    path.write_text("LIDL", encoding="utf-8")

    result = runner.invoke(cli.app, ["parse-text", str(path), "--confidence", "150"])

    assert result.exit_code != 0


def test_translate_prints_translation(monkeypatch):
    class StubTranslator:
        def translate(self, text, target_lang):
            return f"{text}->{target_lang}"

    monkeypatch.setattr(cli, "build_live_translator", lambda: StubTranslator())

    result = runner.invoke(cli.app, ["translate", "Serve warm", "--lang", "de"])

    assert result.exit_code == 0
    assert result.stdout.strip() == "Serve warm->de"
