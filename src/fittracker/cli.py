"""Command-line interface for fittracker."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from fittracker.config import get_settings
from fittracker.logging_utils import configure_logging
from fittracker.ocr import HeuristicReceiptParser, build_bill_analysis_service
from fittracker.translation import build_live_translator

app = typer.Typer(help="Fittracker bill analysis and translation commands.")


@app.callback()
def _setup() -> None:
    settings = get_settings()
    configure_logging(
        settings.log_level,
        settings.log_format,
        [settings.api_token or "", settings.receipt_llm_api_key or ""],
    )


def _echo_json(payload: dict, pretty: bool) -> None:
    typer.echo(
        json.dumps(payload, indent=2 if pretty else None, sort_keys=pretty, ensure_ascii=False)
    )


@app.command("analyze-bill")
def analyze_bill(
    image_url: str = typer.Argument(..., help="Image URL, data URL or local file path."),
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print output JSON."),
) -> None:
    """
    Run OCR and receipt parsing against a bill image and print the analysis.
    """

    result = build_bill_analysis_service().analyze(image_url)
    _echo_json(result.to_payload(), pretty)
    if not result.success:
        raise typer.Exit(code=1)


@app.command("parse-text")
def parse_text(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="OCR text file."),
    confidence: float = typer.Option(
        100.0, "--confidence", min=0.0, max=100.0, help="OCR confidence (0-100)."
    ),
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print output JSON."),
) -> None:
    """Run the heuristic receipt parser on already extracted text."""

    parser = HeuristicReceiptParser(currency=get_settings().default_currency)
    parsed = parser.parse(path.read_text(encoding="utf-8"), confidence=confidence)
    _echo_json(parsed.model_dump(mode="json", by_alias=True), pretty)


@app.command()
def translate(
    text: str = typer.Argument(..., help="English text to translate."),
    lang: str = typer.Option("hu", "--lang", help="Target language code."),
) -> None:
    """Translate a recipe fragment using the dictionary, cache and API tiers."""

    typer.echo(build_live_translator().translate(text, lang))


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the ``fittracker`` console script."""
    app(prog_name="fittracker", args=argv)


if __name__ == "__main__":
    main()
