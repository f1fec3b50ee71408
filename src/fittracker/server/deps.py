"""Dependency definitions for the fittracker API server."""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, HTTPException, Request, status

from fittracker.config import Settings, get_settings
from fittracker.models.receipt import BillAnalysisResult
from fittracker.ocr.pipeline import build_bill_analysis_service
from fittracker.translation import LiveTranslator, build_live_translator

BillAnalyzer = Callable[[str], BillAnalysisResult]


def get_bill_analyzer() -> BillAnalyzer:
    """Return the bill analysis entry point wired from current settings."""

    return build_bill_analysis_service().analyze


def get_translator(request: Request) -> LiveTranslator:
    """Return the translator owned by the running application."""

    translator = getattr(request.app.state, "translator", None)
    if translator is None:
        translator = build_live_translator()
        request.app.state.translator = translator
    return translator


def require_api_token(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """Ensure requests carry the configured API token when required."""

    token = settings.api_token
    if not token:
        return

    auth_header = request.headers.get("Authorization") or ""
    if auth_header.startswith("Bearer ") and auth_header[len("Bearer ") :].strip() == token:
        return
    if request.headers.get("X-API-Key") == token:
        return
    if request.query_params.get("api_token") == token:
        return

    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
