"""ASGI application for fittracker."""
# mypy: ignore-errors

from __future__ import annotations

import logging
from time import perf_counter
from typing import Any
from uuid import uuid4

from fastapi import Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from fittracker import __version__, metrics
from fittracker.config import Settings, get_settings
from fittracker.logging_utils import configure_logging as configure_app_logging
from fittracker.models.receipt import BillAnalysisRequest, BillAnalysisResult
from fittracker.models.translation import (
    RecipeTranslationRequest,
    RecipeTranslationResponse,
    TranslationRequest,
    TranslationResult,
)
from fittracker.server import deps
from fittracker.translation import LiveTranslator, build_live_translator

logger = logging.getLogger(__name__)


def _configure_logging(settings: Settings) -> None:
    secrets = [settings.api_token or "", settings.receipt_llm_api_key or ""]
    configure_app_logging(settings.log_level, settings.log_format, secrets)


def create_app() -> FastAPI:
    """Create and configure a FastAPI application instance."""

    settings = get_settings()
    _configure_logging(settings)

    application = FastAPI(title="Fittracker Services", version=__version__)
    application.state.translator = build_live_translator(settings)
    logger.debug("Application created with log level %s", settings.log_level)

    if settings.log_requests:
        access_logger = logging.getLogger("fittracker.access")

        @application.middleware("http")
        async def log_request_response(request: Request, call_next):
            """Log request/response details and record request metrics."""

            request_id = request.headers.get("X-Request-ID") or uuid4().hex
            request.state.request_id = request_id
            start = perf_counter()
            method = request.method
            path = request.url.path
            try:
                response: Response = await call_next(request)
            except Exception:
                duration_ms = (perf_counter() - start) * 1000
                access_logger.exception(
                    "HTTP %s %s status=500 duration_ms=%.2f",
                    method,
                    path,
                    duration_ms,
                    extra={"request_id": request_id},
                )
                metrics.REQUEST_COUNT.labels(method=method, path=path, status="500").inc()
                metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(
                    duration_ms / 1000.0
                )
                raise

            duration_ms = (perf_counter() - start) * 1000
            response.headers.setdefault("X-Request-ID", request_id)
            access_logger.info(
                "HTTP %s %s status=%s duration_ms=%.2f",
                method,
                path,
                response.status_code,
                duration_ms,
                extra={"request_id": request_id},
            )
            metrics.REQUEST_COUNT.labels(
                method=method, path=path, status=str(response.status_code)
            ).inc()
            metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000.0)
            return response

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        log_kwargs: dict[str, Any] = {}
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            log_kwargs["extra"] = {"request_id": request_id}
        logger.warning(
            "Validation error on %s %s: %s",
            request.method,
            request.url.path,
            exc.errors(),
            **log_kwargs,
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": jsonable_encoder(exc.errors(), custom_encoder={bytes: repr})},
        )

    @application.get("/healthz", summary="Liveness probe")
    def healthz() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    @application.post(
        "/finance/analyze-bill",
        summary="Extract totals, merchant, date and items from a bill image",
        responses={status.HTTP_502_BAD_GATEWAY: {"description": "Analysis failed"}},
    )
    def analyze_bill(
        request_payload: BillAnalysisRequest,
        auth: None = Depends(deps.require_api_token),
        analyzer: deps.BillAnalyzer = Depends(deps.get_bill_analyzer),
    ) -> JSONResponse:
        result: BillAnalysisResult = analyzer(request_payload.image_url)
        if result.success and result.analysis is not None:
            logger.info(
                "Bill analyzed merchant=%s total=%s items=%s note=%s",
                result.analysis.merchant,
                result.analysis.total_amount,
                len(result.analysis.items),
                result.analysis.note,
            )
            return JSONResponse(status_code=status.HTTP_200_OK, content=result.to_payload())
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=result.to_payload())

    @application.post(
        "/translate",
        response_model=TranslationResult,
        response_model_by_alias=True,
        summary="Translate a short text",
    )
    def translate_text(
        request_payload: TranslationRequest,
        translator: LiveTranslator = Depends(deps.get_translator),
    ) -> TranslationResult:
        return translator.translate_result(request_payload.text, request_payload.target_lang)

    @application.post(
        "/recipes/translate",
        response_model=RecipeTranslationResponse,
        response_model_by_alias=True,
        summary="Translate recipe titles, ingredients and steps",
    )
    def translate_recipes(
        request_payload: RecipeTranslationRequest,
        auth: None = Depends(deps.require_api_token),
        translator: LiveTranslator = Depends(deps.get_translator),
    ) -> RecipeTranslationResponse:
        recipes = translator.translate_recipes(request_payload.recipes, request_payload.target_lang)
        return RecipeTranslationResponse(recipes=recipes)

    @application.get("/metrics", include_in_schema=False)
    def metrics_endpoint() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return application


app = create_app()
