"""Prometheus metrics definitions for fittracker."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "fittracker_http_requests_total",
    "Total number of HTTP requests processed by the fittracker API",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "fittracker_http_request_duration_seconds",
    "Latency of HTTP requests processed by the fittracker API",
    ["method", "path"],
)

BILL_ANALYSES = Counter(
    "fittracker_bill_analyses_total",
    "Number of bill analyses by the parser that produced the result",
    ["outcome"],
)

RECEIPT_LLM_REQUESTS = Counter(
    "fittracker_receipt_llm_requests_total",
    "Number of receipt LLM parse attempts by status",
    ["status"],
)

TRANSLATIONS = Counter(
    "fittracker_translations_total",
    "Number of text translations by the source that answered",
    ["source"],
)

__all__ = [
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "BILL_ANALYSES",
    "RECEIPT_LLM_REQUESTS",
    "TRANSLATIONS",
]
