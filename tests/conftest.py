"""Shared pytest fixtures for the fittracker test suite."""

from __future__ import annotations

import io
import os
from typing import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from PIL import Image

from fittracker.config import get_settings
from fittracker.server.app import create_app


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Run each test against default settings, ignoring the developer's env and .env files."""

    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("FITTRACKER_") or key == "OPENAI_API_KEY":
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def app() -> Generator[FastAPI, None, None]:
    """Create a new FastAPI app instance for each test and reset overrides."""

    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> TestClient:
    """Return a test client bound to the FastAPI app."""

    return TestClient(app)


@pytest.fixture()
def png_bytes() -> bytes:
    """A tiny white PNG image."""

    image = Image.new("RGB", (32, 32), color=(255, 255, 255))
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture()
def lidl_receipt_text() -> str:
    return "\n".join(
        [
            "LIDL Magyarország Bt.",
            "NYUGTA",
            "1117 Budapest, Október 23. u. 2.",
            "Tej 2,8% 1L 389",
            "Kenyér fehér 1 299",
            "Banán 1,2 kg 658,80",
            "ÖSSZESEN: 2 346,80",
            "Dátum: 2024.03.15 18:42",
        ]
    )
