"""Shared pytest fixtures for the Arian test suite."""

from __future__ import annotations

from typing import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from arian.config import get_settings
from arian.ocr import ReceiptPipeline
from arian.server.app import create_app
from tests.fakes import FakeBackend

_ENV_KEYS = (
    "ARIAN_LISTEN_ADDRESS",
    "ARIAN_LOG_LEVEL",
    "ARIAN_LOG_FORMAT",
    "ARIAN_LOG_REQUESTS",
    "ARIAN_PROVIDER",
    "ARIAN_OLLAMA_BASE_URL",
    "ARIAN_OLLAMA_MODEL",
    "ARIAN_GEMINI_API_KEY",
    "ARIAN_GEMINI_MODEL",
    "GOOGLE_API_KEY",
    "OLLAMA_HOST",
)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Ensure each test starts from default settings without stray .env files."""

    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
def app(fake_backend) -> Generator[FastAPI, None, None]:
    """Create a new FastAPI app backed by the fake model for each test."""

    application = create_app(pipeline=ReceiptPipeline(fake_backend))
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> TestClient:
    """Return a test client bound to the FastAPI app."""

    return TestClient(app)
