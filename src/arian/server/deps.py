"""Dependency definitions for the Arian API server."""

from __future__ import annotations

from fastapi import Request

from arian.config import get_settings
from arian.llm import build_backend
from arian.ocr import ReceiptPipeline


def build_pipeline() -> ReceiptPipeline:
    """Create the receipt pipeline for the configured provider."""

    return ReceiptPipeline(build_backend(get_settings()))


def get_pipeline(request: Request) -> ReceiptPipeline:
    """Return the pipeline created when the application started."""

    return request.app.state.pipeline
