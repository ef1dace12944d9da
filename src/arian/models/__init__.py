"""Pydantic models defining shared data contracts."""

from arian.models.receipt import (
    ErrorKind,
    HealthResponse,
    LineItem,
    ParseError,
    ParseReceiptResponse,
    ReceiptRecord,
)

__all__ = [
    "ErrorKind",
    "HealthResponse",
    "LineItem",
    "ParseError",
    "ParseReceiptResponse",
    "ReceiptRecord",
]
