"""Pydantic models for parsed receipts and parse results."""

from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class LineItem(BaseModel):
    """Single purchased line as read from the receipt."""

    raw: str = ""
    name: Optional[str] = None
    quantity: float = Field(default=1.0, alias="qty", allow_inf_nan=False)
    unit_price: float = Field(default=0.0, allow_inf_nan=False)

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def line_total(self) -> float:
        return self.quantity * self.unit_price


class ReceiptRecord(BaseModel):
    """Structured view of a receipt.

    Optional fields stay ``None`` when the model could not read them, so an
    unknown total is never confused with a zero total.
    """

    merchant: Optional[str] = None
    date: Optional[str] = None
    currency: Optional[str] = None
    items: list[LineItem] = Field(default_factory=list)
    subtotal: Optional[float] = Field(default=None, allow_inf_nan=False)
    tax: Optional[float] = Field(default=None, allow_inf_nan=False)
    total: Optional[float] = Field(default=None, allow_inf_nan=False)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ErrorKind(str, Enum):
    """Failure categories reported for a parse request."""

    INVALID_IMAGE = "INVALID_IMAGE"
    TIMEOUT = "TIMEOUT"
    MODEL_ERROR = "MODEL_ERROR"
    PARSE_FAILED = "PARSE_FAILED"


class ParseError(BaseModel):
    code: ErrorKind
    message: str
    # Model reply that failed to decode; kept for local debugging only.
    raw_response: Optional[str] = None


class ParseReceiptResponse(BaseModel):
    """Outcome of a parse request; exactly one of ``data`` or ``error`` is set."""

    success: bool
    data: Optional[ReceiptRecord] = None
    error: Optional[ParseError] = None

    @classmethod
    def ok(cls, record: ReceiptRecord) -> "ParseReceiptResponse":
        return cls(success=True, data=record)

    @classmethod
    def failure(
        cls,
        code: ErrorKind,
        message: str,
        *,
        raw_response: Optional[str] = None,
    ) -> "ParseReceiptResponse":
        error = ParseError(code=code, message=message, raw_response=raw_response)
        return cls(success=False, error=error)


class HealthResponse(BaseModel):
    status: Literal["ok", "unhealthy"]
    model: str
