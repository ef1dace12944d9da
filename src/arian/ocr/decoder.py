"""Decode the model's JSON reply into a ``ReceiptRecord``."""

from __future__ import annotations

import json
import math
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from arian.models.receipt import LineItem, ReceiptRecord
from arian.ocr.errors import InvalidReceiptJSON

DEFAULT_QUANTITY = 1.0
DEFAULT_UNIT_PRICE = 0.0

_PAYLOAD_CONFIG = ConfigDict(
    extra="ignore",
    allow_inf_nan=False,
    coerce_numbers_to_str=True,
)


class ItemPayload(BaseModel):
    """Line item exactly as the prompt asks the model to emit it."""

    raw: Optional[str] = None
    name: Optional[str] = None
    qty: Optional[float] = None
    unit_price: Optional[float] = None

    model_config = _PAYLOAD_CONFIG


class ReceiptPayload(BaseModel):
    """Receipt exactly as the prompt asks the model to emit it."""

    merchant: Optional[str] = None
    date: Optional[str] = None
    currency: Optional[str] = None
    items: Optional[List[Optional[ItemPayload]]] = None
    subtotal: Optional[float] = None
    tax: Optional[float] = None
    total: Optional[float] = None

    model_config = _PAYLOAD_CONFIG

    def line_items(self) -> list[ItemPayload]:
        return [item for item in self.items or [] if item is not None]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name} is not allowed")


def _parse_finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"number {literal} is out of range")
    return value


def _present(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value


def parse_payload(text: str) -> ReceiptPayload:
    """Load ``text`` into the prompt-shaped payload without applying defaults."""

    try:
        document = json.loads(
            text,
            parse_constant=_reject_constant,
            parse_float=_parse_finite_float,
        )
    except ValueError as exc:
        raise InvalidReceiptJSON(f"invalid JSON: {exc}") from exc

    if not isinstance(document, dict):
        raise InvalidReceiptJSON(
            f"invalid JSON: expected an object, got {type(document).__name__}"
        )

    try:
        return ReceiptPayload.model_validate(document)
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        raise InvalidReceiptJSON(f"invalid JSON: {details}") from exc


def to_record(payload: ReceiptPayload) -> ReceiptRecord:
    """Build the domain record, filling per-item defaults."""

    items = [
        LineItem(
            raw=item.raw or "",
            name=_present(item.name),
            quantity=DEFAULT_QUANTITY if item.qty is None else item.qty,
            unit_price=DEFAULT_UNIT_PRICE if item.unit_price is None else item.unit_price,
        )
        for item in payload.line_items()
    ]
    return ReceiptRecord(
        merchant=_present(payload.merchant),
        date=_present(payload.date),
        currency=_present(payload.currency),
        items=items,
        subtotal=payload.subtotal,
        tax=payload.tax,
        total=payload.total,
    )


def decode_receipt(text: str) -> ReceiptRecord:
    """Decode extracted JSON text into a receipt record.

    Only text that is not JSON, or JSON whose shape cannot be coerced into the
    receipt schema, is rejected. Unknown keys and missing optional values are
    tolerated because the text comes from a language model.
    """

    return to_record(parse_payload(text))


__all__ = [
    "ItemPayload",
    "ReceiptPayload",
    "decode_receipt",
    "parse_payload",
    "to_record",
]
