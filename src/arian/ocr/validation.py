"""Strict schema checks for decoded receipt payloads."""

from __future__ import annotations

from arian.ocr.decoder import ReceiptPayload
from arian.ocr.errors import ReceiptValidationError


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def validate_receipt(payload: ReceiptPayload) -> None:
    """Raise ``ReceiptValidationError`` unless every required field was read.

    This is stricter than decoding: merchant, currency, total and at least one
    item must be present, and each item needs its raw text, a name and a unit
    price. Runs before defaults are applied so a missing unit price is caught.
    """

    if _blank(payload.merchant):
        raise ReceiptValidationError("merchant is required")
    if _blank(payload.currency):
        raise ReceiptValidationError("currency is required")
    if payload.total is None:
        raise ReceiptValidationError("total is required")

    items = payload.line_items()
    if not items:
        raise ReceiptValidationError("at least one item is required")
    for index, item in enumerate(items):
        if _blank(item.raw):
            raise ReceiptValidationError(f"item[{index}].raw is required")
        if _blank(item.name):
            raise ReceiptValidationError(f"item[{index}].name is required")
        if item.unit_price is None:
            raise ReceiptValidationError(f"item[{index}].unit_price is required")


__all__ = ["validate_receipt"]
