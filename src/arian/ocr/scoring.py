"""Heuristic confidence score for a decoded receipt."""

from __future__ import annotations

from arian.models.receipt import ReceiptRecord

BASE_SCORE = 0.5
FIELD_BONUS = 0.1
SUBTOTAL_TOLERANCE = 0.05


def subtotal_reconciles(record: ReceiptRecord) -> bool:
    """True when the line items add up to the stated subtotal within 5%."""

    if record.subtotal is None or not record.items:
        return False
    items_sum = sum(item.line_total for item in record.items)
    return abs(items_sum - record.subtotal) <= record.subtotal * SUBTOTAL_TOLERANCE


def score_confidence(record: ReceiptRecord) -> float:
    """Score how complete and self-consistent ``record`` looks, in [0.5, 1.0].

    Each of merchant, date, total and a non-empty item list adds 0.1 to a 0.5
    base, and a reconciled subtotal adds another 0.1. This measures extraction
    completeness, not OCR accuracy.
    """

    bonuses = sum(
        (
            record.merchant is not None,
            record.date is not None,
            record.total is not None,
            bool(record.items),
            subtotal_reconciles(record),
        )
    )
    return min(1.0, BASE_SCORE + FIELD_BONUS * bonuses)


__all__ = ["score_confidence", "subtotal_reconciles"]
