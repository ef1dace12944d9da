"""Tests for fence stripping of model replies."""

from __future__ import annotations

import pytest

from arian.ocr.decoder import decode_receipt
from arian.ocr.extract import extract_json_text

BODY = '{"merchant": "Acme", "items": [{"raw": "EGGS", "qty": 2, "unit_price": 3.25}], "total": 6.5}'


@pytest.mark.parametrize(
    "raw",
    [
        f"```json\n{BODY}\n```",
        f"```\n{BODY}\n```",
        BODY,
        f"  \n{BODY}\n\n",
        f"```json {BODY}```",
    ],
)
def test_fence_wrapping_does_not_change_decoded_record(raw):
    assert extract_json_text(raw) == BODY
    assert decode_receipt(extract_json_text(raw)) == decode_receipt(BODY)


def test_stray_fences_are_removed_anywhere():
    assert extract_json_text('{"a": 1}\n```') == '{"a": 1}'


def test_commentary_outside_fences_is_kept():
    raw = f"Here is the receipt:\n```json\n{BODY}\n```"
    assert extract_json_text(raw) == f"Here is the receipt:\n{BODY}"
