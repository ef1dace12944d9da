"""Tests for decoding model JSON into receipt records."""

from __future__ import annotations

import pytest

from arian.ocr.decoder import decode_receipt, parse_payload
from arian.ocr.errors import InvalidReceiptJSON
from arian.ocr.scoring import score_confidence


def test_decode_full_receipt():
    record = decode_receipt(
        """
        {
          "merchant": "Costco",
          "date": "2024-05-01",
          "currency": "CAD",
          "items": [
            {"raw": "KIRKLAND ORG EGGS 2DZ", "name": "Organic Eggs 2 Dozen", "qty": 1.0, "unit_price": 8.99},
            {"raw": "BANANAS", "name": "Bananas", "qty": 2, "unit_price": 1.99}
          ],
          "subtotal": 12.97,
          "tax": 0.0,
          "total": 12.97
        }
        """
    )

    assert record.merchant == "Costco"
    assert record.date == "2024-05-01"
    assert record.currency == "CAD"
    assert record.tax == 0.0
    assert record.total == pytest.approx(12.97)
    assert [item.raw for item in record.items] == ["KIRKLAND ORG EGGS 2DZ", "BANANAS"]
    assert record.items[1].quantity == 2.0
    assert record.items[1].unit_price == pytest.approx(1.99)
    assert record.confidence == 0.0


def test_missing_and_null_fields_stay_absent():
    record = decode_receipt('{"merchant": null, "date": null, "items": [], "total": null}')

    assert record.merchant is None
    assert record.date is None
    assert record.currency is None
    assert record.subtotal is None
    assert record.tax is None
    assert record.total is None
    assert record.items == []


def test_empty_strings_are_treated_as_absent():
    record = decode_receipt('{"merchant": "", "currency": "  ", "items": [{"raw": "X", "name": ""}]}')

    assert record.merchant is None
    assert record.currency is None
    assert record.items[0].name is None


@pytest.mark.parametrize("date", ['""', '"   "', "null"])
def test_blank_date_is_absent_and_earns_no_confidence(date):
    record = decode_receipt('{"merchant": "Acme", "date": %s, "items": []}' % date)

    assert record.date is None
    assert score_confidence(record) == pytest.approx(0.6)


def test_item_defaults_are_applied():
    record = decode_receipt('{"items": [{"raw": "MILK"}, {"raw": "", "qty": null, "unit_price": null}]}')

    first, second = record.items
    assert first.quantity == 1.0
    assert first.unit_price == 0.0
    assert second.raw == ""
    assert second.quantity == 1.0
    assert second.unit_price == 0.0


def test_unknown_fields_are_ignored_and_numbers_coerced():
    record = decode_receipt(
        '{"merchant": "Acme", "store_id": 7, "confidence": 0.99,'
        ' "items": [{"raw": "A", "qty": "2", "unit_price": "1.50", "sku": "x"}], "total": "3.00"}'
    )

    assert record.items[0].quantity == 2.0
    assert record.items[0].unit_price == 1.5
    assert record.total == 3.0
    assert record.confidence == 0.0


def test_null_entries_in_items_are_skipped():
    record = decode_receipt('{"items": [null, {"raw": "A"}]}')
    assert [item.raw for item in record.items] == ["A"]


@pytest.mark.parametrize(
    "text",
    [
        "The receipt shows eggs for $4.50.",
        '{"merchant": "Acme", "items": [',
        "",
        '{"total": NaN}',
        '{"total": Infinity}',
        '{"total": 1e999}',
    ],
)
def test_invalid_json_is_rejected(text):
    with pytest.raises(InvalidReceiptJSON) as excinfo:
        decode_receipt(text)
    assert str(excinfo.value).startswith("invalid JSON")


@pytest.mark.parametrize(
    "text",
    [
        "[1, 2, 3]",
        '"just a string"',
        '{"items": "eggs"}',
        '{"total": "about five dollars"}',
    ],
)
def test_wrong_shape_is_rejected(text):
    with pytest.raises(InvalidReceiptJSON):
        decode_receipt(text)


def test_parse_payload_keeps_missing_values_unset():
    payload = parse_payload('{"items": [{"raw": "A"}]}')
    assert payload.line_items()[0].qty is None
    assert payload.line_items()[0].unit_price is None
