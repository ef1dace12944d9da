"""Integration tests for the receipt parse endpoint."""

from __future__ import annotations

import pytest
from fastapi import status

from arian.ocr import ReceiptPipeline
from arian.ocr.errors import ModelBackendError
from arian.ocr.pipeline import MAX_IMAGE_BYTES
from arian.server import deps
from tests.fakes import FakeBackend


def test_parse_receipt_success(client, fake_backend):
    files = {"file": ("receipt.png", b"\x89PNG\r\n\x1a\n", "image/png")}
    response = client.post("/receipts/parse", files=files)

    assert response.status_code == status.HTTP_200_OK
    payload = response.json()
    assert payload["success"] is True
    assert payload["error"] is None
    data = payload["data"]
    assert data["merchant"] == "Acme"
    assert data["date"] is None
    assert data["items"] == [{"raw": "EGGS", "name": "Eggs", "qty": 1.0, "unit_price": 4.5}]
    assert data["subtotal"] == 4.5
    assert data["confidence"] == pytest.approx(0.9)
    assert fake_backend.calls[0][1] == "image/png"


def test_generic_content_type_defaults_to_jpeg(client, fake_backend):
    files = {"file": ("receipt", b"\xff\xd8\xff", "application/octet-stream")}
    response = client.post("/receipts/parse", files=files)

    assert response.json()["success"] is True
    assert fake_backend.calls[0][1] == "image/jpeg"


@pytest.mark.parametrize("content", [b"", b"x" * (MAX_IMAGE_BYTES + 1)])
def test_invalid_image_is_structured_failure(client, fake_backend, content):
    files = {"file": ("receipt.jpg", content, "image/jpeg")}
    response = client.post("/receipts/parse", files=files)

    assert response.status_code == status.HTTP_200_OK
    payload = response.json()
    assert payload["success"] is False
    assert payload["data"] is None
    assert payload["error"]["code"] == "INVALID_IMAGE"
    assert fake_backend.calls == []


def test_model_error_is_structured_failure(app, client):
    backend = FakeBackend(error=ModelBackendError("ollama: connection refused"))
    app.dependency_overrides[deps.get_pipeline] = lambda: ReceiptPipeline(backend)

    files = {"file": ("receipt.jpg", b"\xff\xd8\xff", "image/jpeg")}
    payload = client.post("/receipts/parse", files=files).json()

    assert payload["success"] is False
    assert payload["error"] == {"code": "MODEL_ERROR", "message": "ollama: connection refused"}


def test_parse_failure_hides_raw_reply(app, client):
    backend = FakeBackend(reply="Sorry, I cannot read this receipt.")
    app.dependency_overrides[deps.get_pipeline] = lambda: ReceiptPipeline(backend)

    files = {"file": ("receipt.jpg", b"\xff\xd8\xff", "image/jpeg")}
    payload = client.post("/receipts/parse", files=files).json()

    assert payload["error"]["code"] == "PARSE_FAILED"
    assert "raw_response" not in payload["error"]


def test_strict_query_parameter(app, client):
    backend = FakeBackend(reply='{"merchant": "Acme", "total": 3.0, "items": []}')
    app.dependency_overrides[deps.get_pipeline] = lambda: ReceiptPipeline(backend)
    files = {"file": ("receipt.jpg", b"\xff\xd8\xff", "image/jpeg")}

    lenient = client.post("/receipts/parse", files=files).json()
    strict = client.post("/receipts/parse", params={"strict": "true"}, files=files).json()

    assert lenient["success"] is True
    assert strict["success"] is False
    assert strict["error"]["code"] == "PARSE_FAILED"


def test_missing_file_is_rejected(client):
    response = client.post("/receipts/parse")
    assert response.status_code == 422
