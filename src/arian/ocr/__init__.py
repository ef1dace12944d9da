"""Receipt extraction pipeline utilities."""

from .decoder import decode_receipt
from .errors import (
    InvalidReceiptJSON,
    ModelBackendError,
    ModelTimeoutError,
    ReceiptPipelineError,
    ReceiptValidationError,
)
from .extract import extract_json_text
from .pipeline import ReceiptPipeline
from .scoring import score_confidence
from .validation import validate_receipt

__all__ = [
    "ReceiptPipeline",
    "ReceiptPipelineError",
    "ModelBackendError",
    "ModelTimeoutError",
    "InvalidReceiptJSON",
    "ReceiptValidationError",
    "decode_receipt",
    "extract_json_text",
    "score_confidence",
    "validate_receipt",
]
