"""Exceptions raised inside the receipt extraction pipeline."""

from __future__ import annotations


class ReceiptPipelineError(Exception):
    """Base class for pipeline failures."""


class ModelBackendError(ReceiptPipelineError):
    """The model backend could not produce a reply."""


class ModelTimeoutError(ModelBackendError):
    """The model backend gave up waiting for a reply."""


class InvalidReceiptJSON(ReceiptPipelineError):
    """The model reply did not contain a usable JSON receipt."""


class ReceiptValidationError(ReceiptPipelineError):
    """A decoded receipt failed strict schema validation."""


__all__ = [
    "ReceiptPipelineError",
    "ModelBackendError",
    "ModelTimeoutError",
    "InvalidReceiptJSON",
    "ReceiptValidationError",
]
