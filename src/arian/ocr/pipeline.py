"""Receipt extraction pipeline: model call, JSON extraction, decoding and scoring."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from time import perf_counter
from typing import Optional

from arian import metrics
from arian.llm.interface import ModelBackend
from arian.models.receipt import ErrorKind, HealthResponse, ParseReceiptResponse
from arian.ocr.decoder import parse_payload, to_record
from arian.ocr.errors import (
    InvalidReceiptJSON,
    ModelBackendError,
    ModelTimeoutError,
    ReceiptValidationError,
)
from arian.ocr.extract import extract_json_text
from arian.ocr.prompt import RECEIPT_PROMPT
from arian.ocr.scoring import score_confidence
from arian.ocr.validation import validate_receipt

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5 MiB
MODEL_DEADLINE_SECONDS = 300.0
HEALTH_DEADLINE_SECONDS = 5.0
DEFAULT_CONTENT_TYPE = "image/jpeg"


@dataclass(frozen=True)
class ModelInvocation:
    """One request to the model backend, built fresh for every parse call."""

    image: bytes
    content_type: str
    prompt: str
    deadline: float


class ReceiptPipeline:
    """Turn a receipt image into a scored ``ReceiptRecord``.

    Every failure is reported as a structured ``ParseReceiptResponse``; nothing
    raised while handling one request escapes ``parse``. The pipeline keeps no
    per-request state, so a single instance can serve concurrent requests.
    """

    def __init__(
        self,
        backend: ModelBackend,
        *,
        prompt: str = RECEIPT_PROMPT,
        max_image_bytes: int = MAX_IMAGE_BYTES,
        model_deadline: float = MODEL_DEADLINE_SECONDS,
    ) -> None:
        self._backend = backend
        self._prompt = prompt
        self._max_image_bytes = max_image_bytes
        self._model_deadline = model_deadline

    @property
    def model(self) -> str:
        return self._backend.model

    async def parse(
        self,
        image: bytes,
        content_type: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        strict: bool = False,
    ) -> ParseReceiptResponse:
        """Parse a receipt image.

        ``timeout`` is the caller's own budget in seconds; the model call runs
        under whichever of it and the five-minute pipeline deadline is shorter.
        With ``strict`` the decoded receipt must also pass ``validate_receipt``.
        """

        if not image:
            logger.warning("Rejected empty receipt image")
            return self._fail(ErrorKind.INVALID_IMAGE, "empty image")
        if len(image) > self._max_image_bytes:
            limit_mib = self._max_image_bytes // (1024 * 1024)
            logger.warning(
                "Rejected receipt image size=%s limit=%s",
                len(image),
                self._max_image_bytes,
            )
            return self._fail(ErrorKind.INVALID_IMAGE, f"image exceeds {limit_mib}MB limit")

        deadline = self._model_deadline
        if timeout is not None:
            deadline = min(deadline, timeout)
        invocation = ModelInvocation(
            image=image,
            content_type=content_type or DEFAULT_CONTENT_TYPE,
            prompt=self._prompt,
            deadline=deadline,
        )

        try:
            raw = await self._call_model(invocation)
        except (TimeoutError, ModelTimeoutError) as exc:
            logger.error(
                "Model call timed out provider=%s deadline=%.1fs: %s",
                self._backend.provider,
                invocation.deadline,
                str(exc) or "deadline exceeded",
            )
            return self._fail(ErrorKind.TIMEOUT, "inference timeout")
        except ModelBackendError as exc:
            logger.error("Model call failed provider=%s: %s", self._backend.provider, exc)
            return self._fail(ErrorKind.MODEL_ERROR, str(exc))
        except Exception as exc:
            logger.exception("Model call raised unexpectedly provider=%s", self._backend.provider)
            return self._fail(ErrorKind.MODEL_ERROR, str(exc) or type(exc).__name__)

        try:
            payload = parse_payload(extract_json_text(raw))
            if strict:
                validate_receipt(payload)
        except InvalidReceiptJSON as exc:
            logger.warning("Receipt parse failed: %s", exc)
            return self._fail(ErrorKind.PARSE_FAILED, str(exc), raw_response=raw)
        except ReceiptValidationError as exc:
            logger.warning("Receipt schema validation failed: %s", exc)
            return self._fail(
                ErrorKind.PARSE_FAILED,
                f"schema validation failed: {exc}",
                raw_response=raw,
            )

        record = to_record(payload)
        confidence = score_confidence(record)
        record = record.model_copy(update={"confidence": confidence})

        logger.info("Parsed receipt items=%s confidence=%.2f", len(record.items), confidence)
        metrics.RECEIPT_PARSES.labels(code="ok").inc()
        return ParseReceiptResponse.ok(record)

    async def health(self) -> HealthResponse:
        """Report backend liveness, bounded to a few seconds."""

        try:
            async with asyncio.timeout(HEALTH_DEADLINE_SECONDS):
                healthy = await self._backend.health()
        except TimeoutError:
            logger.warning("Health check timed out provider=%s", self._backend.provider)
            healthy = False
        return HealthResponse(status="ok" if healthy else "unhealthy", model=self.model)

    async def _call_model(self, invocation: ModelInvocation) -> str:
        start = perf_counter()
        try:
            async with asyncio.timeout(invocation.deadline):
                return await self._backend.generate(
                    invocation.image,
                    invocation.content_type,
                    invocation.prompt,
                )
        finally:
            metrics.MODEL_CALL_LATENCY.labels(provider=self._backend.provider).observe(
                perf_counter() - start
            )

    @staticmethod
    def _fail(
        code: ErrorKind,
        message: str,
        *,
        raw_response: Optional[str] = None,
    ) -> ParseReceiptResponse:
        metrics.RECEIPT_PARSES.labels(code=code.value).inc()
        return ParseReceiptResponse.failure(code, message, raw_response=raw_response)


__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "MAX_IMAGE_BYTES",
    "MODEL_DEADLINE_SECONDS",
    "ModelInvocation",
    "ReceiptPipeline",
]
