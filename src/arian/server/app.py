"""ASGI application for Arian."""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Optional
from uuid import uuid4

from fastapi import Depends, FastAPI, File, Query, Request, UploadFile
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from arian import __version__, metrics
from arian.config import Settings, get_settings
from arian.logging_utils import configure_logging as configure_app_logging
from arian.models.receipt import HealthResponse, ParseReceiptResponse
from arian.ocr import ReceiptPipeline
from arian.server import deps

logger = logging.getLogger(__name__)

# Multipart clients send this when they do not know the image type.
GENERIC_CONTENT_TYPE = "application/octet-stream"


def _configure_logging(settings: Settings) -> None:
    secrets = [settings.gemini_api_key or ""]
    configure_app_logging(settings.log_level, settings.log_format, secrets)


def create_app(pipeline: Optional[ReceiptPipeline] = None) -> FastAPI:
    """Create and configure a FastAPI application instance."""

    settings = get_settings()
    _configure_logging(settings)

    application = FastAPI(title="Arian Receipt OCR", version=__version__)
    application.state.pipeline = pipeline or deps.build_pipeline()
    logger.info(
        "Application created provider=%s model=%s",
        settings.provider,
        application.state.pipeline.model,
    )

    if settings.log_requests:
        access_logger = logging.getLogger("arian.access")

        @application.middleware("http")
        async def log_request_response(request: Request, call_next):
            """Log request/response details and record request metrics."""

            request_id = request.headers.get("X-Request-ID") or uuid4().hex
            request.state.request_id = request_id
            start = perf_counter()
            path = request.url.path
            method = request.method
            try:
                response: Response = await call_next(request)
            except Exception:
                duration_ms = (perf_counter() - start) * 1000
                access_logger.exception(
                    "HTTP %s %s status=500 duration_ms=%.2f",
                    method,
                    path,
                    duration_ms,
                    extra={"request_id": request_id},
                )
                metrics.REQUEST_COUNT.labels(method=method, path=path, status="500").inc()
                metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(
                    duration_ms / 1000.0
                )
                raise

            duration_ms = (perf_counter() - start) * 1000
            response.headers.setdefault("X-Request-ID", request_id)
            access_logger.info(
                "HTTP %s %s status=%s duration_ms=%.2f",
                method,
                path,
                response.status_code,
                duration_ms,
                extra={"request_id": request_id},
            )
            metrics.REQUEST_COUNT.labels(
                method=method,
                path=path,
                status=str(response.status_code),
            ).inc()
            metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(
                duration_ms / 1000.0
            )
            return response

    @application.post(
        "/receipts/parse",
        response_model=ParseReceiptResponse,
        response_model_exclude={"error": {"raw_response"}},
        summary="Extract structured data from a receipt image",
    )
    async def parse_receipt(
        file: UploadFile = File(...),
        strict: bool = Query(default=False, description="Require every core field to be read."),
        pipeline: ReceiptPipeline = Depends(deps.get_pipeline),
    ) -> ParseReceiptResponse:
        """Parse an uploaded receipt; failures come back as ``success=false`` results."""

        content = await file.read()
        logger.debug(
            "Parsing receipt filename=%s content_type=%s size=%s",
            file.filename,
            file.content_type,
            len(content),
        )
        content_type = file.content_type
        if content_type == GENERIC_CONTENT_TYPE:
            content_type = None
        return await pipeline.parse(content, content_type, strict=strict)

    @application.get("/health", response_model=HealthResponse, summary="Backend health")
    async def health(
        pipeline: ReceiptPipeline = Depends(deps.get_pipeline),
    ) -> HealthResponse:
        return await pipeline.health()

    @application.get("/metrics", include_in_schema=False)
    def metrics_endpoint() -> Response:
        payload = generate_latest()
        return Response(content=payload, media_type=CONTENT_TYPE_LATEST)

    return application


__all__ = ["create_app"]
