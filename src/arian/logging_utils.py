"""Logging set-up for the service, with API key redaction."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Iterable, Sequence

REDACTED = "[redacted]"

# Patterns whose second group is a credential. Google API keys leak through
# request URLs (``?key=``), the ``x-goog-api-key`` header and raw SDK errors.
_CREDENTIAL_PATTERNS = (
    re.compile(r"(Bearer\s+)([A-Za-z0-9\-._~+/=]+)", re.IGNORECASE),
    re.compile(r"([?&]key=)([^&\s'\"]+)", re.IGNORECASE),
    re.compile(r"(x-goog-api-key['\"]?[:=]\s*['\"]?)([^&\s,'\"]+)", re.IGNORECASE),
    re.compile(r"()(AIza[0-9A-Za-z\-_]{35})"),
)

# Attributes attached through ``extra=`` that the JSON output carries.
_CONTEXT_FIELDS = ("request_id", "provider")

_NOISY_LOGGERS = ("httpx", "httpcore", "google_genai")


def redact(text: str, secrets: Sequence[str] = ()) -> str:
    """Mask credentials in ``text``: known key shapes first, then exact secrets."""

    for pattern in _CREDENTIAL_PATTERNS:
        text = pattern.sub(r"\1" + REDACTED, text)
    for secret in secrets:
        text = text.replace(secret, REDACTED)
    return text


class SensitiveDataFilter(logging.Filter):
    """Redact credentials from the message and traceback of every record."""

    _traceback_formatter = logging.Formatter()

    def __init__(self, secrets: Iterable[str]):
        super().__init__()
        self._secrets = tuple(secret.strip() for secret in secrets if secret and secret.strip())

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        cleaned = redact(message, self._secrets)
        if cleaned != message:
            record.msg, record.args = cleaned, ()

        if record.exc_info and not record.exc_text:
            record.exc_text = self._traceback_formatter.formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = redact(record.exc_text, self._secrets)
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with request context when present."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value:
                payload[field] = value

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            payload["exc_info"] = record.exc_text

        return json.dumps(payload, ensure_ascii=True)


def _build_formatter(fmt: str) -> logging.Formatter:
    if (fmt or "").lower() == "json":
        return JsonFormatter()
    return logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )


def configure_logging(level_name: str, fmt: str, secrets: Iterable[str]) -> None:
    """Install a single redacting stderr handler on the root logger.

    uvicorn's loggers are routed through it so access and error lines share the
    format and the redaction.
    """

    level = getattr(logging, level_name.upper(), logging.INFO)
    redaction = SensitiveDataFilter(secrets)

    handler = logging.StreamHandler()
    handler.setFormatter(_build_formatter(fmt))
    handler.addFilter(redaction)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    # These log every request URL at INFO; keep them quiet unless debugging.
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.setLevel(level)
        uvicorn_logger.propagate = True
