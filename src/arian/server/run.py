"""Helper for running the Arian ASGI application under uvicorn."""

from __future__ import annotations

import logging
import os

import uvicorn
from pydantic import ValidationError

from arian.config import Settings, get_settings
from arian.logging_utils import configure_logging

logger = logging.getLogger(__name__)


def load_settings_or_exit() -> Settings:
    """Return settings, aborting start-up with a readable message when invalid."""

    try:
        return get_settings()
    except ValidationError as exc:
        messages = "; ".join(error["msg"] for error in exc.errors())
        raise SystemExit(f"Invalid configuration: {messages}") from exc


def main() -> None:
    """Entry point used by `arian serve` and `arian-server`."""

    settings = load_settings_or_exit()
    configure_logging(settings.log_level, settings.log_format, [settings.gemini_api_key or ""])
    reload_enabled = os.environ.get("RELOAD") == "1"

    logger.info(
        "Starting server addr=%s provider=%s",
        settings.listen_address,
        settings.provider,
    )
    uvicorn.run(
        "arian.server.app:create_app",
        factory=True,
        host=settings.listen_host,
        port=settings.listen_port,
        reload=reload_enabled,
        log_config=None,
    )


if __name__ == "__main__":
    main()
