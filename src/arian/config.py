"""Application configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ENV_FILE_CANDIDATES = (Path(".env"), Path(".env.local"))

DEFAULT_LISTEN_ADDRESS = "127.0.0.1:55556"


class Settings(BaseModel):
    """Service settings loaded from environment variables or .env files."""

    listen_address: str = Field(
        default=DEFAULT_LISTEN_ADDRESS,
        description="host:port the HTTP server binds to. A bare port listens on all interfaces.",
    )
    log_level: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(
        default="plain",
        description="Logging format (plain/json).",
    )
    log_requests: bool = Field(
        default=True,
        description="Emit request access logs when true.",
    )
    provider: Literal["ollama", "gemini"] = Field(
        default="ollama",
        description="Model provider used for receipt extraction (ollama or gemini).",
    )
    ollama_base_url: str = Field(
        default="http://localhost:11434",
        description="Base URL of the Ollama server.",
    )
    ollama_model: str = Field(
        default="qwen2.5vl:3b",
        description="Vision model served by Ollama.",
    )
    gemini_api_key: Optional[str] = Field(
        default=None,
        description="Google API key, required when provider is gemini.",
    )
    gemini_model: str = Field(
        default="gemini-2.0-flash",
        description="Gemini model identifier.",
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("provider", mode="before")
    @classmethod
    def normalize_provider(cls, value: object) -> str:
        """Anything other than gemini selects the local Ollama backend."""
        if isinstance(value, str) and value.strip().lower() == "gemini":
            return "gemini"
        return "ollama"

    @field_validator("listen_address")
    @classmethod
    def validate_listen_address(cls, value: str) -> str:
        parse_listen_address(value)
        return value.strip()

    @field_validator("log_format", mode="before")
    @classmethod
    def normalize_log_format(cls, value: object) -> str:
        normalized = str(value or "").strip().lower()
        if normalized == "json":
            return "json"
        return "plain"

    @model_validator(mode="after")
    def require_gemini_key(self) -> "Settings":
        if self.provider == "gemini" and not (self.gemini_api_key or "").strip():
            raise ValueError("GOOGLE_API_KEY is required when ARIAN_PROVIDER=gemini")
        return self

    @property
    def model_name(self) -> str:
        """Model identifier of the selected provider."""
        if self.provider == "gemini":
            return self.gemini_model
        return self.ollama_model

    @property
    def listen_host(self) -> str:
        return parse_listen_address(self.listen_address)[0]

    @property
    def listen_port(self) -> int:
        return parse_listen_address(self.listen_address)[1]


def parse_listen_address(value: str) -> tuple[str, int]:
    """Split ``host:port`` into its parts; ``"8080"`` and ``":8080"`` bind every interface."""

    address = value.strip()
    if ":" not in address:
        address = ":" + address
    host, _, port = address.rpartition(":")
    try:
        port_number = int(port)
    except ValueError as exc:
        raise ValueError(f"Invalid listen address '{value}'") from exc
    if not 0 < port_number < 65536:
        raise ValueError(f"Invalid listen address '{value}': port out of range")
    return host or "0.0.0.0", port_number


def _coerce_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_env_file(path: Path) -> dict[str, str]:
    payload: dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, raw_value = line.split("=", 1)
                payload[key.strip()] = raw_value.strip()
    except FileNotFoundError:
        return {}
    return payload


def _load_env_file_values() -> dict[str, str]:
    values: dict[str, str] = {}
    for candidate in ENV_FILE_CANDIDATES:
        values.update(_parse_env_file(candidate))
    return values


def _load_from_env() -> dict[str, object]:
    """Load optional overrides from env vars (with .env fallbacks)."""

    file_values = _load_env_file_values()

    def _env(key: str) -> Optional[str]:
        return os.environ.get(key) or file_values.get(key)

    payload: dict[str, object] = {}
    if (listen_address := _env("ARIAN_LISTEN_ADDRESS")):
        payload["listen_address"] = listen_address
    if (log_level := _env("ARIAN_LOG_LEVEL")):
        payload["log_level"] = log_level
    if (log_format := _env("ARIAN_LOG_FORMAT")):
        payload["log_format"] = log_format
    if (log_requests := _env("ARIAN_LOG_REQUESTS")):
        payload["log_requests"] = _coerce_bool(log_requests)
    if (provider := _env("ARIAN_PROVIDER")):
        payload["provider"] = provider
    if (ollama_base_url := _env("ARIAN_OLLAMA_BASE_URL") or _env("OLLAMA_HOST")):
        if "://" not in ollama_base_url:
            ollama_base_url = f"http://{ollama_base_url}"
        payload["ollama_base_url"] = ollama_base_url
    if (ollama_model := _env("ARIAN_OLLAMA_MODEL")):
        payload["ollama_model"] = ollama_model
    if (gemini_api_key := _env("ARIAN_GEMINI_API_KEY") or _env("GOOGLE_API_KEY")):
        payload["gemini_api_key"] = gemini_api_key
    if (gemini_model := _env("ARIAN_GEMINI_MODEL")):
        payload["gemini_model"] = gemini_model
    return payload


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings(**_load_from_env())
