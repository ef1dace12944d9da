"""Model backends and the provider factory."""

from __future__ import annotations

from arian.config import Settings
from arian.llm.gemini import GeminiBackend
from arian.llm.interface import ModelBackend
from arian.llm.ollama import OllamaBackend


def build_backend(settings: Settings) -> ModelBackend:
    """Create the backend for the configured provider."""

    if settings.provider == "gemini":
        return GeminiBackend(model=settings.gemini_model, api_key=settings.gemini_api_key)
    return OllamaBackend(base_url=settings.ollama_base_url, model=settings.ollama_model)


__all__ = ["GeminiBackend", "ModelBackend", "OllamaBackend", "build_backend"]
