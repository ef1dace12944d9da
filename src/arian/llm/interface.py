"""Model backend abstraction layer."""

from __future__ import annotations

from typing import Protocol


class ModelBackend(Protocol):
    """Protocol for multimodal model backends that can read a receipt image."""

    provider: str
    model: str

    async def generate(self, image: bytes, mime_type: str, prompt: str) -> str:
        """Return the model's full text reply for ``prompt`` about ``image``."""

    async def health(self) -> bool:
        """Return whether the backend looks reachable."""
