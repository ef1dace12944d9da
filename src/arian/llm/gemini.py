"""Gemini backend for the hosted vision model."""

from __future__ import annotations

from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from arian.ocr.errors import ModelBackendError, ModelTimeoutError

MODEL_TIMEOUT_MS = 300_000


class GeminiBackend:
    """Send the prompt and image as one multimodal ``generate_content`` call."""

    provider = "gemini"

    def __init__(
        self,
        *,
        model: str,
        api_key: Optional[str] = None,
        client: Optional[Any] = None,
    ) -> None:
        self.model = model
        if client is None:
            client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=MODEL_TIMEOUT_MS),
            )
        self._client = client

    async def generate(self, image: bytes, mime_type: str, prompt: str) -> str:
        contents = [
            types.Content(
                role="user",
                parts=[
                    types.Part.from_text(text=prompt),
                    types.Part.from_bytes(data=image, mime_type=mime_type),
                ],
            )
        ]
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=contents,
            )
        except genai_errors.APIError as exc:
            raise ModelBackendError(f"gemini: {exc}") from exc
        except httpx.TimeoutException as exc:
            raise ModelTimeoutError(f"gemini: request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise ModelBackendError(f"gemini: {exc}") from exc

        return response.text or ""

    async def health(self) -> bool:
        # Gemini has no cheap liveness endpoint.
        return True


__all__ = ["GeminiBackend"]
