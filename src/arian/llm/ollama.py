"""Ollama backend for locally served vision models."""

from __future__ import annotations

import base64
import logging

import httpx

from arian.ocr.errors import ModelBackendError, ModelTimeoutError

MODEL_TIMEOUT = 300.0
HEALTH_TIMEOUT = 5.0

logger = logging.getLogger(__name__)


class OllamaBackend:
    """Call Ollama's ``/api/generate`` endpoint with one embedded image."""

    provider = "ollama"

    def __init__(
        self,
        *,
        base_url: str,
        model: str,
        timeout: float = MODEL_TIMEOUT,
        health_timeout: float = HEALTH_TIMEOUT,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self.model = model
        self._timeout = timeout
        self._health_timeout = health_timeout

    async def generate(self, image: bytes, mime_type: str, prompt: str) -> str:
        # Ollama sniffs the image format itself, so mime_type is not sent.
        payload = {
            "model": self.model,
            "prompt": prompt,
            "images": [base64.b64encode(image).decode("ascii")],
            "stream": False,
        }
        endpoint = f"{self._base_url}/api/generate"
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(endpoint, json=payload)
        except httpx.TimeoutException as exc:
            raise ModelTimeoutError(f"ollama: request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise ModelBackendError(f"ollama: {exc}") from exc

        if response.is_error:
            raise ModelBackendError(
                f"ollama: status {response.status_code}: {_error_detail(response)}"
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise ModelBackendError("ollama: response body is not JSON") from exc

        text = body.get("response") if isinstance(body, dict) else None
        if not isinstance(text, str):
            raise ModelBackendError("ollama: response did not include generated text")
        if body.get("done") is False:
            logger.warning("Ollama reported an unfinished generation model=%s", self.model)
        return text

    async def health(self) -> bool:
        endpoint = f"{self._base_url}/api/tags"
        try:
            async with httpx.AsyncClient(timeout=self._health_timeout) as client:
                response = await client.get(endpoint)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Ollama health check failed: %s", exc)
            return False
        return True


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()[:200]
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.text.strip()[:200]


__all__ = ["OllamaBackend"]
