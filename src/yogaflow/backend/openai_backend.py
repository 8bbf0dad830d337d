"""OpenAI-compatible chat completions backend."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

import httpx

from yogaflow.backend.base import TextRequest, TextResult
from yogaflow.errors import BackendError

if TYPE_CHECKING:
    from yogaflow.config import LLMSettings

logger = logging.getLogger(__name__)


class OpenAIBackend:
    """Text generation backend for any OpenAI-compatible chat completions API.

    Works against api.openai.com or any compatible endpoint (DeepSeek,
    local gateways) by pointing ``base_url`` elsewhere.
    """

    def __init__(self, settings: LLMSettings) -> None:
        self._settings = settings
        self._api_key: str = ""
        self._available = False

    @property
    def base_url(self) -> str:
        return self._settings.base_url.rstrip("/")

    async def connect(self) -> None:
        """Resolve the API key."""
        self._api_key = self._settings.api_key or os.environ.get("OPENAI_API_KEY", "")
        self._available = False

    async def disconnect(self) -> None:
        """Forget the cached availability check."""
        self._available = False

    async def is_available(self) -> bool:
        """Check that an API key is set and the models endpoint answers.

        A successful check is remembered until the next ``connect`` or
        ``disconnect``, so generation requests do not each probe the API.
        """
        if not self._api_key:
            logger.warning("LLM API key not configured (set OPENAI_API_KEY or config.llm.api_key)")
            return False
        if self._available:
            return True
        try:
            async with httpx.AsyncClient(timeout=10.0) as client:
                resp = await client.get(f"{self.base_url}/models", headers=self._headers())
        except (httpx.HTTPError, OSError):
            return False
        if not resp.is_success:
            logger.warning("LLM models endpoint returned %d", resp.status_code)
        self._available = resp.is_success
        return self._available

    async def complete(self, request: TextRequest) -> TextResult:
        """Send *request* to the chat completions endpoint and return the text."""
        if not self._api_key:
            msg = "LLM API key not configured"
            raise BackendError(msg)

        payload = self._build_payload(request)
        logger.info(
            "Requesting %s completion from %s (model=%s)",
            request.kind, self.base_url, self._settings.model,
        )
        try:
            async with httpx.AsyncClient(timeout=self._settings.timeout) as client:
                resp = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers=self._headers(),
                )
                resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            msg = f"LLM API returned {exc.response.status_code}: {exc.response.text[:200]}"
            raise BackendError(msg) from exc
        except (httpx.HTTPError, OSError) as exc:
            msg = f"LLM API request failed: {exc}"
            raise BackendError(msg) from exc

        try:
            data = resp.json()
            text = _extract_text(data)
            usage = data.get("usage") or {}
            logger.debug("Completion used %s tokens", usage.get("total_tokens", "?"))
        except (ValueError, AttributeError) as exc:
            msg = f"LLM API returned an unreadable body: {resp.text[:200]}"
            raise BackendError(msg) from exc
        return TextResult(
            text=text,
            model=data.get("model", self._settings.model),
            metadata={"backend": "openai", "usage": usage},
        )

    async def get_models(self) -> list[str]:
        """Return the configured model."""
        return [self._settings.model]

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}"}

    def _build_payload(self, request: TextRequest) -> dict[str, Any]:
        """Map a TextRequest onto chat completions parameters."""
        messages: list[dict[str, str]] = []
        if request.system:
            messages.append({"role": "system", "content": request.system})
        messages.append({"role": "user", "content": request.prompt})

        payload: dict[str, Any] = {
            "model": self._settings.model,
            "messages": messages,
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }
        if request.top_p is not None:
            payload["top_p"] = request.top_p
        if request.json_output:
            payload["response_format"] = {"type": "json_object"}
        payload.update(request.extra_params)
        return payload


def _extract_text(data: dict[str, Any]) -> str:
    choices = data.get("choices") or []
    if not choices:
        msg = "LLM API returned no choices"
        raise BackendError(msg)
    content = (choices[0].get("message") or {}).get("content")
    if not content:
        msg = "LLM API returned empty content"
        raise BackendError(msg)
    return str(content)
