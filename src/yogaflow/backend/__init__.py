"""Text generation backends."""

from __future__ import annotations

from typing import TYPE_CHECKING

from yogaflow.backend.base import TextBackend, TextRequest, TextResult
from yogaflow.backend.mock import MockBackend
from yogaflow.backend.openai_backend import OpenAIBackend

if TYPE_CHECKING:
    from yogaflow.config import LLMSettings

__all__ = [
    "MockBackend",
    "OpenAIBackend",
    "TextBackend",
    "TextRequest",
    "TextResult",
    "create_backend",
]


def create_backend(settings: LLMSettings) -> TextBackend:
    """Build the backend named by ``settings.provider``."""
    if settings.provider == "mock":
        return MockBackend()
    return OpenAIBackend(settings)
