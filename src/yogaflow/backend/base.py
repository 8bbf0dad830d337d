"""Backend protocol and shared types for text generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Protocol, TypeAlias, runtime_checkable

PromptKind: TypeAlias = Literal["sequence", "structure", "cues"]


@dataclass
class TextRequest:
    """A request to generate text from a prompt."""

    prompt: str
    kind: PromptKind = "sequence"
    system: str = ""
    temperature: float = 0.7
    max_tokens: int = 4000
    top_p: float | None = None
    json_output: bool = False
    extra_params: dict[str, object] = field(default_factory=dict)


@dataclass
class TextResult:
    """Result from a text generation request."""

    text: str
    model: str
    metadata: dict[str, object] = field(default_factory=dict)


@runtime_checkable
class TextBackend(Protocol):
    """Protocol for hosted text generation backends."""

    async def connect(self) -> None:
        """Prepare the backend for requests."""
        ...

    async def disconnect(self) -> None:
        """Release any resources held by the backend."""
        ...

    async def is_available(self) -> bool:
        """Check if the backend is configured and reachable."""
        ...

    async def complete(self, request: TextRequest) -> TextResult:
        """Generate text for a request."""
        ...

    async def get_models(self) -> list[str]:
        """List the models this backend will use."""
        ...
