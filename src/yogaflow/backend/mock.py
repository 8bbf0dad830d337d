"""Mock backend for testing and offline development."""

from __future__ import annotations

import json
from collections import deque
from collections.abc import Iterable

from yogaflow.backend.base import PromptKind, TextRequest, TextResult

_MOCK_SEQUENCE = {
    "title": "Mock Grounding Flow",
    "description": "A calm practice produced by the offline mock backend.",
    "segments": [
        {
            "name": "Warm Up",
            "description": "Arrive and wake up the spine",
            "poses": [
                {"pose_name": "Mountain Pose", "sanskrit_name": "Tadasana", "duration_seconds": 30},
                {"pose_name": "Cat Pose", "duration_seconds": 30},
            ],
        },
        {
            "name": "Main Sequence",
            "description": "Build heat and strength",
            "poses": [
                {"pose_name": "Downward-Facing Dog", "duration_seconds": 45},
                {"pose_name": "Warrior I", "duration_seconds": 45, "side": "left"},
                {"pose_name": "Warrior I", "duration_seconds": 45, "side": "right"},
            ],
        },
        {
            "name": "Cool Down",
            "description": "Release and rest",
            "poses": [
                {"pose_name": "Child's Pose", "duration_seconds": 60},
                {"pose_name": "Corpse Pose", "sanskrit_name": "Savasana", "duration_seconds": 180},
            ],
        },
    ],
}

_MOCK_STRUCTURE = {
    "name": "Mock Structure",
    "description": "Skeleton produced by the offline mock backend.",
    "intention": "Steady breath",
    "segments": [
        {"name": "Centering", "description": "Settle in", "duration_minutes": 5, "intensity": 2},
        {"name": "Standing Sequence", "description": "Build heat", "duration_minutes": 15,
         "intensity": 6},
        {"name": "Final Relaxation", "description": "Rest", "duration_minutes": 5, "intensity": 1},
    ],
}

_MOCK_CUES = (
    "Root down evenly through both feet and lengthen through the crown of the head. "
    "Keep the breath slow and steady as you settle into the shape."
)

DEFAULT_RESPONSES: dict[PromptKind, str] = {
    "sequence": json.dumps(_MOCK_SEQUENCE),
    "structure": json.dumps(_MOCK_STRUCTURE),
    "cues": _MOCK_CUES,
}


class MockBackend:
    """A mock text backend that replays scripted responses.

    Responses queued with :meth:`queue` are returned first, in order; after
    that each request kind gets a canned, always-valid answer. Every request
    is recorded on :attr:`requests` for inspection in tests.
    """

    def __init__(self, responses: Iterable[str] | None = None, *, available: bool = True) -> None:
        self._queue: deque[str] = deque(responses or [])
        self._available = available
        self.requests: list[TextRequest] = []

    def queue(self, *responses: str) -> None:
        self._queue.extend(responses)

    async def connect(self) -> None:
        pass

    async def disconnect(self) -> None:
        pass

    async def is_available(self) -> bool:
        return self._available

    async def complete(self, request: TextRequest) -> TextResult:
        self.requests.append(request)
        text = self._queue.popleft() if self._queue else DEFAULT_RESPONSES[request.kind]
        return TextResult(text=text, model="mock-v1", metadata={"backend": "mock"})

    async def get_models(self) -> list[str]:
        return ["mock-v1"]
