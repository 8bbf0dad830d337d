"""Shared fixtures for yogaflow tests."""

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from yogaflow.api import create_app
from yogaflow.backend.mock import MockBackend
from yogaflow.config import AppConfig, DatabaseSettings, GenerationSettings, LLMSettings
from yogaflow.models import Difficulty, Focus, GenerationParams, Pose, SideOption, Style
from yogaflow.store import MemoryStore


def _pose(
    pose_id: str,
    name: str,
    category: str,
    difficulty: str = "beginner",
    *,
    sides: bool = False,
    sanskrit: str | None = None,
) -> Pose:
    return Pose(
        id=pose_id,
        english_name=name,
        sanskrit_name=sanskrit,
        category=category,
        difficulty_level=difficulty,
        side_option=SideOption.LEFT_RIGHT if sides else SideOption.NONE,
    )


@pytest.fixture
def catalog() -> list[Pose]:
    """Sixteen poses in id order; Warrior II deliberately precedes Warrior I."""
    return [
        _pose("p01", "Mountain Pose", "standing", sanskrit="Tadasana"),
        _pose("p02", "Cat Pose", "prone"),
        _pose("p03", "Cow Pose", "prone"),
        _pose("p04", "Downward-Facing Dog", "inversion"),
        _pose("p05", "Warrior II", "standing", sides=True, sanskrit="Virabhadrasana II"),
        _pose("p06", "Warrior I", "standing", sides=True, sanskrit="Virabhadrasana I"),
        _pose("p07", "Triangle Pose", "standing", sides=True),
        _pose("p08", "Tree Pose", "balance", sides=True),
        _pose("p09", "Chair Pose", "standing"),
        _pose("p10", "Cobra Pose", "backbend"),
        _pose("p11", "Bridge Pose", "backbend"),
        _pose("p12", "Seated Forward Bend", "forward_bend"),
        _pose("p13", "Child's Pose", "prone", sanskrit="Balasana"),
        _pose("p14", "Corpse Pose", "supine", sanskrit="Savasana"),
        _pose("p15", "Crow Pose", "arm_balance", "advanced"),
        _pose("p16", "Boat Pose", "core", "intermediate"),
    ]


@pytest.fixture
def params() -> GenerationParams:
    return GenerationParams(
        duration=30,
        difficulty=Difficulty.BEGINNER,
        style=Style.HATHA,
        focus=Focus.FULL_BODY,
    )


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        config_dir=tmp_path,
        llm=LLMSettings(provider="mock"),
        database=DatabaseSettings(url="sqlite://"),
        generation=GenerationSettings(coalesce_ttl_seconds=5.0),
    )


@pytest.fixture
def memory_store(catalog: list[Pose]) -> MemoryStore:
    return MemoryStore(catalog)


@pytest.fixture
def mock_backend() -> MockBackend:
    return MockBackend()


@pytest.fixture
def client(
    config: AppConfig, memory_store: MemoryStore, mock_backend: MockBackend,
) -> Iterator[TestClient]:
    app = create_app(config, store=memory_store, backend=mock_backend)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def user_headers() -> dict[str, str]:
    return {"X-User-Id": "user-1"}
