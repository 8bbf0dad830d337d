"""Pose library and service health endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from yogaflow import __version__
from yogaflow.api.deps import BackendDep, StoreDep
from yogaflow.models import Difficulty

router = APIRouter(prefix="/api", tags=["poses"])


@router.get("/poses")
async def list_poses(
    store: StoreDep,
    difficulty: Difficulty | None = None,
    category: str | None = None,
) -> dict[str, Any]:
    poses = store.list_poses()
    if difficulty is not None:
        poses = [p for p in poses if p.difficulty_level == difficulty]
    if category:
        wanted = category.strip().lower()
        poses = [p for p in poses if (p.category or "").lower() == wanted]
    return {"poses": [p.model_dump(mode="json") for p in poses]}


@router.get("/poses/{pose_id}")
async def get_pose(pose_id: str, store: StoreDep) -> dict[str, Any]:
    return {"pose": store.get_pose(pose_id).model_dump(mode="json")}


@router.get("/health")
async def health(store: StoreDep, backend: BackendDep) -> dict[str, Any]:
    available = backend is not None and await backend.is_available()
    return {
        "status": "ok",
        "version": __version__,
        "poses": len(store.list_poses()),
        "ai_available": available,
    }
