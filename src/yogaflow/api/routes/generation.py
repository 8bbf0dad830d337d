"""Generation endpoints: one-shot sequences, skeletons, pose filling and cues."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter

from yogaflow.api.deps import (
    BackendDep,
    CoalescerDep,
    ConfigDep,
    RequiredUserDep,
    StoreDep,
    UserDep,
)
from yogaflow.api.schemas import (
    CompletePosesBody,
    FillPosesBody,
    GenerateCuesBody,
    GenerateSequenceBody,
    StructureBody,
)
from yogaflow.errors import AuthorizationError
from yogaflow.pipeline import generation

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["generation"])


@router.post("/generate-sequence")
async def generate_sequence(
    body: GenerateSequenceBody,
    store: StoreDep,
    backend: BackendDep,
    config: ConfigDep,
    user: UserDep,
) -> dict[str, Any]:
    if user is not None and body.user_id is not None and body.user_id != user:
        msg = "userId does not match the signed-in user"
        raise AuthorizationError(msg)
    sequence = await generation.generate_sequence(
        body.to_params(),
        store,
        backend,
        config,
        user_id=user or body.user_id,
        use_ai=body.use_ai,
    )
    return {"sequence": sequence.model_dump(mode="json")}


@router.post("/generate-cues")
async def generate_cues(
    body: GenerateCuesBody,
    store: StoreDep,
    backend: BackendDep,
    config: ConfigDep,
) -> dict[str, str]:
    pose = store.get_pose(body.pose_id)
    cues = await generation.generate_cues(
        pose, backend, config, side=body.side, existing_cues=body.existing_cues,
    )
    return {"cues": cues}


@router.post("/sequence/structure")
async def generate_structure(
    body: StructureBody,
    store: StoreDep,
    backend: BackendDep,
    config: ConfigDep,
    user: RequiredUserDep,
) -> dict[str, Any]:
    if body.save:
        structure, skeleton = await generation.create_skeleton(
            body.params, store, backend, config, user_id=user,
        )
        return {"structure": structure.model_dump(mode="json"), "sequenceId": skeleton.id}
    structure = await generation.generate_structure(body.params, backend, config)
    return {"structure": structure.model_dump(mode="json")}


@router.post("/sequence/fill-poses")
async def fill_poses(
    body: FillPosesBody,
    store: StoreDep,
    backend: BackendDep,
    config: ConfigDep,
    user: RequiredUserDep,
) -> dict[str, Any]:
    catalog = store.list_poses()
    sequence = await generation.fill_sequence_with_poses(
        body.structure.to_structure(), body.params, catalog, backend, config, user_id=user,
    )
    return {"sequence": sequence.model_dump(mode="json")}


@router.post("/sequences/complete-poses")
async def complete_poses(
    body: CompletePosesBody,
    store: StoreDep,
    backend: BackendDep,
    config: ConfigDep,
    coalescer: CoalescerDep,
    user: UserDep,
) -> dict[str, Any]:
    sequence = await generation.complete_poses(
        body.sequence_id,
        body.structure.to_structure(),
        body.to_params(),
        store,
        backend,
        config,
        coalescer,
        user_id=user,
    )
    return sequence.model_dump(mode="json")
