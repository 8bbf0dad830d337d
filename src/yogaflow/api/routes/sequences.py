"""Stored sequences: listing, reading, updating, deleting and editor operations."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Response

from yogaflow.api.deps import (
    OwnedSequenceDep,
    RequiredUserDep,
    StoreDep,
    UserDep,
    check_owner,
)
from yogaflow.api.schemas import (
    AddPhaseBody,
    AddPoseBody,
    MovePoseBody,
    ReorderPhasesBody,
    SequenceUpdateBody,
    UpdatePoseBody,
)
from yogaflow.models import Sequence
from yogaflow.pipeline import editing
from yogaflow.pipeline.assembly import renumber_positions

router = APIRouter(prefix="/api/sequences", tags=["sequences"])


def _body(sequence: Sequence) -> dict[str, Any]:
    return {"sequence": sequence.model_dump(mode="json")}


@router.get("")
async def list_sequences(store: StoreDep, user: RequiredUserDep) -> dict[str, Any]:
    sequences = store.list_sequences(user)
    return {"sequences": [s.model_dump(mode="json") for s in sequences]}


@router.post("", status_code=201)
async def create_sequence(
    sequence: Sequence, store: StoreDep, user: RequiredUserDep,
) -> dict[str, Any]:
    """Save a sequence built or edited on the client."""
    sequence.user_id = user
    store.save_sequence(renumber_positions(sequence))
    return _body(sequence)


@router.get("/{sequence_id}")
async def get_sequence(sequence_id: str, store: StoreDep, user: UserDep) -> dict[str, Any]:
    sequence = store.get_sequence(sequence_id)
    check_owner(sequence, user)
    return _body(sequence)


@router.patch("/{sequence_id}")
async def update_sequence(
    body: SequenceUpdateBody,
    sequence: OwnedSequenceDep,
    store: StoreDep,
) -> dict[str, Any]:
    changes = {
        k: v for k, v in body.model_dump(exclude_unset=True, exclude={"phases"}).items()
        if v is not None
    }
    editing.update_details(sequence, **changes)
    if body.phases is not None:
        sequence.phases = body.phases
        renumber_positions(sequence)
    store.update_sequence(sequence)
    return _body(sequence)


@router.delete("/{sequence_id}", status_code=204)
async def delete_sequence(sequence: OwnedSequenceDep, store: StoreDep) -> Response:
    store.delete_sequence(sequence.id)
    return Response(status_code=204)


# -- phases -------------------------------------------------------------------


@router.post("/{sequence_id}/phases", status_code=201)
async def add_phase(
    body: AddPhaseBody, sequence: OwnedSequenceDep, store: StoreDep,
) -> dict[str, Any]:
    editing.add_phase(
        sequence,
        body.name,
        description=body.description,
        index=body.index,
        duration_minutes=body.duration_minutes,
        intensity=body.intensity,
    )
    store.update_sequence(sequence)
    return _body(sequence)


@router.post("/{sequence_id}/phases/reorder")
async def reorder_phases(
    body: ReorderPhasesBody, sequence: OwnedSequenceDep, store: StoreDep,
) -> dict[str, Any]:
    editing.reorder_phases(sequence, body.phase_ids)
    store.update_sequence(sequence)
    return _body(sequence)


@router.delete("/{sequence_id}/phases/{phase_id}")
async def remove_phase(
    phase_id: str, sequence: OwnedSequenceDep, store: StoreDep,
) -> dict[str, Any]:
    editing.remove_phase(sequence, phase_id)
    store.update_sequence(sequence)
    return _body(sequence)


@router.post("/{sequence_id}/phases/{phase_id}/poses", status_code=201)
async def add_pose(
    phase_id: str, body: AddPoseBody, sequence: OwnedSequenceDep, store: StoreDep,
) -> dict[str, Any]:
    pose = store.get_pose(body.pose_id)
    editing.add_pose(
        sequence,
        phase_id,
        pose,
        index=body.index,
        duration_seconds=body.duration_seconds,
        side=body.side,
        cues=body.cues,
    )
    store.update_sequence(sequence)
    return _body(sequence)


# -- placements ---------------------------------------------------------------


@router.patch("/{sequence_id}/poses/{sequence_pose_id}")
async def update_pose(
    sequence_pose_id: str, body: UpdatePoseBody, sequence: OwnedSequenceDep, store: StoreDep,
) -> dict[str, Any]:
    editing.update_pose(sequence, sequence_pose_id, **body.model_dump(exclude_unset=True))
    store.update_sequence(sequence)
    return _body(sequence)


@router.delete("/{sequence_id}/poses/{sequence_pose_id}")
async def remove_pose(
    sequence_pose_id: str, sequence: OwnedSequenceDep, store: StoreDep,
) -> dict[str, Any]:
    editing.remove_pose(sequence, sequence_pose_id)
    store.update_sequence(sequence)
    return _body(sequence)


@router.post("/{sequence_id}/poses/{sequence_pose_id}/move")
async def move_pose(
    sequence_pose_id: str, body: MovePoseBody, sequence: OwnedSequenceDep, store: StoreDep,
) -> dict[str, Any]:
    editing.move_pose(sequence, sequence_pose_id, body.index, phase_id=body.phase_id)
    store.update_sequence(sequence)
    return _body(sequence)
