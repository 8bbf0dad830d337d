"""Editor operations on a sequence: add, remove, move and update placements and phases.

Every operation mutates the sequence in place, renumbers positions so they
stay strictly increasing within each phase, and bumps ``updated_at``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from yogaflow.errors import InvalidEditError, NotFoundError
from yogaflow.models.enums import Side
from yogaflow.models.sequence import Sequence, SequencePhase, SequencePose, utcnow
from yogaflow.pipeline.assembly import POSITION_STRIDE, make_placement, renumber_positions

if TYPE_CHECKING:
    from yogaflow.models.pose import Pose

logger = logging.getLogger(__name__)

EDITABLE_POSE_FIELDS = frozenset(
    {"duration_seconds", "side", "cues", "transition", "breath_cue", "modifications"}
)
EDITABLE_SEQUENCE_FIELDS = frozenset(
    {"title", "description", "duration_minutes", "difficulty", "style", "focus",
     "is_favorite", "notes", "tags"}
)


def _touch(sequence: Sequence) -> None:
    renumber_positions(sequence)
    sequence.updated_at = utcnow()


def _require_phase(sequence: Sequence, phase_id: str) -> SequencePhase:
    phase = sequence.find_phase(phase_id)
    if phase is None:
        msg = f"phase {phase_id} not found in sequence {sequence.id}"
        raise NotFoundError(msg)
    return phase


def _require_pose(sequence: Sequence, sequence_pose_id: str) -> tuple[SequencePhase, SequencePose]:
    found = sequence.find_pose(sequence_pose_id)
    if found is None:
        msg = f"pose {sequence_pose_id} not found in sequence {sequence.id}"
        raise NotFoundError(msg)
    return found


def _check_capacity(phase: SequencePhase) -> None:
    if len(phase.poses) >= POSITION_STRIDE:
        msg = f"phase '{phase.name}' already holds {POSITION_STRIDE} poses"
        raise InvalidEditError(msg)


def _clamp_index(index: int | None, length: int) -> int:
    if index is None:
        return length
    return min(max(index, 0), length)


def add_pose(
    sequence: Sequence,
    phase_id: str,
    pose: Pose,
    *,
    index: int | None = None,
    duration_seconds: int = 30,
    side: Side | None = None,
    cues: str = "",
) -> SequencePose:
    """Insert *pose* into a phase at *index* (default: the end).

    Side-option poses added without an explicit side start on the left.
    """
    phase = _require_phase(sequence, phase_id)
    _check_capacity(phase)
    if side is None and pose.has_sides:
        side = Side.LEFT
    placement = make_placement(
        pose, position=0, duration_seconds=duration_seconds, side=side, cues=cues,
    )
    phase.poses.insert(_clamp_index(index, len(phase.poses)), placement)
    _touch(sequence)
    logger.debug("Added %s to phase '%s' of %s", pose.english_name, phase.name, sequence.id)
    return placement


def remove_pose(sequence: Sequence, sequence_pose_id: str) -> SequencePose:
    phase, placement = _require_pose(sequence, sequence_pose_id)
    phase.poses.remove(placement)
    _touch(sequence)
    return placement


def move_pose(
    sequence: Sequence,
    sequence_pose_id: str,
    index: int,
    *,
    phase_id: str | None = None,
) -> SequencePose:
    """Move a placement to *index* within its phase, or into *phase_id* when given.

    *index* is interpreted after the placement has been taken out of its
    current phase and is clamped to the valid range.
    """
    source, placement = _require_pose(sequence, sequence_pose_id)
    target = source if phase_id is None else _require_phase(sequence, phase_id)
    if target is not source:
        _check_capacity(target)
    source.poses.remove(placement)
    target.poses.insert(_clamp_index(index, len(target.poses)), placement)
    _touch(sequence)
    return placement


def update_pose(sequence: Sequence, sequence_pose_id: str, **changes: Any) -> SequencePose:
    """Change the duration, side, cues or other editable fields of one placement.

    Raises
    ------
    NotFoundError
        If no placement carries *sequence_pose_id*.
    InvalidEditError
        If a field is not editable or a value is invalid.
    """
    unknown = set(changes) - EDITABLE_POSE_FIELDS
    if unknown:
        msg = f"cannot edit pose fields: {', '.join(sorted(unknown))}"
        raise InvalidEditError(msg)

    phase, placement = _require_pose(sequence, sequence_pose_id)
    # Re-validate so constraints such as a positive duration still hold.
    try:
        updated = SequencePose.model_validate({**placement.model_dump(), **changes})
    except ValidationError as exc:
        msg = f"invalid pose update: {exc.error_count()} error(s)"
        raise InvalidEditError(msg) from exc
    phase.poses[phase.poses.index(placement)] = updated
    _touch(sequence)
    return updated


def add_phase(
    sequence: Sequence,
    name: str,
    *,
    description: str = "",
    index: int | None = None,
    duration_minutes: int | None = None,
    intensity: int | None = None,
) -> SequencePhase:
    phase = SequencePhase(
        name=name,
        description=description,
        duration_minutes=duration_minutes,
        intensity=intensity,
    )
    sequence.phases.insert(_clamp_index(index, len(sequence.phases)), phase)
    _touch(sequence)
    return phase


def remove_phase(sequence: Sequence, phase_id: str) -> SequencePhase:
    """Remove a phase together with all of its placements."""
    phase = _require_phase(sequence, phase_id)
    sequence.phases.remove(phase)
    _touch(sequence)
    return phase


def reorder_phases(sequence: Sequence, phase_ids: list[str]) -> Sequence:
    """Put the phases in the order given by *phase_ids*.

    *phase_ids* must name every phase of the sequence exactly once.
    """
    by_id = {p.id: p for p in sequence.phases}
    missing = [pid for pid in phase_ids if pid not in by_id]
    if missing:
        msg = f"phases not found in sequence {sequence.id}: {', '.join(missing)}"
        raise NotFoundError(msg)
    if len(phase_ids) != len(by_id) or set(phase_ids) != set(by_id):
        msg = "phase order must list every phase exactly once"
        raise InvalidEditError(msg)
    sequence.phases = [by_id[pid] for pid in phase_ids]
    _touch(sequence)
    return sequence


def update_details(sequence: Sequence, **changes: Any) -> Sequence:
    """Apply top-level edits such as title, notes, tags or the favorite flag."""
    unknown = set(changes) - EDITABLE_SEQUENCE_FIELDS
    if unknown:
        msg = f"cannot edit sequence fields: {', '.join(sorted(unknown))}"
        raise InvalidEditError(msg)
    for field, value in changes.items():
        setattr(sequence, field, value)
    sequence.updated_at = utcnow()
    return sequence
