"""Sequence assembly: matched poses into phases with ordered positions."""

from __future__ import annotations

import logging
from collections.abc import Sequence as SequenceOf
from typing import TYPE_CHECKING

from yogaflow.models.enums import Side, UnmatchedPosePolicy
from yogaflow.models.sequence import Sequence, SequencePhase, SequencePose
from yogaflow.pipeline.matcher import match_pose

if TYPE_CHECKING:
    from yogaflow.models.params import GenerationParams
    from yogaflow.models.pose import Pose
    from yogaflow.models.structure import GeneratedSequence, SequenceStructure

logger = logging.getLogger(__name__)

# Positions are phase_index * POSITION_STRIDE + pose_index, so every phase
# owns a block of POSITION_STRIDE slots.
POSITION_STRIDE = 100


def position_for(phase_index: int, pose_index: int) -> int:
    """Return the position of the *pose_index*-th pose in the *phase_index*-th phase."""
    if pose_index >= POSITION_STRIDE:
        msg = f"a phase holds at most {POSITION_STRIDE} poses"
        raise ValueError(msg)
    return phase_index * POSITION_STRIDE + pose_index


def clamp_intensity(value: int | None) -> int | None:
    if value is None:
        return None
    return min(max(value, 1), 10)


def make_placement(
    pose: Pose,
    *,
    position: int,
    duration_seconds: int,
    side: Side | None = None,
    cues: str = "",
    sanskrit_name: str = "",
) -> SequencePose:
    """Build a SequencePose for a catalog pose."""
    return SequencePose(
        pose_id=pose.id,
        name=pose.display_name,
        sanskrit_name=pose.sanskrit_name or sanskrit_name,
        position=position,
        duration_seconds=max(duration_seconds, 1),
        side=side,
        cues=cues,
        breath_cue=pose.breath_instructions,
    )


def assemble_sequence(
    generated: GeneratedSequence,
    params: GenerationParams,
    catalog: SequenceOf[Pose],
    *,
    policy: UnmatchedPosePolicy = UnmatchedPosePolicy.FIRST_IN_CATALOG,
    user_id: str | None = None,
    structure: SequenceStructure | None = None,
    is_ai_generated: bool = True,
) -> Sequence:
    """Turn a parsed model response into a Sequence of catalog poses.

    Each suggested pose is resolved with :func:`match_pose`. Segment order
    becomes phase order and positions follow ``segment_index * 100 +
    pose_index``. When *structure* is given, segment durations and
    intensities missing from the response are taken from the skeleton
    segment at the same index.
    """
    phases: list[SequencePhase] = []

    for seg_idx, segment in enumerate(generated.segments):
        skeleton = (
            structure.segments[seg_idx]
            if structure is not None and seg_idx < len(structure.segments)
            else None
        )
        suggestions = segment.poses
        if len(suggestions) > POSITION_STRIDE:
            logger.warning(
                "Segment '%s' has %d poses; keeping the first %d",
                segment.name, len(suggestions), POSITION_STRIDE,
            )
            suggestions = suggestions[:POSITION_STRIDE]

        placements: list[SequencePose] = []
        for suggestion in suggestions:
            pose = match_pose(suggestion.pose_name, catalog, policy)
            if pose is None:
                continue
            placements.append(
                make_placement(
                    pose,
                    position=position_for(seg_idx, len(placements)),
                    duration_seconds=suggestion.duration_seconds,
                    side=Side(suggestion.side) if suggestion.side else None,
                    cues=suggestion.cues,
                    sanskrit_name=suggestion.sanskrit_name,
                )
            )

        duration = segment.duration_minutes or (skeleton.duration_minutes if skeleton else None)
        intensity = segment.intensity or (skeleton.intensity if skeleton else None)
        phases.append(
            SequencePhase(
                name=segment.name,
                description=segment.description,
                position=seg_idx,
                duration_minutes=duration if duration and duration > 0 else None,
                intensity=clamp_intensity(intensity),
                poses=placements,
            )
        )

    sequence = Sequence(
        title=generated.title,
        description=generated.description,
        duration_minutes=params.duration,
        difficulty=params.difficulty,
        style=params.style,
        focus=params.focus,
        is_ai_generated=is_ai_generated,
        user_id=user_id,
        notes=params.additional_notes or "",
        phases=phases,
    )
    logger.info(
        "Assembled sequence '%s': %d phases, %d poses, %ds",
        sequence.title, len(phases), sequence.pose_count, sequence.total_duration_seconds,
    )
    return sequence


def skeleton_sequence(
    structure: SequenceStructure,
    params: GenerationParams,
    *,
    user_id: str | None = None,
) -> Sequence:
    """Build a pose-less, ``structure_only`` sequence from a skeleton.

    Its phase ids are the ones later carried over by :func:`preserve_phase_ids`
    once poses are filled in.
    """
    return Sequence(
        title=structure.name,
        description=structure.description,
        duration_minutes=params.duration,
        difficulty=params.difficulty,
        style=params.style,
        focus=params.focus,
        is_ai_generated=True,
        user_id=user_id,
        notes=structure.intention,
        structure_only=True,
        phases=[
            SequencePhase(
                name=seg.name,
                description=seg.description,
                position=idx,
                duration_minutes=seg.duration_minutes,
                intensity=seg.intensity,
            )
            for idx, seg in enumerate(structure.segments)
        ],
    )


def preserve_phase_ids(skeleton_phases: SequenceOf[SequencePhase], filled: Sequence) -> Sequence:
    """Carry phase identifiers from a skeleton over to a freshly filled sequence.

    Phases are paired by index. Only the first ``min(len(skeleton),
    len(filled))`` phases take the skeleton ids; any further phases keep the
    ids they were generated with. A count mismatch is logged, never raised.
    """
    result = filled.model_copy(deep=True)
    overlap = min(len(skeleton_phases), len(result.phases))
    if len(skeleton_phases) != len(result.phases):
        logger.warning(
            "Skeleton has %d phases but filled sequence has %d; preserving ids for %d",
            len(skeleton_phases), len(result.phases), overlap,
        )
    for idx in range(overlap):
        result.phases[idx].id = skeleton_phases[idx].id
    return result


def renumber_positions(sequence: Sequence) -> Sequence:
    """Re-apply phase ordinals and pose positions in place; returns *sequence*."""
    for phase_idx, phase in enumerate(sequence.phases):
        phase.position = phase_idx
        for pose_idx, pose in enumerate(phase.poses):
            pose.position = position_for(phase_idx, pose_idx)
    return sequence
