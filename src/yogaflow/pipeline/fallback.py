"""Rule-based sequence assembly used when the language model is bypassed.

Poses are filtered from the catalog by difficulty and focus, then
proportioned across phases. Nothing here fails for lack of matching poses:
a filter that leaves too few poses falls back to the whole catalog.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from itertools import cycle, islice
from typing import TYPE_CHECKING

from yogaflow.errors import CatalogEmptyError
from yogaflow.models.enums import Difficulty, Focus, Side
from yogaflow.models.sequence import Sequence, SequencePhase, SequencePose
from yogaflow.models.structure import SequenceStructure, StructureSegment
from yogaflow.pipeline.assembly import make_placement, position_for

if TYPE_CHECKING:
    from collections.abc import Sequence as SequenceOf

    from yogaflow.models.params import GenerationParams
    from yogaflow.models.pose import Pose

logger = logging.getLogger(__name__)

MIN_FILTERED_POSES = 6
MIN_POSE_BUDGET = 6
MIN_POSE_SECONDS = 15


@dataclass(frozen=True)
class PhaseTemplate:
    name: str
    description: str
    share: float


THREE_PHASES: tuple[PhaseTemplate, ...] = (
    PhaseTemplate("Warm Up", "Gentle poses to prepare the body", 0.3),
    PhaseTemplate("Main Sequence", "The core of the practice", 0.5),
    PhaseTemplate("Cool Down", "Gentle poses to finish the practice", 0.2),
)


@dataclass(frozen=True)
class CannedPhase:
    name: str
    description: str
    start: int
    stop: int
    seconds: int
    alternate_sides: bool = False


# Static sequence served when filling a skeleton fails outright.
CANNED_PHASES: tuple[CannedPhase, ...] = (
    CannedPhase(
        "Centering & Breath Awareness",
        "Begin seated to center and connect with your breath", 0, 2, 60,
    ),
    CannedPhase("Warm-Up", "Gentle movements to prepare the body", 2, 5, 30),
    CannedPhase(
        "Standing Sequence",
        "Build strength and balance through standing poses", 5, 9, 45,
        alternate_sides=True,
    ),
    CannedPhase("Floor Sequence", "Seated and reclined poses for flexibility", 9, 12, 60),
    CannedPhase(
        "Final Relaxation",
        "Complete relaxation to integrate practice benefits", 12, 13, 180,
    ),
)


# ---------------------------------------------------------------------------
# Filtering and budgeting
# ---------------------------------------------------------------------------


def _normalise(text: str) -> str:
    return " ".join(text.lower().replace("_", " ").replace("-", " ").split())


def _difficulty_allowed(pose: Pose, difficulty: Difficulty) -> bool:
    if difficulty == Difficulty.ADVANCED:
        return True
    if difficulty == Difficulty.INTERMEDIATE:
        return pose.difficulty_level in (Difficulty.BEGINNER, Difficulty.INTERMEDIATE)
    return pose.difficulty_level == Difficulty.BEGINNER


def _focus_allowed(pose: Pose, focus: str) -> bool:
    wanted = _normalise(focus)
    if wanted == Focus.FULL_BODY:
        return True
    return bool(pose.category) and wanted in _normalise(pose.category)


def filter_catalog(
    catalog: SequenceOf[Pose],
    difficulty: Difficulty,
    focus: str,
    *,
    minimum: int = MIN_FILTERED_POSES,
) -> list[Pose]:
    """Return the catalog poses suitable for *difficulty* and *focus*.

    Beginner requests only get beginner poses, intermediate requests get
    beginner and intermediate poses, advanced requests get everything. Focus
    is a substring test against the pose category ("full body" keeps all).
    When fewer than *minimum* poses survive, the whole catalog is returned
    unfiltered.
    """
    filtered = [
        p for p in catalog if _difficulty_allowed(p, difficulty) and _focus_allowed(p, focus)
    ]
    if len(filtered) < minimum:
        logger.warning(
            "Only %d poses match %s/%s; using the full catalog of %d poses",
            len(filtered), difficulty, focus, len(catalog),
        )
        return list(catalog)
    return filtered


def pose_budget(duration_minutes: int) -> int:
    """Total number of poses for a class of *duration_minutes*."""
    return max(MIN_POSE_BUDGET, duration_minutes // 3)


def _half_up(value: float) -> int:
    return math.floor(value + 0.5)


def phase_counts(budget: int) -> tuple[int, int, int]:
    """Split *budget* into Warm Up, Main Sequence and Cool Down pose counts.

    Warm Up takes 30% and Main Sequence 50%, each rounded half-up; Cool Down
    takes the remainder and never drops below one pose.
    """
    warm = _half_up(budget * THREE_PHASES[0].share)
    main = _half_up(budget * THREE_PHASES[1].share)
    cool = max(budget - warm - main, 1)
    return warm, main, cool


def _distribute(total: int, weights: SequenceOf[int]) -> list[int]:
    """Split *total* across *weights* by largest remainder, at least one each."""
    if not weights:
        return []
    total = max(total, len(weights))
    spare = total - len(weights)
    weight_sum = sum(weights) or len(weights)
    exact = [spare * (w or 1) / weight_sum for w in weights]
    counts = [math.floor(x) for x in exact]
    leftover = spare - sum(counts)
    by_remainder = sorted(range(len(weights)), key=lambda i: exact[i] - counts[i], reverse=True)
    for idx in by_remainder[:leftover]:
        counts[idx] += 1
    return [c + 1 for c in counts]


def _round_seconds(seconds: float) -> int:
    return max(MIN_POSE_SECONDS, int(5 * round(seconds / 5)))


# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------


class _SideAlternator:
    """Hands out the leading side for successive side-option poses."""

    def __init__(self) -> None:
        self._lead = Side.LEFT

    def next_pair(self) -> tuple[Side, Side]:
        lead = self._lead
        self._lead = Side.RIGHT if lead == Side.LEFT else Side.LEFT
        trail = Side.RIGHT if lead == Side.LEFT else Side.LEFT
        return lead, trail


def _place_phase(
    poses: SequenceOf[Pose],
    phase_index: int,
    phase_seconds: float,
    sides: _SideAlternator,
) -> list[SequencePose]:
    slots: list[tuple[Pose, Side | None]] = []
    for pose in poses:
        if pose.has_sides:
            lead, trail = sides.next_pair()
            slots += [(pose, lead), (pose, trail)]
        else:
            slots.append((pose, None))
    if not slots:
        return []

    seconds = _round_seconds(phase_seconds / len(slots))
    return [
        make_placement(
            pose,
            position=position_for(phase_index, idx),
            duration_seconds=seconds,
            side=side,
        )
        for idx, (pose, side) in enumerate(slots)
    ]


def _take(pool: SequenceOf[Pose], count: int) -> list[Pose]:
    return list(islice(cycle(pool), count))


def _default_title(params: GenerationParams) -> str:
    return f"{params.difficulty.title()} {params.style.title()} - {params.focus.title()} Practice"


def _require_catalog(catalog: SequenceOf[Pose]) -> None:
    if not catalog:
        msg = "no poses available to build a sequence"
        raise CatalogEmptyError(msg)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def build_fallback_sequence(
    params: GenerationParams,
    catalog: SequenceOf[Pose],
    *,
    user_id: str | None = None,
    min_poses: int = MIN_FILTERED_POSES,
) -> Sequence:
    """Build a three-phase sequence from the catalog without a language model.

    Raises
    ------
    CatalogEmptyError
        If *catalog* is empty.
    """
    _require_catalog(catalog)
    pool = filter_catalog(catalog, params.difficulty, params.focus, minimum=min_poses)
    budget = pose_budget(params.duration)
    chosen = _take(pool, budget)
    total_seconds = params.duration * 60

    sides = _SideAlternator()
    phases: list[SequencePhase] = []
    start = 0
    for idx, (template, count) in enumerate(zip(THREE_PHASES, phase_counts(budget), strict=True)):
        phase_poses = chosen[start:start + count]
        start += count
        phases.append(
            SequencePhase(
                name=template.name,
                description=template.description,
                position=idx,
                duration_minutes=max(1, round(params.duration * template.share)),
                poses=_place_phase(phase_poses, idx, total_seconds * template.share, sides),
            )
        )

    sequence = Sequence(
        title=_default_title(params),
        description=(
            f"A {params.duration}-minute {params.difficulty} {params.style} "
            f"practice focusing on {params.focus}."
        ),
        duration_minutes=params.duration,
        difficulty=params.difficulty,
        style=params.style,
        focus=params.focus,
        is_ai_generated=False,
        user_id=user_id,
        notes=params.additional_notes or "",
        phases=phases,
    )
    logger.info(
        "Built fallback sequence: %d poses from a pool of %d (budget %d)",
        sequence.pose_count, len(pool), budget,
    )
    return sequence


def default_structure(params: GenerationParams) -> SequenceStructure:
    """Return the three-phase skeleton used when no language model is available."""
    minutes = _distribute(params.duration, [round(t.share * 10) for t in THREE_PHASES])
    return SequenceStructure(
        name=_default_title(params),
        description=(
            f"A {params.duration}-minute {params.difficulty} {params.style} "
            f"practice focusing on {params.focus}."
        ),
        segments=[
            StructureSegment(
                name=template.name,
                description=template.description,
                duration_minutes=mins,
                intensity=intensity,
            )
            for template, mins, intensity in zip(THREE_PHASES, minutes, (3, 6, 2), strict=True)
        ],
    )


def fill_structure_without_ai(
    structure: SequenceStructure,
    params: GenerationParams,
    catalog: SequenceOf[Pose],
    *,
    user_id: str | None = None,
    min_poses: int = MIN_FILTERED_POSES,
) -> Sequence:
    """Fill a skeleton's segments from the filtered catalog.

    Poses are spread over the segments in proportion to their minutes, each
    segment receiving at least one.
    """
    _require_catalog(catalog)
    pool = filter_catalog(catalog, params.difficulty, params.focus, minimum=min_poses)
    budget = max(pose_budget(params.duration), len(structure.segments))
    counts = _distribute(budget, [s.duration_minutes for s in structure.segments])
    chosen = _take(pool, sum(counts))

    sides = _SideAlternator()
    phases: list[SequencePhase] = []
    start = 0
    for idx, (segment, count) in enumerate(zip(structure.segments, counts, strict=True)):
        phases.append(
            SequencePhase(
                name=segment.name,
                description=segment.description,
                position=idx,
                duration_minutes=segment.duration_minutes,
                intensity=segment.intensity,
                poses=_place_phase(
                    chosen[start:start + count], idx, segment.duration_minutes * 60, sides,
                ),
            )
        )
        start += count

    return Sequence(
        title=structure.name,
        description=structure.description,
        duration_minutes=params.duration,
        difficulty=params.difficulty,
        style=params.style,
        focus=params.focus,
        is_ai_generated=False,
        user_id=user_id,
        notes=params.additional_notes or "",
        phases=phases,
    )


def build_canned_sequence(
    sequence_id: str,
    params: GenerationParams,
    catalog: SequenceOf[Pose],
    *,
    user_id: str | None = None,
) -> Sequence:
    """Return the fixed five-phase sequence built from consecutive catalog slices.

    Used as the last resort when filling a skeleton fails. Phases whose slice
    falls beyond the end of a small catalog are left empty.
    """
    _require_catalog(catalog)
    phases: list[SequencePhase] = []
    for idx, canned in enumerate(CANNED_PHASES):
        placements: list[SequencePose] = []
        for pose_idx, pose in enumerate(catalog[canned.start:canned.stop]):
            side = None
            if canned.alternate_sides:
                side = Side.LEFT if pose_idx % 2 == 0 else Side.RIGHT
            placements.append(
                make_placement(
                    pose,
                    position=position_for(idx, pose_idx),
                    duration_seconds=canned.seconds,
                    side=side,
                )
            )
        phases.append(
            SequencePhase(
                name=canned.name,
                description=canned.description,
                position=idx,
                poses=placements,
            )
        )

    return Sequence(
        id=sequence_id,
        title=_default_title(params),
        description=f"A yoga sequence focused on {params.focus}",
        duration_minutes=params.duration,
        difficulty=params.difficulty,
        style=params.style,
        focus=params.focus,
        is_ai_generated=False,
        user_id=user_id,
        phases=phases,
    )
