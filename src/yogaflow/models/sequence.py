"""Sequence, phase and pose placement models."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field

from yogaflow.models.enums import Side


def new_id() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class SequencePose(BaseModel):
    """One placement of a catalog pose within a phase."""

    id: str = Field(default_factory=new_id)
    pose_id: str
    name: str
    sanskrit_name: str = ""
    position: int = 0
    duration_seconds: int = Field(default=30, gt=0)
    side: Side | None = None
    cues: str = ""
    transition: str | None = None
    breath_cue: str | None = None
    modifications: list[str] = Field(default_factory=list)


class SequencePhase(BaseModel):
    """A named subdivision of a sequence (warm-up, main sequence, ...)."""

    id: str = Field(default_factory=new_id)
    name: str
    description: str = ""
    position: int = 0
    duration_minutes: int | None = None
    intensity: int | None = Field(default=None, ge=1, le=10)
    poses: list[SequencePose] = Field(default_factory=list)

    @property
    def duration_seconds(self) -> int:
        return sum(p.duration_seconds for p in self.poses)


class Sequence(BaseModel):
    """A complete, ordered, timed practice composed of phases.

    ``duration_minutes`` is the requested length and is informational only;
    it is not enforced against the sum of pose durations.
    """

    id: str = Field(default_factory=new_id)
    title: str
    description: str = ""
    duration_minutes: int
    difficulty: str
    style: str
    focus: str
    is_ai_generated: bool = False
    user_id: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    is_favorite: bool = False
    notes: str = ""
    tags: list[str] = Field(default_factory=list)
    structure_only: bool = False
    phases: list[SequencePhase] = Field(default_factory=list)

    @property
    def pose_count(self) -> int:
        return sum(len(phase.poses) for phase in self.phases)

    @property
    def total_duration_seconds(self) -> int:
        return sum(phase.duration_seconds for phase in self.phases)

    def find_phase(self, phase_id: str) -> SequencePhase | None:
        return next((p for p in self.phases if p.id == phase_id), None)

    def find_pose(self, sequence_pose_id: str) -> tuple[SequencePhase, SequencePose] | None:
        """Return the phase and placement carrying *sequence_pose_id*, if any."""
        for phase in self.phases:
            for pose in phase.poses:
                if pose.id == sequence_pose_id:
                    return phase, pose
        return None
