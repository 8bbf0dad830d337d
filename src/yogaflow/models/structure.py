"""Skeleton and model-output structures for two-phase generation."""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

DEFAULT_POSE_SECONDS = 30
DEFAULT_SEGMENT_MINUTES = 5

_LEADING_NUMBER = re.compile(r"(\d+)")


def _first_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return int(value)
    if isinstance(value, str):
        m = _LEADING_NUMBER.search(value)
        if m:
            return int(m.group(1))
    return None


class StructureSegment(BaseModel):
    """One segment of a sequence skeleton, before poses are chosen."""

    name: str
    description: str = ""
    duration_minutes: int = Field(default=DEFAULT_SEGMENT_MINUTES, gt=0)
    intensity: int | None = Field(default=None, ge=1, le=10)
    pose_types: list[str] = Field(default_factory=list)
    purpose: str = ""

    @field_validator("purpose", mode="before")
    @classmethod
    def _blank_purpose(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("duration_minutes", mode="before")
    @classmethod
    def _coerce_minutes(cls, value: object) -> object:
        if value is None:
            return DEFAULT_SEGMENT_MINUTES
        parsed = _first_int(value)
        return parsed if parsed and parsed > 0 else DEFAULT_SEGMENT_MINUTES

    @field_validator("intensity", mode="before")
    @classmethod
    def _coerce_intensity(cls, value: object) -> object:
        # Intensity arrives as "7", "7/10" or 7; anything else is dropped.
        if value is None:
            return None
        parsed = _first_int(value)
        if parsed is None:
            return None
        return min(max(parsed, 1), 10)


class SequenceStructure(BaseModel):
    """Sequence skeleton: named segments without poses."""

    name: str
    description: str = ""
    intention: str = ""
    segments: list[StructureSegment] = Field(min_length=1)

    @property
    def total_minutes(self) -> int:
        return sum(s.duration_minutes for s in self.segments)


class SuggestedPose(BaseModel):
    """A pose as named by the language model, not yet matched to the catalog."""

    pose_name: str
    sanskrit_name: str = ""
    duration_seconds: int = DEFAULT_POSE_SECONDS
    side: str = ""
    cues: str = ""

    @field_validator("sanskrit_name", mode="before")
    @classmethod
    def _blank_sanskrit(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("duration_seconds", mode="before")
    @classmethod
    def _coerce_duration(cls, value: object) -> object:
        parsed = _first_int(value)
        return parsed if parsed and parsed > 0 else DEFAULT_POSE_SECONDS

    @field_validator("side", mode="before")
    @classmethod
    def _normalise_side(cls, value: object) -> object:
        if not isinstance(value, str):
            return ""
        value = value.strip().lower()
        return value if value in ("left", "right", "both") else ""

    @field_validator("cues", mode="before")
    @classmethod
    def _join_cues(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, list):
            return " ".join(str(v).strip() for v in value if str(v).strip())
        return value


class GeneratedSegment(BaseModel):
    name: str
    description: str = ""
    duration_minutes: int | None = None
    intensity: int | None = None
    poses: list[SuggestedPose] = Field(min_length=1)

    @field_validator("duration_minutes", "intensity", mode="before")
    @classmethod
    def _coerce_number(cls, value: object) -> object:
        return None if value is None else _first_int(value)


class GeneratedSequence(BaseModel):
    """Validated model output for a full sequence."""

    title: str
    description: str
    segments: list[GeneratedSegment] = Field(min_length=1)

    @property
    def pose_count(self) -> int:
        return sum(len(s.poses) for s in self.segments)
