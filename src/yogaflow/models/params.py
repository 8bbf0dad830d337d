"""Generation request parameters."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from yogaflow.models.enums import Difficulty, Focus, Style


class PeakPose(BaseModel):
    """A user-chosen pose the sequence should build toward."""

    id: str
    name: str
    sanskrit_name: str | None = None


class GenerationParams(BaseModel):
    """Ephemeral input for one generation request."""

    model_config = ConfigDict(populate_by_name=True)

    duration: int = Field(gt=0, le=90)
    difficulty: Difficulty
    style: Style
    focus: Focus
    additional_notes: str | None = Field(default=None, alias="additionalNotes")
    peak_pose: PeakPose | None = Field(default=None, alias="peakPose")
