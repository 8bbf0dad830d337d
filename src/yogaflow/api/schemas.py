"""Request bodies accepted by the HTTP API.

Field names follow the JSON the web client sends (camelCase); responses
use the snake_case model dumps.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from yogaflow.models import (
    Difficulty,
    Focus,
    GenerationParams,
    PeakPose,
    SequencePhase,
    SequenceStructure,
    Side,
    Style,
)


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class GenerateSequenceBody(_Body):
    user_id: str | None = Field(default=None, alias="userId")
    duration: int = Field(gt=0, le=90)
    difficulty: Difficulty
    style: Style
    focus_area: Focus = Field(alias="focusArea")
    additional_notes: str | None = Field(default=None, alias="additionalNotes")
    peak_pose: PeakPose | None = Field(default=None, alias="peakPose")
    use_ai: bool = Field(default=True, alias="useAi")

    def to_params(self) -> GenerationParams:
        return GenerationParams(
            duration=self.duration,
            difficulty=self.difficulty,
            style=self.style,
            focus=self.focus_area,
            additional_notes=self.additional_notes,
            peak_pose=self.peak_pose,
        )


class GenerateCuesBody(_Body):
    pose_id: str = Field(alias="poseId", min_length=1)
    side: Side | None = None
    existing_cues: str | None = Field(default=None, alias="existingCues")


class StructureBody(_Body):
    params: GenerationParams
    save: bool = False


class SegmentBody(_Body):
    name: str
    description: str
    duration_minutes: int | None = None
    intensity: int | str | None = None


class StructureInput(_Body):
    name: str
    description: str
    intention: str | None = None
    segments: list[SegmentBody] = Field(min_length=1)

    def to_structure(self) -> SequenceStructure:
        return SequenceStructure.model_validate(
            {
                "name": self.name,
                "description": self.description,
                "intention": self.intention or "",
                "segments": [s.model_dump() for s in self.segments],
            }
        )


class FillPosesBody(_Body):
    structure: StructureInput
    params: GenerationParams


class CompletePosesBody(_Body):
    sequence_id: str = Field(alias="sequenceId", min_length=1)
    difficulty: Difficulty
    style: Style
    focus: Focus
    duration: int | None = Field(default=None, gt=0, le=90)
    structure: StructureInput

    def to_params(self) -> GenerationParams:
        structure = self.structure.to_structure()
        duration = self.duration or min(max(structure.total_minutes, 1), 90)
        return GenerationParams(
            duration=duration, difficulty=self.difficulty, style=self.style, focus=self.focus,
        )


class SequenceUpdateBody(_Body):
    """Partial update of a stored sequence; unset fields are left alone."""

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    duration_minutes: int | None = Field(default=None, gt=0)
    difficulty: Difficulty | None = None
    style: Style | None = None
    focus: Focus | None = None
    is_favorite: bool | None = Field(default=None, alias="isFavorite")
    notes: str | None = None
    tags: list[str] | None = None
    phases: list[SequencePhase] | None = None


class AddPhaseBody(_Body):
    name: str = Field(min_length=1)
    description: str = ""
    index: int | None = None
    duration_minutes: int | None = Field(default=None, alias="durationMinutes", gt=0)
    intensity: int | None = Field(default=None, ge=1, le=10)


class ReorderPhasesBody(_Body):
    phase_ids: list[str] = Field(alias="phaseIds")


class AddPoseBody(_Body):
    pose_id: str = Field(alias="poseId", min_length=1)
    index: int | None = None
    duration_seconds: int = Field(default=30, alias="durationSeconds", gt=0)
    side: Side | None = None
    cues: str = ""


class UpdatePoseBody(_Body):
    duration_seconds: int | None = Field(default=None, alias="durationSeconds", gt=0)
    side: Side | None = None
    cues: str | None = None
    transition: str | None = None
    breath_cue: str | None = Field(default=None, alias="breathCue")
    modifications: list[str] | None = None


class MovePoseBody(_Body):
    index: int = Field(ge=0)
    phase_id: str | None = Field(default=None, alias="phaseId")
