"""Pose catalog model."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from yogaflow.models.enums import Difficulty, SideOption


class Pose(BaseModel):
    """A catalog entry describing one yoga posture.

    Poses are reference data: they are imported out of band and never
    modified by the generation pipeline.
    """

    id: str
    english_name: str
    sanskrit_name: str | None = None
    category: str | None = None
    difficulty_level: Difficulty | None = None
    side_option: SideOption = SideOption.NONE
    description: str | None = None
    benefits: str | None = None
    contraindications: str | None = None
    breath_instructions: str | None = None
    image_url: str | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("side_option", mode="before")
    @classmethod
    def _coerce_side_option(cls, value: object) -> object:
        # Imported rows carry booleans, blanks or nulls as well as the enum values.
        if value is None or value == "" or value is False:
            return SideOption.NONE
        if value is True:
            return SideOption.LEFT_RIGHT
        return value

    @field_validator("difficulty_level", mode="before")
    @classmethod
    def _blank_difficulty(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip().lower()
            return value or None
        return value

    @property
    def has_sides(self) -> bool:
        """True when the pose is performed once per side."""
        return self.side_option == SideOption.LEFT_RIGHT

    @property
    def display_name(self) -> str:
        return self.english_name or "Unknown Pose"
