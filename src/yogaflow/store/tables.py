"""SQLAlchemy table definitions."""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class PoseRow(Base):
    """Catalog pose; shared reference data."""

    __tablename__ = "poses"

    id = Column(String(64), primary_key=True)
    english_name = Column(String(200), nullable=False, index=True)
    sanskrit_name = Column(String(200), nullable=True)
    category = Column(String(100), nullable=True, index=True)
    difficulty_level = Column(String(20), nullable=True, index=True)
    side_option = Column(String(20), nullable=False, default="none")
    description = Column(Text, nullable=True)
    benefits = Column(Text, nullable=True)
    contraindications = Column(Text, nullable=True)
    breath_instructions = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    tags = Column(JSON, nullable=False, default=list)

    def __repr__(self):
        return f"<PoseRow(id={self.id}, english_name='{self.english_name}')>"


class SequenceRow(Base):
    __tablename__ = "sequences"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(128), nullable=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    duration_minutes = Column(Integer, nullable=False)
    difficulty = Column(String(20), nullable=False)
    style = Column(String(20), nullable=False)
    focus = Column(String(40), nullable=False)
    is_ai_generated = Column(Boolean, nullable=False, default=False)
    is_favorite = Column(Boolean, nullable=False, default=False)
    structure_only = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=False, default="")
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<SequenceRow(id={self.id}, title='{self.title}')>"


class PhaseRow(Base):
    __tablename__ = "sequence_phases"

    id = Column(String(64), primary_key=True)
    sequence_id = Column(
        String(64), ForeignKey("sequences.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    position = Column(Integer, nullable=False, default=0)
    duration_minutes = Column(Integer, nullable=True)
    intensity = Column(Integer, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "intensity IS NULL OR (intensity >= 1 AND intensity <= 10)",
            name="check_intensity_range",
        ),
    )


class SequencePoseRow(Base):
    """One placement of a catalog pose in a phase."""

    __tablename__ = "sequence_poses"

    id = Column(String(64), primary_key=True)
    sequence_id = Column(
        String(64), ForeignKey("sequences.id", ondelete="CASCADE"), nullable=False, index=True
    )
    phase_id = Column(
        String(64), ForeignKey("sequence_phases.id", ondelete="CASCADE"), nullable=False, index=True
    )
    pose_id = Column(String(64), ForeignKey("poses.id"), nullable=False)
    name = Column(String(200), nullable=False)
    sanskrit_name = Column(String(200), nullable=False, default="")
    position = Column(Integer, nullable=False, default=0)
    duration_seconds = Column(Integer, nullable=False, default=30)
    side = Column(String(10), nullable=True)
    cues = Column(Text, nullable=False, default="")
    transition = Column(Text, nullable=True)
    breath_cue = Column(Text, nullable=True)
    modifications = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        CheckConstraint("duration_seconds > 0", name="check_duration_positive"),
    )
