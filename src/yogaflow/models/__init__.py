"""yogaflow data models - pure Pydantic, no I/O."""

from yogaflow.models.enums import (
    Difficulty,
    Focus,
    PoseCategory,
    Side,
    SideOption,
    Style,
    UnmatchedPosePolicy,
)
from yogaflow.models.params import GenerationParams, PeakPose
from yogaflow.models.pose import Pose
from yogaflow.models.sequence import Sequence, SequencePhase, SequencePose
from yogaflow.models.structure import (
    GeneratedSegment,
    GeneratedSequence,
    SequenceStructure,
    StructureSegment,
    SuggestedPose,
)

__all__ = [
    "Difficulty",
    "Focus",
    "GeneratedSegment",
    "GeneratedSequence",
    "GenerationParams",
    "PeakPose",
    "Pose",
    "PoseCategory",
    "Sequence",
    "SequencePhase",
    "SequencePose",
    "SequenceStructure",
    "Side",
    "SideOption",
    "StructureSegment",
    "Style",
    "SuggestedPose",
    "UnmatchedPosePolicy",
]
