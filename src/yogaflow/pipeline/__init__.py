"""Sequence generation pipeline: prompts, parsing, matching, assembly and editing."""

from yogaflow.pipeline.assembly import (
    assemble_sequence,
    preserve_phase_ids,
    renumber_positions,
    skeleton_sequence,
)
from yogaflow.pipeline.coalesce import RequestCoalescer
from yogaflow.pipeline.fallback import (
    build_canned_sequence,
    build_fallback_sequence,
    default_structure,
    fill_structure_without_ai,
    filter_catalog,
)
from yogaflow.pipeline.generation import (
    complete_poses,
    create_skeleton,
    fill_sequence_with_poses,
    generate_cues,
    generate_sequence,
    generate_structure,
)
from yogaflow.pipeline.matcher import match_pose
from yogaflow.pipeline.parser import parse_sequence_response, parse_structure_response

__all__ = [
    "RequestCoalescer",
    "assemble_sequence",
    "build_canned_sequence",
    "build_fallback_sequence",
    "complete_poses",
    "create_skeleton",
    "default_structure",
    "fill_sequence_with_poses",
    "fill_structure_without_ai",
    "filter_catalog",
    "generate_cues",
    "generate_sequence",
    "generate_structure",
    "match_pose",
    "parse_sequence_response",
    "parse_structure_response",
    "preserve_phase_ids",
    "renumber_positions",
    "skeleton_sequence",
]
