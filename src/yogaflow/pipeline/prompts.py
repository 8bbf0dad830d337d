"""Prompt construction for sequence, structure and teaching-cue generation."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from yogaflow.guidelines import guideline_section
from yogaflow.models.enums import Style

if TYPE_CHECKING:
    from collections.abc import Sequence as SequenceOf

    from yogaflow.models.params import GenerationParams
    from yogaflow.models.pose import Pose
    from yogaflow.models.structure import SequenceStructure

DEFAULT_POSE_LIMIT = 50

# ---------------------------------------------------------------------------
# System messages sent alongside each prompt.
# ---------------------------------------------------------------------------
SEQUENCE_SYSTEM_MESSAGE = (
    "You are an experienced yoga teacher who designs safe, well-balanced "
    "class sequences. You always answer with a single JSON object and no "
    "surrounding prose."
)

STRUCTURE_SYSTEM_MESSAGE = (
    "You are an experienced yoga teacher who plans the arc of a class before "
    "choosing poses. You always answer with a single JSON object."
)

CUES_SYSTEM_MESSAGE = (
    "You are an expert yoga instructor with deep knowledge of teaching cues "
    "and alignment principles."
)

# ---------------------------------------------------------------------------
# Response formats demanded from the model.
# ---------------------------------------------------------------------------
SEQUENCE_RESPONSE_FORMAT = """\
{
  "title": "Sequence title",
  "description": "One or two sentences describing the class",
  "segments": [
    {
      "name": "Segment name",
      "description": "What this segment does",
      "poses": [
        {
          "pose_name": "English pose name exactly as listed",
          "sanskrit_name": "Sanskrit name",
          "duration_seconds": 30,
          "side": "left | right | both | empty for centred poses",
          "cues": "Short teaching cue"
        }
      ]
    }
  ]
}"""

STRUCTURE_RESPONSE_FORMAT = """\
{
  "name": "Sequence name",
  "description": "One or two sentences describing the class",
  "intention": "Theme or intention for the class",
  "segments": [
    {
      "name": "Segment name",
      "description": "What this segment does",
      "duration_minutes": 5,
      "intensity": 4,
      "pose_types": ["standing", "twist"]
    }
  ]
}"""


def format_pose_list(poses: SequenceOf[Pose], limit: int | None = DEFAULT_POSE_LIMIT) -> str:
    """Render the catalog excerpt the model may choose from, one pose per line.

    Only the first *limit* poses are listed (all of them when *limit* is
    ``None``). Side-option poses carry a BILATERAL note.
    """
    selected = poses[:limit] if limit else poses
    lines: list[str] = []
    for pose in selected:
        line = (
            f"ID: {pose.id} - Name: {pose.english_name} "
            f"({pose.sanskrit_name or 'No Sanskrit name'})"
            f" - Category: {pose.category or 'n/a'}"
            f" - Difficulty: {pose.difficulty_level or 'n/a'}"
        )
        if pose.has_sides:
            line += " - BILATERAL (requires both left and right sides)"
        lines.append(line)
    return "\n".join(lines)


def calculate_target_pose_count(style: str, duration_minutes: int) -> int:
    """Return the number of poses to aim for given the *style* and class length."""
    style = style.lower()
    if style in (Style.RESTORATIVE, Style.YIN):
        return max(5, math.ceil(duration_minutes / 5))
    if style == Style.HATHA:
        return max(8, math.ceil(duration_minutes / 2))
    if style in (Style.VINYASA, Style.POWER):
        return max(10, math.ceil(duration_minutes / 0.75))
    return max(8, math.ceil(duration_minutes / 1.5))


def _parameter_lines(params: GenerationParams) -> list[str]:
    lines = [
        f"- Style: {params.style}",
        f"- Duration: {params.duration} minutes ({params.duration * 60} seconds)",
        f"- Difficulty: {params.difficulty}",
        f"- Focus: {params.focus}",
    ]
    if params.additional_notes:
        lines.append(f"- Additional Notes: {params.additional_notes}")
    if params.peak_pose is not None:
        lines.append(f"- Peak Pose: {params.peak_pose.name}")
    return lines


def _guideline_block(guidelines: str) -> list[str]:
    if not guidelines.strip():
        return []
    return ["--- YOGA GUIDELINES ---", guidelines.strip(), "---", ""]


def build_sequence_prompt(
    params: GenerationParams,
    guidelines: str,
    poses: SequenceOf[Pose],
    structure: SequenceStructure | None = None,
    *,
    limit: int | None = DEFAULT_POSE_LIMIT,
) -> str:
    """Construct the prompt asking the model for a complete pose sequence.

    Parameters
    ----------
    params:
        Requested duration, difficulty, style, focus and optional notes.
    guidelines:
        Guideline markdown; omitted from the prompt when empty.
    poses:
        Pose catalog; only the first *limit* entries are offered.
    structure:
        Optional skeleton whose segments must be filled in order.

    Returns
    -------
    str
        The prompt text.
    """
    target = calculate_target_pose_count(params.style, params.duration)

    parts: list[str] = [
        f"Create a {params.duration}-minute {params.style} yoga sequence.",
        "",
        *_guideline_block(guidelines),
        "SEQUENCE PARAMETERS:",
        *_parameter_lines(params),
        f"- Target pose count: about {target} poses",
        "",
    ]

    if structure is not None:
        parts.append("Fill this class structure, keeping the segments in this order:")
        for idx, seg in enumerate(structure.segments, start=1):
            line = f"{idx}. {seg.name} ({seg.duration_minutes} min)"
            if seg.intensity is not None:
                line += f", intensity {seg.intensity}/10"
            if seg.description:
                line += f": {seg.description}"
            if seg.pose_types:
                line += f" [pose types: {', '.join(seg.pose_types)}]"
            parts.append(line)
        if structure.intention:
            parts.append(f"Class intention: {structure.intention}")
        parts.append("")

    parts += [
        "AVAILABLE POSES:",
        format_pose_list(poses, limit),
        "",
        "RULES:",
        "- Only use poses from the list above, using their English names exactly.",
        f"- Fit within the time budget: pose durations must add up to about "
        f"{params.duration * 60} seconds.",
        "- BILATERAL poses must be practised on both sides: list the left side "
        "and the right side as two consecutive entries.",
        "- Every segment needs at least one pose.",
        "",
        "Respond with JSON only, in exactly this format:",
        SEQUENCE_RESPONSE_FORMAT,
    ]
    return "\n".join(parts)


def build_structure_prompt(params: GenerationParams, guidelines: str) -> str:
    """Construct the prompt asking for a sequence skeleton without poses."""
    parts: list[str] = [
        f"Plan the structure of a {params.duration}-minute {params.style} yoga class.",
        "",
        *_guideline_block(guidelines),
        "CLASS PARAMETERS:",
        *_parameter_lines(params),
        "",
        "RULES:",
        "- Divide the class into ordered segments from arrival to final relaxation.",
        f"- Segment durations must add up to {params.duration} minutes.",
        "- Rate each segment's intensity from 1 (gentle) to 10 (peak effort).",
        "- Do not name individual poses; describe the pose types each segment uses.",
        "",
        "Respond with JSON only, in exactly this format:",
        STRUCTURE_RESPONSE_FORMAT,
    ]
    return "\n".join(parts)


def build_cues_prompt(
    pose: Pose,
    side: str | None = None,
    existing_cues: str | None = None,
    guidelines: str = "",
) -> str:
    """Construct the prompt asking for a short spoken teaching-cue paragraph."""
    parts: list[str] = ["Generate detailed teaching cues for the following yoga pose.", ""]

    excerpt = guideline_section(guidelines, "Common Teaching Cues") if guidelines else ""
    if excerpt:
        parts += ["--- YOGA GUIDELINES EXCERPT ---", excerpt, "---", ""]

    parts += [
        "POSE DETAILS:",
        f"- English Name: {pose.english_name}",
        f"- Sanskrit Name: {pose.sanskrit_name or 'N/A'}",
        f"- Category: {pose.category or 'N/A'}",
        f"- Difficulty Level: {pose.difficulty_level or 'N/A'}",
        f"- Side: {side or 'Both/Center'}",
        f"- Description: {pose.description or 'N/A'}",
        f"- Benefits: {pose.benefits or 'N/A'}",
        f"- Contraindications: {pose.contraindications or 'N/A'}",
        f"- Breath Instructions: {pose.breath_instructions or 'N/A'}",
        "",
    ]
    if existing_cues:
        parts += [f"EXISTING CUES: {existing_cues}", ""]

    parts += [
        "Cover entry and setup, key alignment points, common misalignments, "
        "breath guidance, modifications for different levels and what to feel"
        + (f", with cues specific to the {side} side." if side in ("left", "right") else "."),
        "Write one cohesive paragraph of 3-5 sentences, phrased as a teacher "
        "would say it aloud.",
    ]
    return "\n".join(parts)
