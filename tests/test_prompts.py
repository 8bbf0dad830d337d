"""Tests for prompt construction."""

import pytest

from yogaflow.guidelines import guideline_section, load_guidelines
from yogaflow.models import PeakPose, SequenceStructure, StructureSegment
from yogaflow.pipeline.prompts import (
    build_cues_prompt,
    build_sequence_prompt,
    build_structure_prompt,
    calculate_target_pose_count,
    format_pose_list,
)

GUIDELINES = """\
# Guidelines

## Timing
Hold standing poses for five breaths.

## Common Teaching Cues
Soften the knees.
Lengthen the spine.

## Safety
Never force a pose.
"""


@pytest.mark.parametrize(
    ("style", "duration", "expected"),
    [
        ("yin", 30, 6),
        ("restorative", 10, 5),
        ("hatha", 30, 15),
        ("hatha", 10, 8),
        ("vinyasa", 30, 40),
        ("POWER", 6, 10),
        ("kundalini", 30, 20),
    ],
)
def test_target_pose_count(style, duration, expected):
    assert calculate_target_pose_count(style, duration) == expected


def test_format_pose_list(catalog):
    text = format_pose_list(catalog, limit=5)
    lines = text.splitlines()
    assert len(lines) == 5
    assert lines[0] == (
        "ID: p01 - Name: Mountain Pose (Tadasana) - Category: standing - Difficulty: beginner"
    )
    assert "No Sanskrit name" in lines[1]
    assert "BILATERAL" in lines[4]
    assert "BILATERAL" not in lines[3]


def test_format_pose_list_without_limit(catalog):
    assert len(format_pose_list(catalog, limit=None).splitlines()) == len(catalog)


def test_sequence_prompt(catalog, params):
    params.additional_notes = "gentle on the wrists"
    params.peak_pose = PeakPose(id="p08", name="Tree Pose")
    prompt = build_sequence_prompt(params, GUIDELINES, catalog)
    assert "Create a 30-minute hatha yoga sequence." in prompt
    assert "Only use poses from the list above" in prompt
    assert "1800 seconds" in prompt
    assert "Additional Notes: gentle on the wrists" in prompt
    assert "Peak Pose: Tree Pose" in prompt
    assert "Never force a pose." in prompt
    assert '"pose_name"' in prompt


def test_sequence_prompt_respects_pose_limit(catalog, params):
    prompt = build_sequence_prompt(params, "", catalog, limit=3)
    assert "Cow Pose" in prompt
    assert "Downward-Facing Dog" not in prompt
    assert "YOGA GUIDELINES" not in prompt


def test_sequence_prompt_with_structure(catalog, params):
    structure = SequenceStructure(
        name="Arc",
        intention="Grounding",
        segments=[
            StructureSegment(name="Arrive", duration_minutes=5, intensity=2, description="Settle"),
            StructureSegment(name="Peak", duration_minutes=20, pose_types=["standing"]),
        ],
    )
    prompt = build_sequence_prompt(params, "", catalog, structure)
    assert "1. Arrive (5 min), intensity 2/10: Settle" in prompt
    assert "2. Peak (20 min) [pose types: standing]" in prompt
    assert "Class intention: Grounding" in prompt
    assert prompt.index("Arrive") < prompt.index("Peak")


def test_structure_prompt(params):
    prompt = build_structure_prompt(params, GUIDELINES)
    assert "30-minute hatha" in prompt
    assert "add up to 30 minutes" in prompt
    assert '"segments"' in prompt


def test_cues_prompt_uses_teaching_cue_section(catalog):
    prompt = build_cues_prompt(catalog[4], "left", "Keep the back heel down", GUIDELINES)
    assert "- English Name: Warrior II" in prompt
    assert "- Side: left" in prompt
    assert "Soften the knees." in prompt
    assert "Never force a pose." not in prompt
    assert "EXISTING CUES: Keep the back heel down" in prompt
    assert "specific to the left side" in prompt


def test_cues_prompt_defaults(catalog):
    prompt = build_cues_prompt(catalog[1])
    assert "- Side: Both/Center" in prompt
    assert "- Sanskrit Name: N/A" in prompt
    assert "YOGA GUIDELINES" not in prompt


def test_guideline_section():
    assert guideline_section(GUIDELINES, "Common Teaching Cues") == (
        "Soften the knees.\nLengthen the spine."
    )
    assert guideline_section(GUIDELINES, "Missing") == ""


def test_bundled_guidelines_have_cue_section():
    assert guideline_section(load_guidelines(), "Common Teaching Cues")


def test_missing_guidelines_file(tmp_path):
    assert load_guidelines(tmp_path / "nope.md") == ""


def test_guidelines_file_created_later_is_read(tmp_path):
    path = tmp_path / "late.md"
    assert load_guidelines(path) == ""
    path.write_text("## Breath\nInhale up.\n", encoding="utf-8")
    assert guideline_section(load_guidelines(path), "Breath") == "Inhale up."
