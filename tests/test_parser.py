"""Tests for parsing model output."""

import json

import pytest

from yogaflow.errors import ParseError
from yogaflow.pipeline.parser import (
    parse_sequence_response,
    parse_structure_response,
    strip_code_fence,
)

SEQUENCE = {
    "title": "Morning Flow",
    "description": "Wake up gently",
    "segments": [
        {
            "name": "Warm Up",
            "description": "Easy start",
            "poses": [{"pose_name": "Mountain Pose"}, {"pose_name": "Cat Pose"}],
        }
    ],
}

STRUCTURE = {
    "name": "Evening Arc",
    "description": "Wind down",
    "intention": None,
    "segments": [
        {"name": "Centering", "description": "Arrive", "duration_minutes": 5, "intensity": "2/10"},
        {"name": "Rest", "description": "Relax", "duration_minutes": "10"},
    ],
}


@pytest.mark.parametrize(
    "text",
    [
        '```json\n{"a": 1}\n```',
        '```\n{"a": 1}\n```',
        '  {"a": 1}  ',
    ],
)
def test_strip_code_fence(text):
    assert json.loads(strip_code_fence(text)) == {"a": 1}


def test_parse_plain_json():
    generated = parse_sequence_response(json.dumps(SEQUENCE))
    assert generated.title == "Morning Flow"
    assert [p.pose_name for p in generated.segments[0].poses] == ["Mountain Pose", "Cat Pose"]


def test_parse_fenced_json_with_defaults():
    generated = parse_sequence_response(f"```json\n{json.dumps(SEQUENCE)}\n```")
    pose = generated.segments[0].poses[0]
    assert pose.sanskrit_name == ""
    assert pose.duration_seconds == 30
    assert pose.side == ""
    assert pose.cues == ""


def test_prose_around_json_rejected():
    text = f"Here is your sequence:\n```json\n{json.dumps(SEQUENCE)}\n```"
    with pytest.raises(ParseError):
        parse_sequence_response(text)


def test_invalid_json_keeps_raw_text():
    with pytest.raises(ParseError) as exc_info:
        parse_sequence_response("not json at all")
    assert exc_info.value.raw_text == "not json at all"


def test_empty_response_rejected():
    with pytest.raises(ParseError):
        parse_sequence_response("   ")


@pytest.mark.parametrize(
    "broken",
    [
        {k: v for k, v in SEQUENCE.items() if k != "title"},
        {**SEQUENCE, "segments": []},
        {**SEQUENCE, "segments": [{"name": "Warm Up", "description": "x", "poses": []}]},
        {**SEQUENCE, "segments": [{"name": "Warm Up", "description": "x", "poses": [{}]}]},
        {
            **SEQUENCE,
            "segments": [{"name": "Warm Up", "description": "x", "poses": [{"pose_name": ""}]}],
        },
    ],
)
def test_missing_required_fields(broken):
    text = json.dumps(broken)
    with pytest.raises(ParseError) as exc_info:
        parse_sequence_response(text)
    assert exc_info.value.raw_text == text


def test_parse_structure():
    structure = parse_structure_response(json.dumps(STRUCTURE))
    assert structure.intention == ""
    assert [s.name for s in structure.segments] == ["Centering", "Rest"]
    assert structure.segments[0].intensity == 2
    assert structure.segments[1].duration_minutes == 10
    assert structure.total_minutes == 15


def test_parse_structure_without_segments():
    text = json.dumps({"name": "x", "description": "y"})
    with pytest.raises(ParseError):
        parse_structure_response(text)
