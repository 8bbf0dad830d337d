"""Tests for model-output schema validation."""

from __future__ import annotations

import copy

import pytest
from jsonschema import ValidationError

from yogaflow.validation import validate_sequence_json, validate_structure_json

VALID_SEQUENCE: dict[str, object] = {
    "title": "Morning Flow",
    "description": "Wake up gently",
    "segments": [
        {
            "name": "Warm Up",
            "description": "Easy start",
            "duration_minutes": "5 minutes",
            "intensity": None,
            "poses": [
                {
                    "pose_name": "Mountain Pose",
                    "sanskrit_name": None,
                    "duration_seconds": 30,
                    "side": "",
                    "cues": ["Stand tall", "Breathe"],
                },
            ],
        },
    ],
}

VALID_STRUCTURE: dict[str, object] = {
    "name": "Evening Arc",
    "description": "Wind down",
    "intention": None,
    "segments": [
        {"name": "Arrive", "description": "Settle", "duration_minutes": 5, "intensity": "2/10",
         "pose_types": ["seated"]},
    ],
}


def test_valid_sequence() -> None:
    validate_sequence_json(VALID_SEQUENCE)


def test_valid_structure() -> None:
    validate_structure_json(VALID_STRUCTURE)


@pytest.mark.parametrize("field", ["title", "description", "segments"])
def test_sequence_missing_top_level(field: str) -> None:
    data = copy.deepcopy(VALID_SEQUENCE)
    del data[field]
    with pytest.raises(ValidationError):
        validate_sequence_json(data)


def test_sequence_segment_needs_description() -> None:
    data = copy.deepcopy(VALID_SEQUENCE)
    del data["segments"][0]["description"]
    with pytest.raises(ValidationError):
        validate_sequence_json(data)


def test_sequence_pose_name_must_be_string() -> None:
    data = copy.deepcopy(VALID_SEQUENCE)
    data["segments"][0]["poses"][0]["pose_name"] = 7
    with pytest.raises(ValidationError):
        validate_sequence_json(data)


def test_sequence_must_be_object() -> None:
    with pytest.raises(ValidationError):
        validate_sequence_json([VALID_SEQUENCE])


def test_structure_empty_segments() -> None:
    data = copy.deepcopy(VALID_STRUCTURE)
    data["segments"] = []
    with pytest.raises(ValidationError):
        validate_structure_json(data)


def test_structure_pose_types_are_strings() -> None:
    data = copy.deepcopy(VALID_STRUCTURE)
    data["segments"][0]["pose_types"] = [1, 2]
    with pytest.raises(ValidationError):
        validate_structure_json(data)
