"""Validation utilities for language model output."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema

_SCHEMA_DIR = Path(__file__).parent / "schemas"


@lru_cache(maxsize=4)
def _load_schema(name: str) -> dict[str, Any]:
    return json.loads((_SCHEMA_DIR / f"{name}.schema.json").read_text(encoding="utf-8"))


def validate_sequence_json(data: object) -> None:
    """Validate generated sequence data against sequence.schema.json.

    Raises
    ------
    jsonschema.ValidationError
        If the data does not conform to the schema.
    """
    jsonschema.validate(data, _load_schema("sequence"))


def validate_structure_json(data: object) -> None:
    """Validate a generated skeleton against structure.schema.json.

    Raises
    ------
    jsonschema.ValidationError
        If the data does not conform to the schema.
    """
    jsonschema.validate(data, _load_schema("structure"))
