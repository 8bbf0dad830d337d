"""Parse language model output into validated sequence structures."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import jsonschema
from pydantic import ValidationError as PydanticValidationError

from yogaflow.errors import ParseError
from yogaflow.models.structure import GeneratedSequence, SequenceStructure
from yogaflow.validation import validate_sequence_json, validate_structure_json

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"^\s*```[A-Za-z0-9_-]*[ \t]*\r?\n?(.*?)\r?\n?```\s*$", re.DOTALL)


def strip_code_fence(text: str) -> str:
    """Remove one surrounding markdown code fence (```` ``` ```` or ```` ```json ````).

    Text without a surrounding fence is returned stripped but otherwise
    unchanged.
    """
    m = _FENCE.match(text)
    if m:
        return m.group(1).strip()
    return text.strip()


def _load_json(text: str) -> Any:
    if not text or not text.strip():
        msg = "model returned an empty response"
        raise ParseError(msg, raw_text=text)
    try:
        return json.loads(strip_code_fence(text))
    except json.JSONDecodeError as exc:
        msg = f"model response is not valid JSON: {exc}"
        raise ParseError(msg, raw_text=text) from None


def _schema_error(exc: jsonschema.ValidationError) -> str:
    location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
    return f"{location}: {exc.message}"


def parse_sequence_response(text: str) -> GeneratedSequence:
    """Parse a full generated sequence.

    Requires a title, a description and a non-empty list of segments, each
    with a name, a description and a non-empty list of poses naming a
    ``pose_name``. Optional pose fields get defaults: ``sanskrit_name`` "",
    ``duration_seconds`` 30, ``side`` "", ``cues`` "".

    Raises
    ------
    ParseError
        If the text is not JSON or a mandatory field is missing. The raw
        text is attached for diagnosis; no repair is attempted.
    """
    data = _load_json(text)
    try:
        validate_sequence_json(data)
    except jsonschema.ValidationError as exc:
        msg = f"generated sequence is missing required data ({_schema_error(exc)})"
        raise ParseError(msg, raw_text=text) from None
    try:
        generated = GeneratedSequence.model_validate(data)
    except PydanticValidationError as exc:
        msg = f"generated sequence has invalid structure: {exc}"
        raise ParseError(msg, raw_text=text) from None
    logger.debug(
        "Parsed sequence '%s' (%d segments, %d poses)",
        generated.title, len(generated.segments), generated.pose_count,
    )
    return generated


def parse_structure_response(text: str) -> SequenceStructure:
    """Parse a sequence skeleton (segments without poses).

    Raises
    ------
    ParseError
        If the text is not JSON or a mandatory field is missing.
    """
    data = _load_json(text)
    try:
        validate_structure_json(data)
    except jsonschema.ValidationError as exc:
        msg = f"generated structure is missing required data ({_schema_error(exc)})"
        raise ParseError(msg, raw_text=text) from None
    if data.get("intention") is None:
        data["intention"] = ""
    try:
        return SequenceStructure.model_validate(data)
    except PydanticValidationError as exc:
        msg = f"generated structure has invalid structure: {exc}"
        raise ParseError(msg, raw_text=text) from None
