"""Tests for MockBackend."""

import json

import pytest

from yogaflow.backend import create_backend
from yogaflow.backend.base import TextBackend, TextRequest
from yogaflow.backend.mock import DEFAULT_RESPONSES, MockBackend
from yogaflow.config import LLMSettings
from yogaflow.pipeline.parser import parse_sequence_response, parse_structure_response


@pytest.mark.asyncio
async def test_protocol_compliance():
    """MockBackend satisfies the TextBackend protocol."""
    assert isinstance(MockBackend(), TextBackend)


@pytest.mark.asyncio
async def test_is_available(mock_backend):
    await mock_backend.connect()
    assert await mock_backend.is_available() is True
    await mock_backend.disconnect()


@pytest.mark.asyncio
async def test_unavailable_flag():
    assert await MockBackend(available=False).is_available() is False


@pytest.mark.asyncio
async def test_get_models(mock_backend):
    assert await mock_backend.get_models() == ["mock-v1"]


@pytest.mark.asyncio
async def test_default_responses_by_kind(mock_backend):
    sequence = await mock_backend.complete(TextRequest(prompt="x", kind="sequence"))
    structure = await mock_backend.complete(TextRequest(prompt="x", kind="structure"))
    cues = await mock_backend.complete(TextRequest(prompt="x", kind="cues"))
    assert json.loads(sequence.text)["segments"]
    assert json.loads(structure.text)["segments"]
    assert cues.text == DEFAULT_RESPONSES["cues"]
    assert sequence.model == "mock-v1"


def test_default_responses_parse():
    assert parse_sequence_response(DEFAULT_RESPONSES["sequence"]).pose_count == 7
    assert len(parse_structure_response(DEFAULT_RESPONSES["structure"]).segments) == 3


@pytest.mark.asyncio
async def test_queued_responses_first():
    backend = MockBackend(["first"])
    backend.queue("second")
    texts = [
        (await backend.complete(TextRequest(prompt="p", kind="cues"))).text for _ in range(3)
    ]
    assert texts == ["first", "second", DEFAULT_RESPONSES["cues"]]


@pytest.mark.asyncio
async def test_requests_recorded(mock_backend):
    request = TextRequest(prompt="hello", kind="structure", json_output=True)
    await mock_backend.complete(request)
    assert mock_backend.requests == [request]


@pytest.mark.parametrize(
    ("provider", "name"), [("mock", "MockBackend"), ("openai", "OpenAIBackend")],
)
def test_create_backend(provider, name):
    backend = create_backend(LLMSettings(provider=provider))
    assert type(backend).__name__ == name
    assert isinstance(backend, TextBackend)
