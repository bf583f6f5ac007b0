"""
Shared fixtures.

Remote services are replaced with httpx.MockTransport handlers so the real
client code runs end to end without touching the network.
"""
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from thesisgen import main, state
from thesisgen.assistant import WritingAssistant
from thesisgen.compiler import CompilationClient

PDF_BYTES = b"%PDF-1.5\n% fake pdf\n%%EOF"


def pdf_response() -> httpx.Response:
    return httpx.Response(200, content=PDF_BYTES, headers={"content-type": "application/pdf"})


def chat_response(content: str) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


class RecordingHandler:
    """MockTransport handler that replays queued responses and keeps the requests it saw."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def json_bodies(self):
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def record():
    return state.sample_record()


@pytest.fixture
def make_compiler():
    def factory(*responses):
        handler = RecordingHandler(*responses)
        return CompilationClient(transport=httpx.MockTransport(handler)), handler

    return factory


@pytest.fixture
def make_assistant():
    def factory(*responses, api_key="test-key"):
        handler = RecordingHandler(*responses)
        return WritingAssistant(api_key=api_key, transport=httpx.MockTransport(handler)), handler

    return factory


@pytest.fixture
def client():
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()


@pytest.fixture
def use_compiler(make_compiler):
    def install(*responses):
        compiler, handler = make_compiler(*responses)
        main.app.dependency_overrides[main.get_compiler] = lambda: compiler
        return handler

    return install


@pytest.fixture
def use_assistant(make_assistant):
    def install(*responses):
        assistant, handler = make_assistant(*responses)
        main.app.dependency_overrides[main.get_assistant] = lambda: assistant
        return handler

    return install


def record_form(record, **extra):
    """Flatten a record into the field names the HTML form submits."""
    data = {field: getattr(record, field) for field in state.RECORD_FIELDS}
    for i, chapter in enumerate(record.chapters):
        data[f"chapters-{i}-title"] = chapter.title
        data[f"chapters-{i}-content"] = chapter.content
    data.update(extra)
    return data
