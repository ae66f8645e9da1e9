"""Shared fixtures: temporary storage and a stubbed Responses API client."""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from artifact_chat.api import deps
from artifact_chat.api.routes import chat as chat_routes
from artifact_chat.core.config import Settings
from artifact_chat.main import app
from artifact_chat.services.blob_store import BlobStore


def function_call(name: str, arguments, call_id="call_1"):
    """A function_call output item as returned by responses.create."""
    if not isinstance(arguments, str):
        arguments = json.dumps(arguments)
    return SimpleNamespace(
        type="function_call", name=name, call_id=call_id, arguments=arguments
    )


def message(text: str):
    """An assistant message output item with a single output_text block."""
    return SimpleNamespace(
        type="message",
        role="assistant",
        content=[SimpleNamespace(type="output_text", text=text)],
    )


def response(*output, response_id="resp_1"):
    return SimpleNamespace(id=response_id, output=list(output))


def make_client(*responses):
    """Fake AsyncOpenAI whose responses.create returns ``responses`` in order."""
    return SimpleNamespace(
        responses=SimpleNamespace(create=AsyncMock(side_effect=list(responses)))
    )


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        data_dir=tmp_path,
        azure_openai_api_key="test-key-1234567890",
        azure_openai_endpoint="https://example.openai.azure.com",
        azure_openai_deployment="gpt-test",
    )


@pytest.fixture
def upload_store(test_settings):
    return BlobStore(test_settings.uploads_dir)


@pytest.fixture
def generated_store(test_settings):
    return BlobStore(test_settings.generated_dir)


@pytest.fixture
def api_client(test_settings, monkeypatch):
    """TestClient with temp storage, no rate limiting and no LLM client."""
    monkeypatch.setattr(chat_routes.limiter, "enabled", False)
    app.dependency_overrides[deps.get_settings] = lambda: test_settings
    app.state.llm_client = None
    with TestClient(app) as client:
        # lifespan has run; drop whatever client it built from the environment
        app.state.llm_client = None
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def use_llm_client():
    """Install a fake client for the chat route. Call with the stub responses."""
    def install(*responses):
        client = make_client(*responses)
        app.dependency_overrides[deps.get_llm_client] = lambda: client
        return client
    return install
