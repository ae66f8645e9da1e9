"""
Tests for agent event fan-out and the Azure OpenAI client factory.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from artifact_chat.core.config import Settings
from artifact_chat.core.events import AgentEvent, EventType
from artifact_chat.core.exceptions import ConfigurationError
from artifact_chat.core.llm_client import (
    build_llm_client,
    responses_base_url,
    try_build_llm_client,
)
from artifact_chat.services.event_bus import EventBus


def make_socket(fail=False):
    ws = MagicMock()
    ws.accept = AsyncMock()
    ws.send_text = AsyncMock(side_effect=RuntimeError("closed") if fail else None)
    return ws


class TestEventBus:
    @pytest.mark.asyncio
    async def test_publish_reaches_listeners(self):
        bus = EventBus()
        ws = make_socket()
        await bus.connect(ws)

        event = AgentEvent.create(EventType.TOOL_CALLED, "agent-1", {"tool": "create_document"})
        await bus.publish(event)

        ws.accept.assert_awaited_once()
        sent = json.loads(ws.send_text.await_args.args[0])
        assert sent["type"] == "tool_called"
        assert sent["agent_id"] == "agent-1"
        assert sent["data"] == {"tool": "create_document"}

    @pytest.mark.asyncio
    async def test_failed_listener_dropped(self):
        bus = EventBus()
        healthy, broken = make_socket(), make_socket(fail=True)
        await bus.connect(healthy)
        await bus.connect(broken)

        await bus.publish(AgentEvent.create(EventType.AGENT_STARTED, "a", {}))

        assert bus.connections == {healthy}
        assert bus.listener_count == 1

    @pytest.mark.asyncio
    async def test_disconnect(self):
        bus = EventBus()
        ws = make_socket()
        await bus.connect(ws)
        await bus.disconnect(ws)
        assert bus.listener_count == 0


class TestLlmClient:
    def test_base_url(self):
        assert responses_base_url("https://x.openai.azure.com/") == (
            "https://x.openai.azure.com/openai/v1"
        )

    def test_missing_credentials(self, tmp_path):
        settings = Settings(
            data_dir=tmp_path, azure_openai_api_key="", azure_openai_endpoint=""
        )
        with pytest.raises(ConfigurationError, match="AZURE_OPENAI_API_KEY"):
            build_llm_client(settings)
        assert try_build_llm_client(settings) is None

    def test_builds_client(self, test_settings):
        client = build_llm_client(test_settings)
        assert str(client.base_url).rstrip("/") == (
            "https://example.openai.azure.com/openai/v1"
        )
        assert client.api_key == "test-key-1234567890"
