"""Tests for discord_unified.server."""

import json

import pytest
from mcp.server.fastmcp.exceptions import ToolError

from discord_unified.dispatcher import BatchResult, ExecutionResult
from discord_unified.mappings import build_default_registry
from discord_unified.server import (
    _build_tool_description,
    create_discord_server,
    render_batch,
    render_result,
    request_label,
)


class TestCreateServer:
    @pytest.mark.asyncio
    async def test_registers_four_tools(self, backend):
        mcp = create_discord_server(backend, name="test")
        tools = await mcp.list_tools()
        assert sorted(t.name for t in tools) == [
            "discord_batch",
            "discord_execute",
            "discord_help",
            "discord_query",
        ]

    @pytest.mark.asyncio
    async def test_custom_prefix(self, backend):
        mcp = create_discord_server(backend, prefix="guild")
        names = {t.name for t in await mcp.list_tools()}
        assert names == {"guild_execute", "guild_query", "guild_batch", "guild_help"}

    @pytest.mark.asyncio
    async def test_execute_description_lists_categories(self, backend):
        mcp = create_discord_server(backend)
        tools = {t.name: t for t in await mcp.list_tools()}
        description = tools["discord_execute"].description
        for category in build_default_registry().valid_categories():
            assert f"  {category}:" in description

    @pytest.mark.asyncio
    async def test_query_description_lists_resources(self, backend):
        mcp = create_discord_server(backend)
        tools = {t.name: t for t in await mcp.list_tools()}
        assert "voice_connections" in tools["discord_query"].description


class TestToolErrors:
    @pytest.mark.asyncio
    async def test_execute_success_is_plain_content(self, backend):
        mcp = create_discord_server(backend)
        content = await mcp.call_tool(
            "discord_execute",
            {"category": "message", "action": "send", "parameters": {"channelId": "1", "content": "hi"}},
        )
        assert content[0].text == "Message sent to 1"

    @pytest.mark.asyncio
    async def test_execute_failure_raises_tool_error(self, backend):
        mcp = create_discord_server(backend)
        with pytest.raises(ToolError, match="! Invalid category"):
            await mcp.call_tool("discord_execute", {"category": "mesage", "action": "send"})

    @pytest.mark.asyncio
    async def test_backend_failure_raises_tool_error(self, backend):
        mcp = create_discord_server(backend)
        with pytest.raises(ToolError, match="Unknown message 404"):
            await mcp.call_tool(
                "discord_execute",
                {"category": "message", "action": "delete",
                 "parameters": {"channelId": "1", "messageId": "404"}},
            )

    @pytest.mark.asyncio
    async def test_query_failure_raises_tool_error(self, backend):
        mcp = create_discord_server(backend)
        with pytest.raises(ToolError, match="Invalid resource"):
            await mcp.call_tool("discord_query", {"resource": "nope"})

    @pytest.mark.asyncio
    async def test_failed_batch_raises_with_summary(self, backend):
        mcp = create_discord_server(backend)
        requests = [
            {"category": "message", "action": "send", "parameters": {"channelId": "1", "content": "a"}},
            {"category": "message", "action": "delete", "parameters": {"channelId": "1", "messageId": "404"}},
        ]
        with pytest.raises(ToolError, match='"failed": 1'):
            await mcp.call_tool("discord_batch", {"requests": requests})

    @pytest.mark.asyncio
    async def test_successful_batch_returns_summary(self, backend):
        mcp = create_discord_server(backend)
        requests = [
            {"category": "message", "action": "send", "parameters": {"channelId": "1", "content": "a"}},
        ]
        content = await mcp.call_tool("discord_batch", {"requests": requests})
        summary = json.loads(content[0].text)
        assert summary["success"] is True
        assert summary["completed"] == 1


class TestRendering:
    def test_success_string(self):
        assert render_result(ExecutionResult.ok("Message sent")) == "Message sent"

    def test_success_structured(self):
        assert json.loads(render_result(ExecutionResult.ok({"id": "1"}))) == {"id": "1"}

    def test_failure(self):
        assert render_result(ExecutionResult.fail("Invalid category: 'x'.")) == "! Invalid category: 'x'."

    def test_request_label(self):
        assert request_label({"category": "message", "action": "send"}, 0) == "message.send"
        assert request_label({"operation": "dm", "action": "send"}, 0) == "dm.send"
        assert request_label("junk", 2) == "#3"
        assert request_label({"category": "message"}, 0) == "#1"

    def test_render_batch(self):
        result = BatchResult()
        result.record(ExecutionResult.fail("boom"))
        requests = [
            {"category": "message", "action": "delete", "parameters": {}},
            {"category": "message", "action": "send", "parameters": {}},
        ]
        summary = json.loads(render_batch(result, requests))
        assert summary["failed"] == 1
        assert summary["skipped"] == 1
        assert summary["results"][0]["request"] == "message.delete"

    def test_tool_description_mentions_help(self):
        text = _build_tool_description("discord", build_default_registry())
        assert "discord_help" in text
        assert "CATEGORIES:" in text
        assert "  message: send, edit, delete" in text
