"""Tests for discord_unified.dispatcher (execute, query, help)."""

import re

import pytest

from discord_unified.dispatcher import DispatchRequest, ExecutionResult, QueryRequest, UnifiedDispatcher
from discord_unified.errors import InvalidAction, InvalidCategory, ResolutionFailure
from discord_unified.mappings import build_default_registry
from discord_unified.operations import BoundCall, Operation, OperationSignature
from discord_unified.registry import ActionRegistry, ActionSpec, CategorySpec


def _listed(error: str) -> list[str]:
    """Names listed after the final ``Valid ...:`` in an error message."""
    match = re.search(r"Valid \w+: (.*)$", error)
    assert match, error
    return match.group(1).split(", ")


class TestExecute:
    @pytest.mark.asyncio
    async def test_send_message_end_to_end(self, backend):
        d = UnifiedDispatcher(backend)
        result = await d.execute("message", "send", {"channelId": "123", "content": "hi"})
        assert result.success
        assert result.data == "Message sent to 123"
        assert result.error is None
        assert backend.calls == [("send_message", ("123", "hi"))]

    @pytest.mark.asyncio
    async def test_edit_message_content_reaches_new_message(self, backend):
        d = UnifiedDispatcher(backend)
        await d.execute("message", "edit", {"channelId": "1", "messageId": "2", "content": "fixed"})
        assert backend.calls == [("edit_message", ("1", "2", "fixed"))]

    @pytest.mark.asyncio
    async def test_sync_backend_method(self, backend):
        d = UnifiedDispatcher(backend)
        result = await d.query("messages", {"channelId": "7"})
        assert result.success
        assert result.data == [{"id": "1", "content": "hello"}]

    @pytest.mark.asyncio
    async def test_numeric_volume_coerced(self, backend):
        d = UnifiedDispatcher(backend)
        await d.execute("voice", "set_volume", {"guildId": "g", "volume": 80})
        assert backend.calls == [("set_volume", ("g", "80"))]

    @pytest.mark.asyncio
    async def test_channel_create_voice(self, backend):
        d = UnifiedDispatcher(backend)
        result = await d.execute(
            "channel", "create",
            {"guildId": "g", "name": "Lounge", "type": "voice", "userLimit": 5, "bitrate": 64000},
        )
        assert result.success
        assert backend.calls == [("create_voice_channel", ("g", "Lounge", None, 5, 64000))]

    @pytest.mark.asyncio
    async def test_packed_options(self, backend):
        d = UnifiedDispatcher(backend)
        await d.execute(
            "channel", "edit",
            {"guildId": "g", "channelId": "c", "topic": "t", "nsfw": True, "unrelated": "x"},
        )
        assert backend.calls == [("edit_channel_advanced", ("g", "c", {"topic": "t", "nsfw": True}))]

    @pytest.mark.asyncio
    async def test_backend_exception_becomes_failure(self, backend):
        d = UnifiedDispatcher(backend)
        result = await d.execute("message", "delete", {"channelId": "1", "messageId": "9"})
        assert not result.success
        assert result.error == "Unknown message 9"
        assert result.data is None

    @pytest.mark.asyncio
    async def test_exception_without_message_uses_class_name(self, backend):
        d = UnifiedDispatcher(backend)
        result = await d.query("roles", {"guildId": "g"})
        assert result.error == "ValueError"

    @pytest.mark.asyncio
    async def test_missing_backend_operation(self, backend):
        d = UnifiedDispatcher(backend)
        result = await d.execute("role", "create", {"name": "mods"})
        assert not result.success
        assert "'create_role' is not available" in result.error

    @pytest.mark.asyncio
    async def test_none_parameters(self, backend):
        d = UnifiedDispatcher(backend)
        result = await d.execute("channel", "create", None)
        assert result.success
        assert backend.calls == [("create_text_channel", (None, None, None))]

    @pytest.mark.asyncio
    async def test_non_mapping_parameters_rejected(self, backend):
        d = UnifiedDispatcher(backend)
        result = await d.execute("message", "send", ["123", "hi"])
        assert not result.success
        assert "must be an object" in result.error
        assert backend.calls == []


class TestValidation:
    @pytest.mark.asyncio
    async def test_invalid_category_lists_categories(self, backend):
        d = UnifiedDispatcher(backend)
        result = await d.execute("spaceship", "launch", {})
        assert not result.success
        assert result.error.startswith("Invalid category: 'spaceship'.")
        assert _listed(result.error) == d.registry.valid_categories()
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_invalid_category_suggestion(self, backend):
        d = UnifiedDispatcher(backend)
        result = await d.execute("mesage", "send", {})
        assert "Did you mean 'message'?" in result.error
        assert _listed(result.error) == d.registry.valid_categories()

    @pytest.mark.asyncio
    async def test_invalid_action_lists_actions(self, backend):
        d = UnifiedDispatcher(backend)
        result = await d.execute("message", "explode", {"channelId": "1"})
        assert not result.success
        assert "Invalid action 'explode' for category 'message'" in result.error
        assert _listed(result.error) == d.registry.valid_actions("message")
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_invalid_resource_lists_resources(self, backend):
        d = UnifiedDispatcher(backend)
        result = await d.query("spaceships")
        assert not result.success
        assert result.error.startswith("Invalid resource: 'spaceships'.")
        assert _listed(result.error) == d.registry.valid_resources()

    @pytest.mark.asyncio
    async def test_non_string_category(self, backend):
        d = UnifiedDispatcher(backend)
        result = await d.execute(None, "send", {})
        assert not result.success
        assert "Invalid category" in result.error

    def test_prepare_raises_typed_errors(self, backend):
        d = UnifiedDispatcher(backend)
        with pytest.raises(InvalidCategory) as info:
            d.prepare_action("nope", "send")
        assert info.value.valid == d.registry.valid_categories()
        with pytest.raises(InvalidAction):
            d.prepare_action("message", "nope")

    def test_prepare_action_returns_bound_call(self, backend):
        d = UnifiedDispatcher(backend)
        call = d.prepare_action("message", "send", {"channelId": "123", "text": "hi"})
        assert call == BoundCall(Operation.SEND_MESSAGE, ("123", "hi"))

    @pytest.mark.asyncio
    async def test_resolution_failure_is_reported(self, backend):
        registry = ActionRegistry([
            CategorySpec(
                "broken",
                actions=(
                    ActionSpec(
                        "go", Operation.STOP_AUDIO,
                        resolver=lambda p: (Operation.GET_ROLES, p),
                        candidates=(Operation.STOP_AUDIO,),
                    ),
                ),
            )
        ])
        d = UnifiedDispatcher(backend, registry)
        with pytest.raises(ResolutionFailure):
            d.prepare_action("broken", "go")
        result = await d.execute("broken", "go", {})
        assert result == ExecutionResult.fail("Failed to resolve action: broken.go")

    @pytest.mark.asyncio
    async def test_resolver_exception_becomes_failure(self, backend, caplog):
        def explode(params):
            raise KeyError("guildId")

        registry = ActionRegistry([
            CategorySpec(
                "broken",
                actions=(
                    ActionSpec(
                        "go", Operation.STOP_AUDIO,
                        resolver=explode,
                        candidates=(Operation.STOP_AUDIO,),
                    ),
                ),
            )
        ])
        d = UnifiedDispatcher(backend, registry)
        result = await d.execute("broken", "go", {})
        assert not result.success
        assert result.error.startswith("Failed to resolve action: broken.go")
        assert "guildId" in result.error
        assert any(r.levelname == "ERROR" for r in caplog.records)
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_unhashable_channel_type_creates_text_channel(self, backend):
        d = UnifiedDispatcher(backend)
        result = await d.execute("channel", "create", {"guildId": "g", "name": "x", "type": ["voice"]})
        assert result.success
        assert backend.names() == ["create_text_channel"]

    def test_positions_with_registry_signatures(self, backend):
        signatures = {
            Operation.SEND_MESSAGE: OperationSignature(Operation.SEND_MESSAGE, ("message", "channelId")),
        }
        registry = ActionRegistry(
            [CategorySpec("message", actions=(ActionSpec("send", Operation.SEND_MESSAGE),))],
            signatures=signatures,
        )
        d = UnifiedDispatcher(backend, registry)
        call = d.prepare_action("message", "send", {"channelId": "1", "content": "hi"})
        assert call.args == ("hi", "1")


class TestQuery:
    @pytest.mark.asyncio
    async def test_limit_becomes_count(self, backend):
        d = UnifiedDispatcher(backend)
        await d.query("messages", {"channelId": "1"}, limit=5)
        assert backend.calls == [("read_messages", ("1", "5"))]

    @pytest.mark.asyncio
    async def test_limit_in_filters(self, backend):
        d = UnifiedDispatcher(backend)
        await d.query("messages", {"channelId": "1", "limit": 3})
        assert backend.calls == [("read_messages", ("1", "3"))]

    @pytest.mark.asyncio
    async def test_members_limit(self, backend):
        d = UnifiedDispatcher(backend)
        await d.query("members", {"guildId": "g"}, limit=100)
        assert backend.calls == [("get_members", ("g", "100", None))]

    @pytest.mark.asyncio
    async def test_category_name_falls_back_to_resource(self, backend):
        d = UnifiedDispatcher(backend)
        result = await d.query("message", {"channelId": "1"})
        assert result.success
        assert backend.names() == ["read_messages"]

    def test_query_request_merges_limit(self):
        request = QueryRequest("messages", {"channelId": "1"}, 10)
        assert request.merged_filters() == {"channelId": "1", "limit": 10}
        assert request.filters == {"channelId": "1"}
        assert QueryRequest("messages").merged_filters() == {}


class TestDispatchRequest:
    def test_from_dict(self):
        request = DispatchRequest.from_dict(
            {"category": "message", "action": "send", "parameters": {"channelId": "1"}}
        )
        assert request == DispatchRequest("message", "send", {"channelId": "1"})
        assert request.label == "message.send"

    def test_legacy_keys(self):
        request = DispatchRequest.from_dict({"operation": "dm", "action": "send", "params": {"userId": "u"}})
        assert request.category == "dm"
        assert request.parameters == {"userId": "u"}

    def test_parameters_default_empty(self):
        assert DispatchRequest.from_dict({"category": "voice", "action": "stop"}).parameters == {}

    @pytest.mark.parametrize(
        "payload, message",
        [
            ("message.send", "expected an object"),
            ({"action": "send"}, "missing 'category'"),
            ({"category": "message"}, "missing 'action'"),
            ({"category": "message", "action": "send", "parameters": [1]}, "must be an object"),
        ],
    )
    def test_malformed(self, payload, message):
        with pytest.raises(ValueError, match=message):
            DispatchRequest.from_dict(payload)


class TestHelp:
    def test_help_shape(self, backend):
        d = UnifiedDispatcher(backend)
        info = d.help()
        registry = build_default_registry()
        assert list(info["categories"]) == registry.valid_categories()
        assert info["categories"]["message"] == registry.valid_actions("message")
        assert info["resources"] == registry.valid_resources()

    def test_describe(self, backend):
        d = UnifiedDispatcher(backend)
        assert "### Categories" in d.describe()
        assert "set_volume" in d.describe("voice")


class TestResultShapes:
    def test_ok_to_dict(self):
        assert ExecutionResult.ok({"id": 1}).to_dict() == {"success": True, "data": {"id": 1}}

    def test_fail_to_dict(self):
        assert ExecutionResult.fail("boom").to_dict() == {"success": False, "error": "boom"}
