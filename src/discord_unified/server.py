"""MCP server factory: exposes the dispatcher as four tools.

Registers ``{prefix}_execute``, ``{prefix}_query``, ``{prefix}_batch`` and
``{prefix}_help``. The category list is embedded in the execute tool
description so clients see it without calling help first.
Failed calls raise :class:`ToolError` so the client sees them as errors.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import TextContent

from discord_unified.dispatcher import BatchResult, ExecutionResult, UnifiedDispatcher
from discord_unified.formatter import format_data, format_result, summarize_batch
from discord_unified.registry import ActionRegistry

logger = logging.getLogger(__name__)


def render_result(result: ExecutionResult) -> str:
    """Text for a single execute/query result."""
    if result.success:
        return format_data(result.data)
    return format_result(False, result.error or "Unknown error")


def request_label(item: Any, index: int) -> str:
    """``category.action`` for a raw batch item, ``#n`` if it has none."""
    if isinstance(item, Mapping):
        category = item.get("category", item.get("operation"))
        action = item.get("action")
        if category and action:
            return f"{category}.{action}"
    return f"#{index + 1}"


def render_batch(result: BatchResult, requests: Sequence[Any]) -> str:
    """JSON summary of a batch run."""
    labels = [request_label(item, i) for i, item in enumerate(requests)]
    return json.dumps(summarize_batch(result, labels), indent=2, default=str)


def _tool_output(result: ExecutionResult) -> TextContent:
    """Wrap a result for FastMCP; failures are raised so the call is flagged as an error."""
    text = render_result(result)
    if not result.success:
        raise ToolError(text)
    return TextContent(type="text", text=text)


def _build_tool_description(prefix: str, registry: ActionRegistry) -> str:
    """Build the execute tool description embedding the category list."""
    lines: list[str] = []
    lines.append(
        f"Execute Discord operations. Use category + action + parameters. "
        f'Example: category="message", action="send", '
        f"parameters={{channelId, content}}.\n"
        f"Call {prefix}_help with a category for its actions and parameters.\n"
    )
    lines.append("CATEGORIES:")
    for spec in registry.categories:
        actions = ", ".join(a.action for a in spec.actions)
        lines.append(f"  {spec.name}: {actions}")
    return "\n".join(lines)


def create_discord_server(
    backend: Any,
    *,
    prefix: str = "discord",
    registry: ActionRegistry | None = None,
    **kwargs,
) -> FastMCP:
    """Create a fully wired MCP server around *backend*.

    Parameters
    ----------
    backend
        Object or mapping implementing the Discord operations.
    prefix : str
        Tool name prefix.
    registry : ActionRegistry | None
        Category/resource tables; the built-in ones by default.
    **kwargs
        Additional arguments passed to the FastMCP constructor.

    Returns
    -------
    FastMCP
        Configured MCP server ready to run.
    """
    dispatcher = UnifiedDispatcher(backend, registry)
    registry = dispatcher.registry

    mcp = FastMCP(**kwargs)

    execute_description = _build_tool_description(prefix, registry)
    query_description = (
        "Query Discord data. Resources: " + ", ".join(registry.valid_resources())
    )

    @mcp.tool(name=f"{prefix}_execute", description=execute_description, structured_output=False)
    async def execute_tool(
        category: str,
        action: str,
        parameters: dict[str, Any] | None = None,
    ) -> TextContent:
        result = await dispatcher.execute(category, action, parameters or {})
        return _tool_output(result)

    @mcp.tool(name=f"{prefix}_query", description=query_description, structured_output=False)
    async def query_tool(
        resource: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
    ) -> TextContent:
        result = await dispatcher.query(resource, filters or {}, limit)
        return _tool_output(result)

    @mcp.tool(
        name=f"{prefix}_batch",
        description=(
            "Execute multiple Discord operations in order. Each request has: "
            "category, action, parameters. Stops on the first error unless "
            "stop_on_error is false. Completed operations are not rolled back."
        ),
        structured_output=False,
    )
    async def batch_tool(
        requests: list[dict[str, Any]],
        stop_on_error: bool = True,
    ) -> TextContent:
        result = await dispatcher.batch(requests, stop_on_error)
        text = render_batch(result, requests)
        if not result.success:
            raise ToolError(text)
        return TextContent(type="text", text=text)

    @mcp.tool(
        name=f"{prefix}_help",
        description="Get help on available Discord operations and their parameters",
        structured_output=False,
    )
    def help_tool(category: str | None = None) -> str:
        return dispatcher.describe(category)

    logger.debug("Registered %s tools for %d categories", prefix, len(registry.categories))
    return mcp
