"""Tool dispatcher: validates a tool call and runs the handler for its kind."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, assert_never

from mcp.types import CallToolResult, TextContent

from resume_mcp.cache import AnalysisStore
from resume_mcp.mcp_tools.common import ToolContext, ToolResponse
from resume_mcp.mcp_tools.files import handle_analyze, handle_parse
from resume_mcp.mcp_tools.plain import handle_plain
from resume_mcp.mcp_tools.resume import handle_diagnose, handle_update
from resume_mcp.registry import ToolDescriptor, ToolKind, ToolRegistry
from resume_mcp.upstream import UpstreamClient
from resume_mcp.validation import validate_arguments

logger = logging.getLogger(__name__)

Handler = Callable[[ToolContext, ToolDescriptor, dict[str, Any]], Awaitable[ToolResponse]]


def handler_for(kind: ToolKind) -> Handler:
    match kind:
        case ToolKind.PLAIN:
            return handle_plain
        case ToolKind.PARSE:
            return handle_parse
        case ToolKind.ANALYZE:
            return handle_analyze
        case ToolKind.DIAGNOSE:
            return handle_diagnose
        case ToolKind.UPDATE:
            return handle_update
        case _:
            assert_never(kind)


class ToolDispatcher:
    """Runs tool calls against a registry, a cross-call store, and the upstream client.

    Holds no per-call state; everything a call needs travels in its
    :class:`ToolContext`.
    """

    def __init__(self, registry: ToolRegistry, store: AnalysisStore, upstream: UpstreamClient) -> None:
        self.registry = registry
        self.store = store
        self.upstream = upstream

    async def dispatch(self, name: str, arguments: dict[str, Any] | None, *, session_id: str | None = None) -> CallToolResult:
        """Validate and execute one tool call.

        Raises ``UnknownToolError`` or ``ValidationError`` before any cache
        access or outbound request.  Upstream failures never raise; they show
        up as ``outcome`` in the structured content.
        """
        descriptor = self.registry.get(name)
        args = arguments if arguments is not None else {}
        validate_arguments(descriptor.input_schema, args)

        ctx = ToolContext(store=self.store, upstream=self.upstream, session_id=session_id)
        response = await handler_for(descriptor.kind)(ctx, descriptor, args)
        return CallToolResult(
            content=[TextContent(type="text", text=response.text)],
            structuredContent=response.structured,
            _meta=descriptor.invocation_meta(),
        )
