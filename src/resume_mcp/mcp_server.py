"""Protocol Request Router for the resume MCP server.

One :class:`ResumeRouter` (and one low-level ``mcp`` ``Server``) exists per
connected session.  Resource and tool listings are pure registry lookups;
``tools/call`` goes through the :class:`ToolDispatcher`.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import anyio
from mcp.server import Server
from mcp.shared.exceptions import McpError
from mcp.types import (
    INVALID_PARAMS,
    CallToolRequest,
    CallToolResult,
    ErrorData,
    ReadResourceRequest,
    ReadResourceResult,
    Resource,
    ResourceTemplate,
    ServerResult,
    TextResourceContents,
    Tool,
    ToolAnnotations,
)

from resume_mcp import __version__
from resume_mcp.dispatcher import ToolDispatcher
from resume_mcp.errors import UnknownResourceError, UnknownToolError, ValidationError
from resume_mcp.registry import FILE_PARAM, WIDGET_MIME_TYPE, ToolDescriptor, ToolRegistry

logger = logging.getLogger(__name__)

SERVER_NAME = "resume-mcp"
# JSON-RPC error code MCP uses for a missing resource.
RESOURCE_NOT_FOUND = -32002

# Widget tools only render; they never modify anything or reach beyond the workflow.
_ANNOTATIONS = ToolAnnotations(readOnlyHint=True, destructiveHint=False, openWorldHint=False)


def _tool_meta(descriptor: ToolDescriptor) -> dict[str, Any]:
    meta = descriptor.descriptor_meta()
    if descriptor.kind.takes_file:
        meta["openai/fileParams"] = [FILE_PARAM]
    return meta


def _args_summary(arguments: dict[str, Any] | None) -> dict[str, Any]:
    """Argument keys and file id for logging; inline analyses can be large."""
    if not isinstance(arguments, dict):
        return {}
    summary: dict[str, Any] = {"keys": sorted(arguments)}
    pdf = arguments.get(FILE_PARAM)
    if isinstance(pdf, dict) and "file_id" in pdf:
        summary["file_id"] = pdf["file_id"]
    if isinstance(arguments.get("items"), list):
        summary["items"] = len(arguments["items"])
    return summary


class ResumeRouter:
    """Handles the five MCP operations for one session."""

    def __init__(self, registry: ToolRegistry, dispatcher: ToolDispatcher, *, session_id: str | None = None) -> None:
        self.registry = registry
        self.dispatcher = dispatcher
        self.session_id = session_id
        # Tool calls within a session run one at a time.
        self._call_lock = anyio.Lock()
        self.server = self._build_server()

    # -- operations --

    async def list_resources(self) -> list[Resource]:
        return [
            Resource(
                uri=d.template_uri,  # type: ignore[arg-type]
                name=d.title,
                description=f"{d.title} widget markup",
                mimeType=WIDGET_MIME_TYPE,
                _meta=d.descriptor_meta(),
            )
            for d in self.registry
        ]

    async def read_resource(self, uri: str) -> ReadResourceResult:
        descriptor = self.registry.by_uri(uri)
        return ReadResourceResult(
            contents=[
                TextResourceContents(
                    uri=descriptor.template_uri,  # type: ignore[arg-type]
                    mimeType=WIDGET_MIME_TYPE,
                    text=descriptor.html,
                    _meta=descriptor.descriptor_meta(),
                )
            ]
        )

    async def list_resource_templates(self) -> list[ResourceTemplate]:
        return [
            ResourceTemplate(
                uriTemplate=d.template_uri,
                name=d.title,
                description=f"{d.title} widget markup",
                mimeType=WIDGET_MIME_TYPE,
                _meta=d.descriptor_meta(),
            )
            for d in self.registry
        ]

    async def list_tools(self) -> list[Tool]:
        return [
            Tool(
                name=d.id,
                title=d.title,
                description=d.title,
                inputSchema=d.input_schema,
                outputSchema=d.output_schema,
                annotations=_ANNOTATIONS,
                _meta=_tool_meta(d),
            )
            for d in self.registry
        ]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        args_data = _args_summary(arguments)
        async with self._call_lock:
            t0 = time.monotonic()
            try:
                result = await self.dispatcher.dispatch(name, arguments, session_id=self.session_id)
            except Exception:
                logger.error(
                    "tool_error",
                    extra={"tool": name, "args_data": args_data, "session_id": self.session_id},
                    exc_info=True,
                )
                raise
            duration_ms = round((time.monotonic() - t0) * 1000, 1)
            logger.info(
                "tool_call",
                extra={"tool": name, "args_data": args_data, "duration_ms": duration_ms, "session_id": self.session_id},
            )
            return result

    # -- MCP wiring --

    async def _handle_read_resource(self, req: ReadResourceRequest) -> ServerResult:
        try:
            result = await self.read_resource(str(req.params.uri))
        except UnknownResourceError as exc:
            raise McpError(ErrorData(code=RESOURCE_NOT_FOUND, message=str(exc), data={"uri": exc.uri})) from exc
        return ServerResult(result)

    async def _handle_call_tool(self, req: CallToolRequest) -> ServerResult:
        try:
            result = await self.call_tool(req.params.name, req.params.arguments)
        except UnknownToolError as exc:
            raise McpError(ErrorData(code=INVALID_PARAMS, message=str(exc), data={"code": exc.code})) from exc
        except ValidationError as exc:
            raise McpError(ErrorData(code=INVALID_PARAMS, message=str(exc), data={"code": exc.code, "path": exc.path})) from exc
        return ServerResult(result)

    def _build_server(self) -> Server:
        server: Server = Server(SERVER_NAME, version=__version__)

        @server.list_resources()  # type: ignore[untyped-decorator,no-untyped-call]
        async def list_resources() -> list[Resource]:
            return await self.list_resources()

        @server.list_resource_templates()  # type: ignore[untyped-decorator,no-untyped-call]
        async def list_resource_templates() -> list[ResourceTemplate]:
            return await self.list_resource_templates()

        @server.list_tools()  # type: ignore[untyped-decorator,no-untyped-call]
        async def list_tools() -> list[Tool]:
            return await self.list_tools()

        # Registered directly so results keep their ``_meta`` and failures map
        # to JSON-RPC error codes instead of isError tool results.
        server.request_handlers[ReadResourceRequest] = self._handle_read_resource
        server.request_handlers[CallToolRequest] = self._handle_call_tool
        return server
