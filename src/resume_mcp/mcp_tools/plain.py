"""Handler for widget-only tools that take nothing but a topping."""

from __future__ import annotations

from typing import Any

from resume_mcp.mcp_tools.common import ToolContext, ToolResponse, _parse_args
from resume_mcp.registry import ToolDescriptor
from resume_mcp.types.api import PlainOutput
from resume_mcp.types.inputs import PlainArgs


async def handle_plain(ctx: ToolContext, descriptor: ToolDescriptor, arguments: dict[str, Any]) -> ToolResponse:
    args = _parse_args(arguments, PlainArgs)
    structured: PlainOutput = {"resumeTopping": args["resumeTopping"]}
    return ToolResponse(text=descriptor.response_text, structured=dict(structured))
