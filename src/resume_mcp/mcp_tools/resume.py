"""Handlers for tools that work on an analyzed resume: diagnose and update."""

from __future__ import annotations

import logging
from typing import Any

from resume_mcp.mcp_tools.common import ToolContext, ToolResponse, _echo_pdf, _parse_args, resolve_analysis
from resume_mcp.registry import ToolDescriptor
from resume_mcp.types.api import DiagnoseOutput, UpdateOutput
from resume_mcp.types.inputs import DiagnoseArgs, UpdateArgs
from resume_mcp.validation import normalize_patch_items

logger = logging.getLogger(__name__)


async def handle_diagnose(ctx: ToolContext, descriptor: ToolDescriptor, arguments: dict[str, Any]) -> ToolResponse:
    args = _parse_args(arguments, DiagnoseArgs)
    pdf = args["resumePdf"]
    document, source = resolve_analysis(ctx, pdf)

    # An unresolved document is still forwarded; the service decides what to do.
    result = await ctx.upstream.diagnose(document)

    structured: DiagnoseOutput = {
        "resumeTopping": args["resumeTopping"],
        "resumePdf": _echo_pdf(pdf),
        "analysis": result.data,
        "analysis_source": source,
        "outcome": result.outcome,
    }
    if result.error:
        structured["error"] = result.error
    return ToolResponse(text=descriptor.response_text, structured=dict(structured))


async def handle_update(ctx: ToolContext, descriptor: ToolDescriptor, arguments: dict[str, Any]) -> ToolResponse:
    args = _parse_args(arguments, UpdateArgs)
    pdf = args["resumePdf"]
    document, source = resolve_analysis(ctx, pdf)

    raw_items = args.get("items", [])
    items = normalize_patch_items(raw_items)
    if len(items) != len(raw_items):
        logger.info(
            "Dropped incomplete patch items",
            extra={"tool": descriptor.id, "args_data": {"received": len(raw_items), "kept": len(items)}},
        )

    result = await ctx.upstream.update(items, document)

    structured: UpdateOutput = {
        "resumeTopping": args["resumeTopping"],
        "resumePdf": _echo_pdf(pdf),
        "result": result.data,
        "items": items,
        "analysis_source": source,
        "outcome": result.outcome,
    }
    if result.error:
        structured["error"] = result.error
    return ToolResponse(text=descriptor.response_text, structured=dict(structured))
