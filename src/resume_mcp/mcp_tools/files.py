"""Handlers for tools that take a fresh file reference: parse and analyze."""

from __future__ import annotations

import logging
from typing import Any

from resume_mcp.mcp_tools.common import ToolContext, ToolResponse, _parse_args
from resume_mcp.registry import ToolDescriptor
from resume_mcp.types.api import AnalyzeOutput, Outcome, ParseOutput, VerificationRecord
from resume_mcp.types.inputs import FileToolArgs

logger = logging.getLogger(__name__)


def _file_reference_text(file_id: str, download_url: str) -> str:
    return f"✅ Got file reference!\nfile_id: {file_id}\ndownload_url: {'present' if download_url else 'missing'}\n"


async def handle_parse(ctx: ToolContext, descriptor: ToolDescriptor, arguments: dict[str, Any]) -> ToolResponse:
    """Check the download URL is reachable without downloading the file.

    HEAD first, then a one-byte ranged GET for hosts that reject HEAD.  The
    probes run one after the other and each failure is recorded in place.
    """
    args = _parse_args(arguments, FileToolArgs)
    file_id = args["resumePdf"]["file_id"]
    download_url = args["resumePdf"]["download_url"]

    head = await ctx.upstream.probe_head(download_url)
    range_probe = await ctx.upstream.probe_range(download_url)
    verify: VerificationRecord = {
        "file_id": file_id,
        "has_download_url": bool(download_url),
        "head": head,
        "range": range_probe,
    }
    logger.info("File verify", extra={"tool": descriptor.id, "args_data": verify, "session_id": ctx.session_id})

    failures = sum(1 for probe in (head, range_probe) if "error" in probe)
    outcome: Outcome = ("success", "partial", "failed")[failures]

    text = _file_reference_text(file_id, download_url) + (
        f"HEAD status: {head.get('status', 'n/a')} | Range status: {range_probe.get('status', 'n/a')}"
    )
    structured: ParseOutput = {
        "resumeTopping": args["resumeTopping"],
        "resumePdf": {"file_id": file_id, "download_url": download_url},
        "verify": verify,
        "outcome": outcome,
    }
    return ToolResponse(text=text, structured=dict(structured))


async def handle_analyze(ctx: ToolContext, descriptor: ToolDescriptor, arguments: dict[str, Any]) -> ToolResponse:
    """Analyze the file and remember the result for later diagnose/update calls."""
    args = _parse_args(arguments, FileToolArgs)
    file_id = args["resumePdf"]["file_id"]
    download_url = args["resumePdf"]["download_url"]

    result = await ctx.upstream.analyze(download_url)
    if result.ok:
        ctx.store.put(file_id, result.data, session_id=ctx.session_id)
        logger.info("Analysis cached", extra={"tool": descriptor.id, "args_data": {"file_id": file_id}, "session_id": ctx.session_id})

    structured: AnalyzeOutput = {
        "resumeTopping": args["resumeTopping"],
        "resumePdf": {"file_id": file_id, "download_url": download_url, "res": result.data if result.ok else None},
        "outcome": result.outcome,
    }
    if result.error:
        structured["error"] = result.error
    return ToolResponse(text=_file_reference_text(file_id, download_url), structured=dict(structured))
