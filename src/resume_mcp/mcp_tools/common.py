"""Pure helpers and types shared across tool handler modules.

No dependency on the router or transport, so handlers can be imported and
exercised on their own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, TypeVar, cast

from resume_mcp.cache import MISSING, AnalysisStore
from resume_mcp.types.api import AnalysisSource
from resume_mcp.types.inputs import DiagnosePdfRef
from resume_mcp.upstream import UpstreamClient

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


def _parse_args(arguments: dict[str, Any], cls: type[_T]) -> _T:
    """Cast validated arguments to their TypedDict for static analysis.

    The dispatcher has already validated *arguments* against the tool's
    closed schema; this cast() provides type narrowing only.
    """
    return cast(_T, arguments)


@dataclass(frozen=True)
class ToolContext:
    """Collaborators available to a single tool call."""

    store: AnalysisStore
    upstream: UpstreamClient
    session_id: str | None = None


@dataclass(frozen=True)
class ToolResponse:
    """Text shown to the model plus the structured payload for the widget."""

    text: str
    structured: dict[str, Any]


def resolve_analysis(ctx: ToolContext, pdf: DiagnosePdfRef) -> tuple[Any, AnalysisSource]:
    """Pick the analysis document for diagnose/update.

    Precedence: inline ``res`` (when present and not null), then the cache
    entry for ``file_id``, then nothing (``MISSING``).
    """
    inline = pdf.get("res")
    if inline is not None:
        return inline, "inline"
    cached = ctx.store.get(pdf["file_id"], session_id=ctx.session_id)
    if cached is not MISSING:
        return cached, "cache"
    logger.info("No analysis available for %s", pdf["file_id"], extra={"session_id": ctx.session_id})
    return MISSING, "none"


def _echo_pdf(pdf: DiagnosePdfRef) -> dict[str, str]:
    echoed = {"file_id": pdf["file_id"]}
    if "download_url" in pdf:
        echoed["download_url"] = pdf["download_url"]
    return echoed
