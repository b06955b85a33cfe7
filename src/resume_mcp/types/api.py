# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
"""TypedDicts for the ``structuredContent`` of each tool's response."""

from __future__ import annotations

from typing import Any, Literal, NotRequired, TypedDict

from resume_mcp.types.inputs import PatchItem

Outcome = Literal["success", "partial", "failed"]
AnalysisSource = Literal["inline", "cache", "none"]


class PlainOutput(TypedDict):
    resumeTopping: str


class HeadProbe(TypedDict, total=False):
    ok: bool
    status: int
    content_type: str | None
    content_length: str | None
    content_disposition: str | None
    error: str


class RangeProbe(TypedDict, total=False):
    ok: bool
    status: int
    content_type: str | None
    content_range: str | None
    accept_ranges: str | None
    bytes_read: int
    error: str


class VerificationRecord(TypedDict):
    file_id: str
    has_download_url: bool
    head: HeadProbe
    range: RangeProbe


class ParseOutput(TypedDict):
    resumeTopping: str
    resumePdf: dict[str, str]
    verify: VerificationRecord
    outcome: Outcome


class AnalyzedPdf(TypedDict):
    file_id: str
    download_url: str
    res: Any


class AnalyzeOutput(TypedDict):
    resumeTopping: str
    resumePdf: AnalyzedPdf
    outcome: Outcome
    error: NotRequired[str]


class DiagnoseOutput(TypedDict):
    resumeTopping: str
    resumePdf: dict[str, str]
    analysis: Any
    analysis_source: AnalysisSource
    outcome: Outcome
    error: NotRequired[str]


class UpdateOutput(TypedDict):
    resumeTopping: str
    resumePdf: dict[str, str]
    result: Any
    items: list[PatchItem]
    analysis_source: AnalysisSource
    outcome: Outcome
    error: NotRequired[str]
