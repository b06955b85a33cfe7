# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
"""Typed contracts for tool inputs and structured tool output."""

from __future__ import annotations

from resume_mcp.types.api import (
    AnalyzeOutput,
    DiagnoseOutput,
    Outcome,
    ParseOutput,
    PlainOutput,
    UpdateOutput,
)
from resume_mcp.types.inputs import (
    DiagnoseArgs,
    DiagnosePdfRef,
    FileToolArgs,
    PatchItem,
    PdfRef,
    PlainArgs,
    UpdateArgs,
)

__all__ = [
    "AnalyzeOutput",
    "DiagnoseArgs",
    "DiagnoseOutput",
    "DiagnosePdfRef",
    "FileToolArgs",
    "Outcome",
    "ParseOutput",
    "PatchItem",
    "PdfRef",
    "PlainArgs",
    "PlainOutput",
    "UpdateArgs",
    "UpdateOutput",
]
