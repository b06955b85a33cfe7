"""Fixtures for MCP tool and router tests."""

from __future__ import annotations

import pytest

from resume_mcp.cache import AnalysisCache
from resume_mcp.dispatcher import ToolDispatcher
from resume_mcp.registry import ToolDescriptor, ToolKind, ToolRegistry
from resume_mcp.upstream import UpstreamClient


@pytest.fixture
def plain_descriptor() -> ToolDescriptor:
    return ToolDescriptor(
        id="show-resume-card",
        title="Show Resume Card",
        template_uri="ui://widget/resume-card.html",
        invoking="Start Resume Card",
        invoked="finished Resume Card",
        response_text="Rendered Resume Card!",
        component="resume-card",
        kind=ToolKind.PLAIN,
        html="<div></div>",
    )


@pytest.fixture
def plain_dispatcher(plain_descriptor: ToolDescriptor, store: AnalysisCache, upstream: UpstreamClient) -> ToolDispatcher:
    """Dispatcher over a registry holding only a widget-only tool."""
    return ToolDispatcher(ToolRegistry([plain_descriptor]), store, upstream)
