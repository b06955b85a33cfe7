"""Shared fixtures for the resume-mcp test suite."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import pytest

from resume_mcp.cache import AnalysisCache
from resume_mcp.dispatcher import ToolDispatcher
from resume_mcp.logging import LOGGER_NAME
from resume_mcp.mcp_server import ResumeRouter
from resume_mcp.registry import ToolRegistry, build_default_registry
from resume_mcp.upstream import UpstreamClient
from tests._fakes import FakeServices, make_upstream, write_widgets


@pytest.fixture(autouse=True)
def _reset_logger() -> Iterator[None]:
    """Keep handlers added by one test from leaking into the next."""
    logger = logging.getLogger(LOGGER_NAME)
    before = list(logger.handlers)
    yield
    for handler in logger.handlers[:]:
        if handler not in before:
            logger.removeHandler(handler)
            handler.close()


@pytest.fixture
def assets_dir(tmp_path: Path) -> Path:
    return write_widgets(tmp_path / "assets")


@pytest.fixture
def registry(assets_dir: Path) -> ToolRegistry:
    return build_default_registry(assets_dir)


@pytest.fixture
def store() -> AnalysisCache:
    return AnalysisCache()


@pytest.fixture
def services() -> FakeServices:
    return FakeServices()


@pytest.fixture
async def upstream(services: FakeServices) -> AsyncIterator[UpstreamClient]:
    client = make_upstream(services)
    yield client
    await client.aclose()


@pytest.fixture
def dispatcher(registry: ToolRegistry, store: AnalysisCache, upstream: UpstreamClient) -> ToolDispatcher:
    return ToolDispatcher(registry, store, upstream)


@pytest.fixture
def router(registry: ToolRegistry, dispatcher: ToolDispatcher) -> ResumeRouter:
    return ResumeRouter(registry, dispatcher, session_id="s-test")
