"""Fixtures for HTTP endpoint tests (FastAPI)."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from resume_mcp.app import create_app
from resume_mcp.cache import AnalysisCache
from resume_mcp.registry import ToolRegistry
from resume_mcp.settings import Settings
from resume_mcp.upstream import UpstreamClient


@pytest.fixture
def app(assets_dir: Path, registry: ToolRegistry, store: AnalysisCache, upstream: UpstreamClient) -> FastAPI:
    return create_app(Settings(assets_dir=assets_dir), registry=registry, store=store, upstream=upstream)


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
