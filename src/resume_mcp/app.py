"""FastAPI application: the SSE stream endpoint, the message endpoint, and CORS preflight.

Everything the app needs is built once here and shared by all sessions: the
registry, the analysis cache, and one outbound HTTP client.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from resume_mcp import __version__
from resume_mcp.cache import AnalysisCache, AnalysisStore
from resume_mcp.dispatcher import ToolDispatcher
from resume_mcp.mcp_server import ResumeRouter
from resume_mcp.registry import ToolRegistry, build_default_registry
from resume_mcp.settings import Settings, read_settings
from resume_mcp.transport import SessionManager
from resume_mcp.upstream import UpstreamClient

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    registry: ToolRegistry | None = None,
    store: AnalysisStore | None = None,
    upstream: UpstreamClient | None = None,
) -> FastAPI:
    """Build the ASGI app.  Collaborators can be injected for tests."""
    from fastapi import FastAPI

    settings = settings or read_settings()
    if registry is None:
        registry = build_default_registry(settings.assets_dir)
    if store is None:
        store = AnalysisCache(
            scope="session" if settings.cache_scope == "session" else "global",
            max_entries=settings.cache_max_entries,
            ttl_s=settings.cache_ttl_s,
        )
    if upstream is None:
        upstream = UpstreamClient.from_settings(settings)

    dispatcher = ToolDispatcher(registry, store, upstream)
    sessions = SessionManager(
        lambda session_id: ResumeRouter(registry, dispatcher, session_id=session_id),
        message_path=settings.message_path,
        on_close=store.discard_session,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("server_start", extra={"args_data": {"stream": settings.stream_path, "messages": settings.message_path}})
        try:
            yield
        finally:
            sessions.close_all()
            await upstream.aclose()
            logger.info("server_stop")

    app = FastAPI(
        title="resume-mcp",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.registry = registry
    app.state.store = store
    app.state.sessions = sessions

    app.add_api_route(settings.stream_path, sessions.handle_stream, methods=["GET"])
    app.add_api_route(settings.message_path, sessions.handle_post, methods=["POST"])
    for path in (settings.stream_path, settings.message_path):
        app.add_api_route(path, sessions.handle_preflight, methods=["OPTIONS"])
    return app
