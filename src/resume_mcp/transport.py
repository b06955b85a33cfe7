"""Session manager and transport: MCP over Server-Sent Events.

``GET <stream-path>`` opens a session: the client receives an ``endpoint``
event naming ``<message-path>?sessionId=<id>`` and then one ``message`` event
per JSON-RPC message from the server.  The client sends its own messages with
``POST <message-path>?sessionId=<id>``.

Each session owns a :class:`ResumeRouter` and a cancel scope.  Closing the
session (client disconnect, transport error, shutdown) cancels that scope,
which also cancels any collaborator request still in flight for it.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from functools import partial
from typing import Any

import anyio
import pydantic
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from mcp.shared.message import SessionMessage
from mcp.types import JSONRPCMessage
from sse_starlette.sse import EventSourceResponse
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from resume_mcp.errors import MissingSessionIdError, UnknownSessionError, ValidationError
from resume_mcp.mcp_server import ResumeRouter

logger = logging.getLogger(__name__)

SESSION_ID_PARAM = "sessionId"

_ALLOW_ORIGIN = {"Access-Control-Allow-Origin": "*"}
_POST_HEADERS = {**_ALLOW_ORIGIN, "Access-Control-Allow-Headers": "content-type"}
_PREFLIGHT_HEADERS = {
    **_ALLOW_ORIGIN,
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "content-type",
}

RouterFactory = Callable[[str], ResumeRouter]


class Session:
    """One live event-stream connection and its protocol state."""

    def __init__(self, session_id: str, router: ResumeRouter, *, message_url: str) -> None:
        self.id = session_id
        self.router = router
        self.message_url = message_url
        self.cancel_scope = anyio.CancelScope()
        self.closed = False

        self._inbound_writer: MemoryObjectSendStream[SessionMessage | Exception]
        self._inbound_reader: MemoryObjectReceiveStream[SessionMessage | Exception]
        self._inbound_writer, self._inbound_reader = anyio.create_memory_object_stream[SessionMessage | Exception](0)

        self._outbound_writer: MemoryObjectSendStream[SessionMessage]
        self._outbound_reader: MemoryObjectReceiveStream[SessionMessage]
        self._outbound_writer, self._outbound_reader = anyio.create_memory_object_stream[SessionMessage](0)

        # SSE events as dicts, consumed by EventSourceResponse.
        self._events_writer: MemoryObjectSendStream[dict[str, Any]]
        self.events: MemoryObjectReceiveStream[dict[str, Any]]
        self._events_writer, self.events = anyio.create_memory_object_stream[dict[str, Any]](0)

    async def run(self) -> None:
        """Serve MCP on this session until it is closed or the client goes away."""
        server = self.router.server
        with self.cancel_scope:
            async with anyio.create_task_group() as tg:
                tg.start_soon(self._pump_events)
                await server.run(self._inbound_reader, self._outbound_writer, server.create_initialization_options())
                tg.cancel_scope.cancel()

    async def _pump_events(self) -> None:
        async with self._events_writer, self._outbound_reader:
            await self._events_writer.send({"event": "endpoint", "data": self.message_url})
            async for session_message in self._outbound_reader:
                data = session_message.message.model_dump_json(by_alias=True, exclude_none=True)
                await self._events_writer.send({"event": "message", "data": data})

    async def deliver(self, message: SessionMessage) -> None:
        try:
            await self._inbound_writer.send(message)
        except (anyio.ClosedResourceError, anyio.BrokenResourceError) as exc:
            raise UnknownSessionError(self.id) from exc

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.cancel_scope.cancel()
        self._inbound_writer.close()


class SessionManager:
    """Owns the session table and the HTTP endpoints that feed it."""

    def __init__(
        self,
        router_factory: RouterFactory,
        *,
        message_path: str,
        on_close: Callable[[str], Any] | None = None,
    ) -> None:
        self._router_factory = router_factory
        self._message_path = message_path
        self._on_close = on_close
        self._sessions: dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    # -- session lifecycle --

    def _new_session_id(self) -> str:
        session_id = str(uuid.uuid4())
        while session_id in self._sessions:
            session_id = str(uuid.uuid4())
        return session_id

    def open_session(self, root_path: str = "") -> Session:
        session_id = self._new_session_id()
        router = self._router_factory(session_id)
        message_url = f"{root_path}{self._message_path}?{SESSION_ID_PARAM}={session_id}"
        session = Session(session_id, router, message_url=message_url)
        self._sessions[session_id] = session
        logger.info("SSE session created", extra={"session_id": session_id})
        return session

    def get(self, session_id: str | None) -> Session:
        if not session_id:
            raise MissingSessionIdError
        session = self._sessions.get(session_id)
        if session is None:
            raise UnknownSessionError(session_id)
        return session

    def close_session(self, session_id: str) -> bool:
        """Remove and shut down a session.  Returns False if it was already gone."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        if self._on_close is not None:
            self._on_close(session_id)
        logger.info("SSE session closed", extra={"session_id": session_id})
        return True

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close_session(session_id)

    async def serve(self, session: Session) -> None:
        """Run *session* to completion; always leaves the session table clean."""
        try:
            logger.info("SSE session connected", extra={"session_id": session.id})
            await session.run()
        except Exception:
            logger.error("SSE transport error", extra={"session_id": session.id}, exc_info=True)
        finally:
            self.close_session(session.id)

    async def route_message(self, session_id: str | None, raw: bytes | str) -> None:
        """Forward one JSON-RPC message to its session.

        Raises ``MissingSessionIdError``, ``UnknownSessionError``, or
        ``ValidationError`` when *raw* is not a JSON-RPC message.
        """
        session = self.get(session_id)
        try:
            message = JSONRPCMessage.model_validate_json(raw)
        except pydantic.ValidationError as exc:
            msg = "Could not parse message"
            raise ValidationError(msg) from exc
        await session.deliver(SessionMessage(message))

    # -- HTTP endpoints --

    async def handle_stream(self, request: Request) -> Response:
        """``GET <stream-path>``: open a session and stream its events."""
        try:
            session = self.open_session(request.scope.get("root_path", ""))
        except Exception:
            logger.error("Failed to start SSE session", exc_info=True)
            return PlainTextResponse("Failed to establish SSE connection", status_code=500, headers=_ALLOW_ORIGIN)
        return EventSourceResponse(
            session.events,
            data_sender_callable=partial(self.serve, session),
            headers=_ALLOW_ORIGIN,
        )

    async def handle_post(self, request: Request) -> Response:
        """``POST <message-path>?sessionId=<id>``: submit one message."""
        session_id = request.query_params.get(SESSION_ID_PARAM)
        try:
            await self.route_message(session_id, await request.body())
        except MissingSessionIdError as exc:
            logger.warning("Missing sessionId in POST message")
            return PlainTextResponse(str(exc), status_code=400, headers=_POST_HEADERS)
        except UnknownSessionError:
            logger.warning("Unknown sessionId", extra={"session_id": session_id})
            return PlainTextResponse("Unknown session", status_code=404, headers=_POST_HEADERS)
        except ValidationError as exc:
            logger.warning("Rejected message", extra={"session_id": session_id, "error": str(exc.__cause__ or exc)})
            return PlainTextResponse(str(exc), status_code=400, headers=_POST_HEADERS)
        except Exception:
            logger.error("Failed to process message", extra={"session_id": session_id}, exc_info=True)
            return PlainTextResponse("Failed to process message", status_code=500, headers=_POST_HEADERS)
        return PlainTextResponse("Accepted", status_code=202, headers=_POST_HEADERS)

    async def handle_preflight(self, request: Request) -> Response:
        return Response(status_code=204, headers=_PREFLIGHT_HEADERS)
