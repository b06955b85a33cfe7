"""Error taxonomy shared by the router, dispatcher, and transport.

Validation and routing errors are fatal to a single request but never to a
session.  ``UpstreamCallError`` never leaves ``upstream.py``: it is turned into
a failed ``UpstreamResult`` at the collaborator boundary.
"""

from __future__ import annotations


class ResumeMcpError(Exception):
    """Base class for all resume-mcp errors."""

    code = "error"


class ValidationError(ResumeMcpError):
    """Tool arguments or a protocol message failed validation."""

    code = "validation_error"

    def __init__(self, message: str, *, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class UnknownToolError(ResumeMcpError, KeyError):
    code = "unknown_tool"

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown tool: {self.name}"


class UnknownResourceError(ResumeMcpError, KeyError):
    code = "unknown_resource"

    def __init__(self, uri: str) -> None:
        super().__init__(uri)
        self.uri = uri

    def __str__(self) -> str:
        return f"Unknown resource: {self.uri}"


class MissingSessionIdError(ResumeMcpError):
    code = "missing_session_id"

    def __str__(self) -> str:
        return "Missing sessionId query parameter"


class UnknownSessionError(ResumeMcpError, KeyError):
    code = "unknown_session"

    def __init__(self, session_id: str) -> None:
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return f"Unknown session: {self.session_id}"


class UpstreamCallError(ResumeMcpError):
    """A collaborator returned a non-2xx status, a malformed body, or was unreachable."""

    code = "upstream_error"

    def __init__(self, service: str, message: str, *, status: int | None = None) -> None:
        super().__init__(f"{service}: {message}")
        self.service = service
        self.status = status


class TransportError(ResumeMcpError):
    """Stream-level fault on a session."""

    code = "transport_error"


class WidgetAssetError(ResumeMcpError):
    """Built widget HTML is missing from the assets directory."""

    code = "widget_asset_missing"
