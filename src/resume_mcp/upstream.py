"""Outbound HTTP: reachability probes and the three resume collaborators.

Collaborator failures (non-2xx, malformed JSON, network faults) are raised as
:class:`UpstreamCallError` inside this module, retried per the collaborator's
policy, and finally returned as a failed :class:`UpstreamResult`.  Callers
never see a bare transport exception.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import httpx
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from resume_mcp.cache import MISSING
from resume_mcp.errors import UpstreamCallError
from resume_mcp.settings import Settings
from resume_mcp.types.api import HeadProbe, Outcome, RangeProbe
from resume_mcp.types.inputs import PatchItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Collaborator:
    """One remote service and its retry policy."""

    name: str
    url: str
    attempts: int = 1
    max_wait_s: float = 2.0


@dataclass(frozen=True)
class UpstreamResult:
    ok: bool
    data: Any = None
    error: str | None = None

    @property
    def outcome(self) -> Outcome:
        return "success" if self.ok else "failed"

    @classmethod
    def failed(cls, error: str) -> UpstreamResult:
        return cls(ok=False, error=error)


def _is_retryable(exc: BaseException) -> bool:
    # Client errors (4xx) will not improve on retry.
    return isinstance(exc, UpstreamCallError) and (exc.status is None or exc.status >= 500)


def build_http_client(settings: Settings, **kwargs: Any) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=httpx.Timeout(settings.upstream_timeout_s), follow_redirects=True, **kwargs)


class UpstreamClient:
    """Async client for the analyze, diagnose, and update services."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        analyze: Collaborator,
        diagnose: Collaborator,
        update: Collaborator,
    ) -> None:
        self._http = http
        self.analyze_service = analyze
        self.diagnose_service = diagnose
        self.update_service = update

    @classmethod
    def from_settings(cls, settings: Settings, http: httpx.AsyncClient | None = None) -> UpstreamClient:
        def collaborator(name: str, url: str) -> Collaborator:
            return Collaborator(
                name=name,
                url=url,
                attempts=settings.upstream_retry_attempts,
                max_wait_s=settings.upstream_retry_max_wait_s,
            )

        return cls(
            http or build_http_client(settings),
            analyze=collaborator("analyze", settings.analyze_url),
            diagnose=collaborator("diagnose", settings.diagnose_url),
            update=collaborator("update", settings.update_url),
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    # -- collaborators --

    async def _post_once(self, service: Collaborator, body: dict[str, Any]) -> Any:
        try:
            response = await self._http.post(service.url, json=body)
        except httpx.HTTPError as exc:
            raise UpstreamCallError(service.name, f"request failed: {exc}") from exc
        if not response.is_success:
            raise UpstreamCallError(service.name, f"HTTP {response.status_code}", status=response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamCallError(service.name, "response is not valid JSON", status=response.status_code) from exc

    async def _post_json(self, service: Collaborator, body: dict[str, Any]) -> UpstreamResult:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(service.attempts),
            wait=wait_exponential(multiplier=0.25, max=service.max_wait_s),
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    data = await self._post_once(service, body)
        except UpstreamCallError as exc:
            logger.warning("Upstream call failed", extra={"tool": service.name, "error": str(exc)})
            return UpstreamResult.failed(str(exc))
        return UpstreamResult(ok=True, data=data)

    async def analyze(self, download_url: str) -> UpstreamResult:
        """POST ``{url}``; on success ``data`` is the unwrapped ``result`` document."""
        result = await self._post_json(self.analyze_service, {"url": download_url})
        if not result.ok:
            return result
        payload = result.data
        if not isinstance(payload, dict) or "result" not in payload:
            logger.warning("Analyze response has no result", extra={"tool": "analyze", "error": repr(payload)[:200]})
            return UpstreamResult.failed("analyze: response has no 'result' field")
        return UpstreamResult(ok=True, data=payload["result"])

    async def diagnose(self, document: Any = MISSING) -> UpstreamResult:
        body: dict[str, Any] = {} if document is MISSING else {"resumeDoc": document}
        return await self._post_json(self.diagnose_service, body)

    async def update(self, items: Sequence[PatchItem], document: Any = MISSING) -> UpstreamResult:
        body: dict[str, Any] = {"items": list(items)}
        if document is not MISSING:
            body["structuredData"] = document
        return await self._post_json(self.update_service, body)

    # -- probes --

    async def probe_head(self, url: str) -> HeadProbe:
        """HEAD the URL; failures are recorded, never raised."""
        try:
            response = await self._http.head(url)
        except httpx.HTTPError as exc:
            return {"error": str(exc) or type(exc).__name__}
        return {
            "ok": response.is_success,
            "status": response.status_code,
            "content_type": response.headers.get("content-type"),
            "content_length": response.headers.get("content-length"),
            "content_disposition": response.headers.get("content-disposition"),
        }

    async def probe_range(self, url: str) -> RangeProbe:
        """GET the first byte only.  Reads at most one chunk even if Range is ignored."""
        try:
            async with self._http.stream("GET", url, headers={"Range": "bytes=0-0"}) as response:
                bytes_read = 0
                async for chunk in response.aiter_bytes():
                    bytes_read += len(chunk)
                    if bytes_read:
                        break
                return {
                    "ok": response.is_success,
                    "status": response.status_code,
                    "content_type": response.headers.get("content-type"),
                    "content_range": response.headers.get("content-range"),
                    "accept_ranges": response.headers.get("accept-ranges"),
                    "bytes_read": bytes_read,
                }
        except httpx.HTTPError as exc:
            return {"error": str(exc) or type(exc).__name__}
