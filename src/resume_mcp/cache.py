"""Cross-call state: the last analysis result per file id.

Analyze writes, diagnose and update read.  This is what lets the agent pass
only a ``file_id`` to later steps instead of resending the whole analysis.

All access happens on the event loop thread, so there is no locking.  Two
concurrent analyze calls for the same file race with last-write-wins.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any, Final, Literal, Protocol

logger = logging.getLogger(__name__)

CacheScope = Literal["global", "session"]


class _Missing:
    """Marker for "no document": a cache miss, or nothing to send upstream."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()


class AnalysisStore(Protocol):
    """What the dispatcher needs from a cross-call store."""

    def get(self, file_id: str | None, *, session_id: str | None = None) -> Any: ...

    def put(self, file_id: str | None, document: Any, *, session_id: str | None = None) -> bool: ...

    def discard_session(self, session_id: str) -> int: ...


class AnalysisCache:
    """In-memory :class:`AnalysisStore`.

    ``scope="global"`` shares entries across sessions (a second client can
    diagnose a file analyzed by another); ``scope="session"`` partitions them
    by session id.  ``max_entries`` evicts the least recently written entry;
    ``ttl_s`` expires entries on read.  Both default to unbounded.
    """

    def __init__(
        self,
        *,
        scope: CacheScope = "global",
        max_entries: int | None = None,
        ttl_s: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if scope not in ("global", "session"):
            msg = f"Invalid cache scope: {scope!r}"
            raise ValueError(msg)
        if max_entries is not None and max_entries < 1:
            msg = "max_entries must be >= 1"
            raise ValueError(msg)
        self.scope = scope
        self.max_entries = max_entries
        self.ttl_s = ttl_s
        self._clock = clock
        # key -> (written_at, document)
        self._entries: OrderedDict[tuple[str, str], tuple[float, Any]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def _key(self, file_id: str, session_id: str | None) -> tuple[str, str]:
        if self.scope == "session":
            return (session_id or "", file_id)
        return ("", file_id)

    def get(self, file_id: str | None, *, session_id: str | None = None) -> Any:
        """Return the stored document, or ``MISSING`` on a miss.

        A stored ``None`` is a hit: the analysis service may legitimately
        answer with a null result.
        """
        if not file_id:
            return MISSING
        key = self._key(file_id, session_id)
        entry = self._entries.get(key)
        if entry is None:
            return MISSING
        written_at, document = entry
        if self.ttl_s is not None and self._clock() - written_at > self.ttl_s:
            del self._entries[key]
            logger.debug("Analysis for %s expired", file_id)
            return MISSING
        return document

    def put(self, file_id: str | None, document: Any, *, session_id: str | None = None) -> bool:
        """Store *document*; returns False (and stores nothing) for an empty file id."""
        if not file_id:
            return False
        key = self._key(file_id, session_id)
        self._entries.pop(key, None)
        self._entries[key] = (self._clock(), document)
        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted analysis for %s", evicted[1])
        return True

    def discard_session(self, session_id: str) -> int:
        """Drop every entry owned by *session_id*.  No-op for global scope."""
        if self.scope != "session":
            return 0
        doomed = [k for k in self._entries if k[0] == session_id]
        for k in doomed:
            del self._entries[k]
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()
