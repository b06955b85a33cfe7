"""Environment-driven configuration.

Every value has a default; malformed values are logged and replaced by the
default rather than aborting startup.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_STREAM_PATH = "/mcp"
DEFAULT_MESSAGE_PATH = "/mcp/messages"
DEFAULT_ASSETS_DIR = Path("assets")
DEFAULT_UPSTREAM_BASE = "http://127.0.0.1:8080/resume"
DEFAULT_UPSTREAM_TIMEOUT_S = 30.0
CACHE_SCOPES = frozenset({"global", "session"})

_ENV_PREFIX = "RESUME_MCP_"


@dataclass(frozen=True)
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    stream_path: str = DEFAULT_STREAM_PATH
    message_path: str = DEFAULT_MESSAGE_PATH
    assets_dir: Path = DEFAULT_ASSETS_DIR
    log_dir: Path | None = None
    analyze_url: str = f"{DEFAULT_UPSTREAM_BASE}/analyze"
    diagnose_url: str = f"{DEFAULT_UPSTREAM_BASE}/diagnose"
    update_url: str = f"{DEFAULT_UPSTREAM_BASE}/update"
    # None disables the timeout entirely.
    upstream_timeout_s: float | None = DEFAULT_UPSTREAM_TIMEOUT_S
    upstream_retry_attempts: int = 1
    upstream_retry_max_wait_s: float = 2.0
    cache_scope: str = "global"
    cache_max_entries: int | None = None
    cache_ttl_s: float | None = None


def _int(raw: str | None, name: str, default: int, *, min_value: int = 0, max_value: int | None = None) -> int:
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid %s value %r; using default %d", name, raw, default)
        return default
    if value < min_value or (max_value is not None and value > max_value):
        logger.warning("%s value %d out of range; using default %d", name, value, default)
        return default
    return value


def _float(raw: str | None, name: str, default: float | None) -> float | None:
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid %s value %r; using default %r", name, raw, default)
        return default
    if value < 0:
        logger.warning("%s must not be negative (got %r); using default %r", name, value, default)
        return default
    return value


def _path(raw: str) -> str:
    return "/" + raw.strip().strip("/")


def read_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from *environ* (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ

    def get(name: str) -> str | None:
        return env.get(_ENV_PREFIX + name)

    port = _int(env.get("PORT"), "PORT", DEFAULT_PORT, min_value=1, max_value=65535)

    timeout = _float(get("UPSTREAM_TIMEOUT_S"), "RESUME_MCP_UPSTREAM_TIMEOUT_S", DEFAULT_UPSTREAM_TIMEOUT_S)
    if timeout == 0:
        timeout = None

    scope = (get("CACHE_SCOPE") or "global").strip().lower()
    if scope not in CACHE_SCOPES:
        logger.warning("Invalid RESUME_MCP_CACHE_SCOPE %r; using 'global'", scope)
        scope = "global"

    max_entries = _int(get("CACHE_MAX_ENTRIES"), "RESUME_MCP_CACHE_MAX_ENTRIES", 0)
    ttl = _float(get("CACHE_TTL_S"), "RESUME_MCP_CACHE_TTL_S", None)

    base = (get("UPSTREAM_BASE") or DEFAULT_UPSTREAM_BASE).rstrip("/")
    log_dir = get("LOG_DIR")

    stream_path = _path(get("STREAM_PATH") or DEFAULT_STREAM_PATH)
    message_path = _path(get("MESSAGE_PATH") or DEFAULT_MESSAGE_PATH)
    if stream_path == message_path:
        logger.warning("Stream and message paths are both %s; using defaults", stream_path)
        stream_path, message_path = DEFAULT_STREAM_PATH, DEFAULT_MESSAGE_PATH

    return Settings(
        host=env.get("HOST") or DEFAULT_HOST,
        port=port,
        stream_path=stream_path,
        message_path=message_path,
        assets_dir=Path(get("ASSETS_DIR") or DEFAULT_ASSETS_DIR),
        log_dir=Path(log_dir) if log_dir else None,
        analyze_url=get("ANALYZE_URL") or f"{base}/analyze",
        diagnose_url=get("DIAGNOSE_URL") or f"{base}/diagnose",
        update_url=get("UPDATE_URL") or f"{base}/update",
        upstream_timeout_s=timeout,
        upstream_retry_attempts=_int(get("RETRY_ATTEMPTS"), "RESUME_MCP_RETRY_ATTEMPTS", 1, min_value=1, max_value=10),
        upstream_retry_max_wait_s=_float(get("RETRY_MAX_WAIT_S"), "RESUME_MCP_RETRY_MAX_WAIT_S", 2.0) or 2.0,
        cache_scope=scope,
        cache_max_entries=max_entries or None,
        cache_ttl_s=ttl or None,
    )
