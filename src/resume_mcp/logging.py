"""Structured JSON logging for resume-mcp.

Writes JSONL to ``<log_dir>/resume-mcp.log`` with rotation (5MB, 3 backups),
or to stderr when no log directory is configured.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

LOGGER_NAME = "resume_mcp"
_LOG_FILENAME = "resume-mcp.log"
_setup_lock = threading.Lock()
_MAX_BYTES = 5 * 1024 * 1024  # 5MB
_BACKUP_COUNT = 3

# LogRecord attribute -> JSON key
_EXTRA_FIELDS = (
    ("tool", "tool"),
    ("args_data", "args"),
    ("duration_ms", "duration_ms"),
    ("error", "error"),
    ("session_id", "session"),
)


class _JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for attr, key in _EXTRA_FIELDS:
            if hasattr(record, attr):
                entry[key] = getattr(record, attr)
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = str(record.exc_info[1])
        return json.dumps(entry, default=str)


def _is_stderr_handler(handler: logging.Handler) -> bool:
    return type(handler) is logging.StreamHandler and getattr(handler, "stream", None) is sys.stderr


def setup_logging(log_dir: Path | None = None, *, level: int = logging.INFO) -> logging.Logger:
    """Set up structured JSON logging for the ``resume_mcp`` logger tree.

    With *log_dir*, records go to a rotating ``resume-mcp.log`` in that
    directory; without it, to stderr.  Calling again with the same target is
    a no-op; calling with a different target replaces the old handler.
    """
    logger = logging.getLogger(LOGGER_NAME)

    with _setup_lock:
        if log_dir is None:
            for h in logger.handlers[:]:
                if _is_stderr_handler(h):
                    return logger
            handler: logging.Handler = logging.StreamHandler(sys.stderr)
        else:
            log_dir.mkdir(parents=True, exist_ok=True)
            log_path = log_dir / _LOG_FILENAME
            target_filename = os.path.abspath(str(log_path))
            for h in logger.handlers[:]:
                if not isinstance(h, RotatingFileHandler):
                    continue
                if h.baseFilename == target_filename:
                    return logger
                # Different path: drop the stale handler.
                logger.removeHandler(h)
                h.close()
            handler = RotatingFileHandler(
                str(log_path),
                maxBytes=_MAX_BYTES,
                backupCount=_BACKUP_COUNT,
            )

        handler.setFormatter(_JsonFormatter())
        logger.addHandler(handler)
        logger.setLevel(level)
    return logger
