"""Tests for structured logging."""

from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
from pathlib import Path

import pytest

from resume_mcp.logging import LOGGER_NAME, setup_logging


def _last_record(log_path: Path) -> dict[str, object]:
    for handler in logging.getLogger(LOGGER_NAME).handlers:
        handler.flush()
    return json.loads(log_path.read_text().strip().split("\n")[-1])


class TestSetupLogging:
    def test_creates_log_file(self, tmp_path: Path) -> None:
        logger = setup_logging(tmp_path)
        logger.info("tool_call", extra={"tool": "show-analyze-resume", "args_data": {"file_id": "f1"}})
        record = _last_record(tmp_path / "resume-mcp.log")
        assert record["msg"] == "tool_call"
        assert record["tool"] == "show-analyze-resume"
        assert record["args"] == {"file_id": "f1"}
        assert record["level"] == "INFO"

    def test_extra_fields(self, tmp_path: Path) -> None:
        logger = setup_logging(tmp_path)
        logger.info("tool_call", extra={"duration_ms": 42.5, "session_id": "s1", "error": "boom"})
        record = _last_record(tmp_path / "resume-mcp.log")
        assert record["duration_ms"] == 42.5
        assert record["session"] == "s1"
        assert record["error"] == "boom"

    def test_child_loggers_propagate(self, tmp_path: Path) -> None:
        setup_logging(tmp_path)
        logging.getLogger("resume_mcp.transport").info("SSE session created", extra={"session_id": "abc"})
        record = _last_record(tmp_path / "resume-mcp.log")
        assert record["logger"] == "resume_mcp.transport"
        assert record["session"] == "abc"

    def test_exception_recorded(self, tmp_path: Path) -> None:
        logger = setup_logging(tmp_path)
        try:
            msg = "upstream exploded"
            raise RuntimeError(msg)
        except RuntimeError:
            logger.error("tool_error", exc_info=True)
        record = _last_record(tmp_path / "resume-mcp.log")
        assert record["exception"] == "upstream exploded"

    def test_idempotent_setup(self, tmp_path: Path) -> None:
        logger1 = setup_logging(tmp_path)
        logger2 = setup_logging(tmp_path)
        assert logger1 is logger2
        file_handlers = [h for h in logger1.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
        assert len(file_handlers) == 1

    def test_new_dir_replaces_handler(self, tmp_path: Path) -> None:
        setup_logging(tmp_path / "a")
        logger = setup_logging(tmp_path / "b")
        file_handlers = [h for h in logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].baseFilename == os.path.abspath(str(tmp_path / "b" / "resume-mcp.log"))

    def test_stderr_without_log_dir(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = setup_logging()
        assert setup_logging() is logger
        stderr_handlers = [h for h in logger.handlers if type(h) is logging.StreamHandler and h.stream is sys.stderr]
        assert len(stderr_handlers) == 1
