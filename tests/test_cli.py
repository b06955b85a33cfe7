"""CLI tests using Click's CliRunner."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from resume_mcp import __version__
from resume_mcp.cli import main


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def served(monkeypatch: pytest.MonkeyPatch) -> dict[str, Any]:
    """Capture the uvicorn.run call instead of starting a server."""
    calls: dict[str, Any] = {}

    def fake_run(app: Any, **kwargs: Any) -> None:
        calls["app"] = app
        calls.update(kwargs)

    monkeypatch.setattr("uvicorn.run", fake_run)
    return calls


def test_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_serves_with_options(cli_runner: CliRunner, assets_dir: Path, served: dict[str, Any]) -> None:
    result = cli_runner.invoke(main, ["--assets-dir", str(assets_dir), "--port", "9123", "--host", "0.0.0.0"], env={})
    assert result.exit_code == 0, result.output
    assert served["host"] == "0.0.0.0"
    assert served["port"] == 9123
    assert served["app"].state.settings.assets_dir == assets_dir
    assert "GET http://0.0.0.0:9123/mcp" in result.output
    assert "POST http://0.0.0.0:9123/mcp/messages?sessionId=" in result.output


def test_port_from_environment(cli_runner: CliRunner, assets_dir: Path, served: dict[str, Any]) -> None:
    result = cli_runner.invoke(main, ["--assets-dir", str(assets_dir)], env={"PORT": "9200"})
    assert result.exit_code == 0, result.output
    assert served["port"] == 9200


def test_missing_assets_exit_nonzero(cli_runner: CliRunner, tmp_path: Path, served: dict[str, Any]) -> None:
    result = cli_runner.invoke(main, ["--assets-dir", str(tmp_path / "missing")])
    assert result.exit_code == 1
    assert "Widget assets not found" in result.output
    assert served == {}


def test_rejects_bad_port(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(main, ["--port", "70000"])
    assert result.exit_code == 2
