"""CLI for the resume MCP server.

Usage:
    resume-mcp                                # Serve on $HOST:$PORT (default 127.0.0.1:8000)
    resume-mcp --port 9000                    # Custom port
    resume-mcp --assets-dir ./assets          # Where the built widget HTML lives
    resume-mcp --log-dir ./logs               # JSONL logs instead of stderr
"""

from __future__ import annotations

import dataclasses
import sys
from pathlib import Path

import click

from resume_mcp import __version__
from resume_mcp.errors import WidgetAssetError
from resume_mcp.settings import read_settings


@click.command()
@click.version_option(version=__version__, prog_name="resume-mcp")
@click.option("--host", default=None, help="Bind address (default: $HOST or 127.0.0.1)")
@click.option("--port", default=None, type=click.IntRange(1, 65535), help="Port (default: $PORT or 8000)")
@click.option("--assets-dir", default=None, type=click.Path(file_okay=False, path_type=Path), help="Built widget HTML directory")
@click.option("--log-dir", default=None, type=click.Path(file_okay=False, path_type=Path), help="Write JSONL logs here")
def main(host: str | None, port: int | None, assets_dir: Path | None, log_dir: Path | None) -> None:
    """Serve the resume workflow tools over MCP (SSE transport)."""
    import uvicorn

    from resume_mcp.app import create_app
    from resume_mcp.logging import setup_logging

    settings = read_settings()
    overrides = {"host": host, "port": port, "assets_dir": assets_dir, "log_dir": log_dir}
    settings = dataclasses.replace(settings, **{k: v for k, v in overrides.items() if v is not None})

    logger = setup_logging(settings.log_dir)
    try:
        app = create_app(settings)
    except WidgetAssetError as e:
        click.echo(str(e), err=True)
        sys.exit(1)

    base = f"http://{settings.host}:{settings.port}"
    logger.info("Resume MCP server listening on %s", base)
    click.echo(f"Resume MCP server listening on {base}")
    click.echo(f"  SSE stream: GET {base}{settings.stream_path}")
    click.echo(f"  Message post endpoint: POST {base}{settings.message_path}?sessionId=...")

    uvicorn.run(app, host=settings.host, port=settings.port, log_level="warning")


if __name__ == "__main__":
    main()
