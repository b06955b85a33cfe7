"""resume-mcp: MCP server for the resume parse/analyze/diagnose/update workflow."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("resume-mcp")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

from resume_mcp.registry import ToolDescriptor, ToolKind, ToolRegistry

__all__ = ["ToolDescriptor", "ToolKind", "ToolRegistry", "__version__"]
