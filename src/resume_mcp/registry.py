"""Tool registry: the fixed set of resume workflow tools and their widgets.

Each tool is backed by a widget (built HTML under the assets directory) that
the client renders with the tool's structured output.  The registry is built
once at startup and is immutable afterwards.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from resume_mcp.errors import UnknownResourceError, UnknownToolError, WidgetAssetError

logger = logging.getLogger(__name__)

WIDGET_MIME_TYPE = "text/html+skybridge"
FILE_PARAM = "resumePdf"


class ToolKind(enum.Enum):
    """Closed set of tool behaviours.  One dispatcher handler per member."""

    PLAIN = "plain"
    PARSE = "parse"
    ANALYZE = "analyze"
    DIAGNOSE = "diagnose"
    UPDATE = "update"

    @property
    def schema_tag(self) -> str:
        return _SCHEMA_TAGS[self]

    @property
    def takes_file(self) -> bool:
        return self is not ToolKind.PLAIN


_SCHEMA_TAGS = {
    ToolKind.PLAIN: "plain",
    ToolKind.PARSE: "file",
    ToolKind.ANALYZE: "file",
    ToolKind.DIAGNOSE: "diagnose",
    ToolKind.UPDATE: "update",
}

# ---------------------------------------------------------------------------
# Input schemas (closed: additionalProperties is false at every level)
# ---------------------------------------------------------------------------

_TOPPING = {"type": "string", "description": "Topping to mention when rendering the widget."}

_FILE_REF = {
    "type": "object",
    "description": "Uploaded resume PDF",
    "properties": {
        "download_url": {"type": "string", "format": "uri", "description": "Temporary download URL"},
        "file_id": {"type": "string", "description": "File identifier"},
    },
    "required": ["download_url", "file_id"],
    "additionalProperties": False,
}

_ANALYZED_FILE_REF = {
    "type": "object",
    "description": "Resume file reference; res is an analysis result to use instead of the cached one",
    "properties": {
        "file_id": {"type": "string", "description": "File identifier"},
        "download_url": {"type": "string", "description": "Temporary download URL"},
        "res": {"description": "Analysis result from a previous analyze call"},
    },
    "required": ["file_id"],
    "additionalProperties": False,
}

_PATCH_ITEM = {
    "type": "object",
    "properties": {
        "indexPath": {"type": "string", "minLength": 1, "description": "Field path, e.g. work[0].title"},
        "action": {"type": "string", "enum": ["new", "update", "add", "delete"]},
        "value": {"description": "New value; required for every action except delete"},
    },
    "required": ["indexPath", "action"],
    "additionalProperties": False,
}

INPUT_SCHEMAS: dict[str, dict[str, Any]] = {
    "plain": {
        "type": "object",
        "properties": {"resumeTopping": _TOPPING},
        "required": ["resumeTopping"],
        "additionalProperties": False,
    },
    "file": {
        "type": "object",
        "properties": {"resumeTopping": _TOPPING, "resumePdf": _FILE_REF},
        "required": ["resumeTopping", "resumePdf"],
        "additionalProperties": False,
    },
    "diagnose": {
        "type": "object",
        "properties": {"resumeTopping": _TOPPING, "resumePdf": _ANALYZED_FILE_REF},
        "required": ["resumeTopping", "resumePdf"],
        "additionalProperties": False,
    },
    "update": {
        "type": "object",
        "properties": {
            "resumeTopping": _TOPPING,
            "resumePdf": _ANALYZED_FILE_REF,
            "items": {"type": "array", "items": _PATCH_ITEM, "description": "Edit instructions to apply"},
        },
        "required": ["resumeTopping", "resumePdf"],
        "additionalProperties": False,
    },
}

# ---------------------------------------------------------------------------
# Output contracts (open: clients must tolerate additional keys)
# ---------------------------------------------------------------------------

_OUTCOME = {"type": "string", "enum": ["success", "partial", "failed"]}
_SOURCE = {"type": "string", "enum": ["inline", "cache", "none"]}
_PDF_OUT = {"type": "object", "properties": {"file_id": {"type": "string"}}, "required": ["file_id"]}

OUTPUT_SCHEMAS: dict[ToolKind, dict[str, Any]] = {
    ToolKind.PLAIN: {
        "type": "object",
        "properties": {"resumeTopping": {"type": "string"}},
        "required": ["resumeTopping"],
    },
    ToolKind.PARSE: {
        "type": "object",
        "properties": {
            "resumeTopping": {"type": "string"},
            "resumePdf": _PDF_OUT,
            "verify": {"type": "object", "required": ["file_id", "has_download_url", "head", "range"]},
            "outcome": _OUTCOME,
        },
        "required": ["resumeTopping", "resumePdf", "verify", "outcome"],
    },
    ToolKind.ANALYZE: {
        "type": "object",
        "properties": {
            "resumeTopping": {"type": "string"},
            "resumePdf": {
                "type": "object",
                "properties": {"file_id": {"type": "string"}, "download_url": {"type": "string"}, "res": {}},
                "required": ["file_id", "download_url", "res"],
            },
            "outcome": _OUTCOME,
        },
        "required": ["resumeTopping", "resumePdf", "outcome"],
    },
    ToolKind.DIAGNOSE: {
        "type": "object",
        "properties": {
            "resumeTopping": {"type": "string"},
            "resumePdf": _PDF_OUT,
            "analysis": {},
            "analysis_source": _SOURCE,
            "outcome": _OUTCOME,
        },
        "required": ["resumeTopping", "resumePdf", "analysis", "analysis_source", "outcome"],
    },
    ToolKind.UPDATE: {
        "type": "object",
        "properties": {
            "resumeTopping": {"type": "string"},
            "resumePdf": _PDF_OUT,
            "result": {},
            "items": {"type": "array"},
            "analysis_source": _SOURCE,
            "outcome": _OUTCOME,
        },
        "required": ["resumeTopping", "resumePdf", "result", "items", "analysis_source", "outcome"],
    },
}


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ToolDescriptor:
    id: str
    title: str
    template_uri: str
    invoking: str
    invoked: str
    response_text: str
    component: str
    kind: ToolKind
    html: str = ""

    @property
    def input_schema(self) -> dict[str, Any]:
        return INPUT_SCHEMAS[self.kind.schema_tag]

    @property
    def output_schema(self) -> dict[str, Any]:
        return OUTPUT_SCHEMAS[self.kind]

    def descriptor_meta(self) -> dict[str, Any]:
        """``_meta`` attached to tool, resource, and template listings."""
        return {
            "openai/outputTemplate": self.template_uri,
            "openai/toolInvocation/invoking": self.invoking,
            "openai/toolInvocation/invoked": self.invoked,
            "openai/widgetAccessible": True,
        }

    def invocation_meta(self) -> dict[str, Any]:
        """``_meta`` attached to each tool call result."""
        return {
            "openai/toolInvocation/invoking": self.invoking,
            "openai/toolInvocation/invoked": self.invoked,
        }


def load_widget_html(assets_dir: Path, component: str) -> str:
    """Return the built HTML for *component*.

    Prefers ``<component>.html``; falls back to the lexicographically last
    hashed build ``<component>-*.html``.
    """
    if not assets_dir.is_dir():
        msg = f"Widget assets not found. Expected directory {assets_dir}. Build the widgets before starting the server."
        raise WidgetAssetError(msg)

    direct = assets_dir / f"{component}.html"
    if direct.is_file():
        return direct.read_text(encoding="utf-8")

    candidates = sorted(p.name for p in assets_dir.glob(f"{component}-*.html") if p.is_file())
    if candidates:
        return (assets_dir / candidates[-1]).read_text(encoding="utf-8")

    msg = f'Widget HTML for "{component}" not found in {assets_dir}. Build the widgets to generate the assets.'
    raise WidgetAssetError(msg)


class ToolRegistry:
    """Immutable lookup of tool descriptors by tool id and by template URI."""

    def __init__(self, descriptors: Iterable[ToolDescriptor]) -> None:
        self._by_id: dict[str, ToolDescriptor] = {}
        self._by_uri: dict[str, ToolDescriptor] = {}
        for d in descriptors:
            if d.id in self._by_id:
                msg = f"Duplicate tool id: {d.id}"
                raise ValueError(msg)
            if d.template_uri in self._by_uri:
                msg = f"Duplicate template URI: {d.template_uri}"
                raise ValueError(msg)
            self._by_id[d.id] = d
            self._by_uri[d.template_uri] = d

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, tool_id: object) -> bool:
        return tool_id in self._by_id

    def get(self, tool_id: str) -> ToolDescriptor:
        try:
            return self._by_id[tool_id]
        except KeyError:
            raise UnknownToolError(tool_id) from None

    def by_uri(self, uri: str) -> ToolDescriptor:
        try:
            return self._by_uri[uri]
        except KeyError:
            raise UnknownResourceError(uri) from None


# (id, title, component, invoking, invoked, response_text, kind)
_DEFAULT_TOOLS: tuple[tuple[str, str, str, str, str, str, ToolKind], ...] = (
    (
        "show-parser-resume",
        "Show Parser Resume",
        "parser-resume",
        "Start Parser Resume",
        "finished Parsing Resume",
        "Rendered Parser Resume!",
        ToolKind.PARSE,
    ),
    (
        "show-diagnose-resume",
        "Show Diagnose Resume",
        "diagnose-resume",
        "Start Diagnose Resume",
        "finished Diagnose Resume",
        "Rendered Diagnose Resume!",
        ToolKind.DIAGNOSE,
    ),
    (
        "show-analyze-resume",
        "Show Analyze Resume",
        "analyze-resume",
        "Start Analyze Resume",
        "finished Analyze Resume",
        "Rendered Analyze Resume!",
        ToolKind.ANALYZE,
    ),
    (
        "show-update-resume",
        "Show Update Resume",
        "update-resume",
        "Start update Resume",
        "finished updating Resume",
        "Rendered Update Resume!",
        ToolKind.UPDATE,
    ),
)


def build_default_registry(assets_dir: Path) -> ToolRegistry:
    """Build the four resume tools, loading each widget's HTML from *assets_dir*."""
    descriptors = []
    for tool_id, title, component, invoking, invoked, response_text, kind in _DEFAULT_TOOLS:
        descriptors.append(
            ToolDescriptor(
                id=tool_id,
                title=title,
                template_uri=f"ui://widget/{component}.html",
                invoking=invoking,
                invoked=invoked,
                response_text=response_text,
                component=component,
                kind=kind,
                html=load_widget_html(assets_dir, component),
            )
        )
        logger.info("Configured tool %s as %s tool", tool_id, kind.value)
    return ToolRegistry(descriptors)
