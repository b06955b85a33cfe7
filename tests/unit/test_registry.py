"""Tests for the tool registry and widget asset loading."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from resume_mcp.errors import UnknownResourceError, UnknownToolError, WidgetAssetError
from resume_mcp.registry import ToolKind, ToolRegistry, build_default_registry, load_widget_html


class TestDefaultRegistry:
    def test_four_tools(self, registry: ToolRegistry) -> None:
        assert len(registry) == 4
        kinds = {d.id: d.kind for d in registry}
        assert kinds == {
            "show-parser-resume": ToolKind.PARSE,
            "show-diagnose-resume": ToolKind.DIAGNOSE,
            "show-analyze-resume": ToolKind.ANALYZE,
            "show-update-resume": ToolKind.UPDATE,
        }

    def test_lookup_by_id_and_uri(self, registry: ToolRegistry) -> None:
        d = registry.get("show-update-resume")
        assert registry.by_uri(d.template_uri) is d
        assert d.template_uri == "ui://widget/update-resume.html"
        assert d.response_text == "Rendered Update Resume!"
        assert "show-update-resume" in registry

    def test_html_loaded(self, registry: ToolRegistry) -> None:
        assert registry.get("show-parser-resume").html == '<div id="parser-resume-root"></div>\n'

    def test_unknown_id(self, registry: ToolRegistry) -> None:
        with pytest.raises(UnknownToolError):
            registry.get("nope")

    def test_unknown_uri(self, registry: ToolRegistry) -> None:
        with pytest.raises(UnknownResourceError):
            registry.by_uri("ui://widget/nope.html")

    def test_schema_follows_kind(self, registry: ToolRegistry) -> None:
        parse = registry.get("show-parser-resume")
        analyze = registry.get("show-analyze-resume")
        assert parse.input_schema is analyze.input_schema
        assert "items" in registry.get("show-update-resume").input_schema["properties"]

    def test_duplicate_id_rejected(self, registry: ToolRegistry) -> None:
        d = registry.get("show-parser-resume")
        with pytest.raises(ValueError, match="Duplicate tool id"):
            ToolRegistry([d, replace(d, template_uri="ui://widget/other.html")])

    def test_duplicate_uri_rejected(self, registry: ToolRegistry) -> None:
        d = registry.get("show-parser-resume")
        with pytest.raises(ValueError, match="Duplicate template URI"):
            ToolRegistry([d, replace(d, id="show-other")])


class TestLoadWidgetHtml:
    def test_prefers_exact_name(self, tmp_path: Path) -> None:
        (tmp_path / "analyze-resume.html").write_text("exact")
        (tmp_path / "analyze-resume-abc123.html").write_text("hashed")
        assert load_widget_html(tmp_path, "analyze-resume") == "exact"

    def test_falls_back_to_last_hashed_build(self, tmp_path: Path) -> None:
        (tmp_path / "analyze-resume-0a1b.html").write_text("old")
        (tmp_path / "analyze-resume-9f8e.html").write_text("new")
        assert load_widget_html(tmp_path, "analyze-resume") == "new"

    def test_missing_component(self, tmp_path: Path) -> None:
        with pytest.raises(WidgetAssetError, match="analyze-resume"):
            load_widget_html(tmp_path, "analyze-resume")

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(WidgetAssetError, match="Build the widgets"):
            load_widget_html(tmp_path / "nope", "analyze-resume")

    def test_registry_build_fails_fast(self, tmp_path: Path) -> None:
        (tmp_path / "parser-resume.html").write_text("only one")
        with pytest.raises(WidgetAssetError):
            build_default_registry(tmp_path)
