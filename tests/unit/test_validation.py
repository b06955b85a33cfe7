"""Tests for the shared validation module."""

from __future__ import annotations

from typing import Any

import pytest

from resume_mcp.errors import ValidationError
from resume_mcp.registry import INPUT_SCHEMAS
from resume_mcp.validation import normalize_patch_items, validate_arguments

_PDF = {"file_id": "f1", "download_url": "https://files.test/f1.pdf"}


class TestNormalizePatchItems:
    """normalize_patch_items() pure function tests."""

    def test_keeps_items_with_value(self) -> None:
        items: list[Any] = [{"indexPath": "a", "action": "update", "value": 1}]
        assert normalize_patch_items(items) == items

    def test_keeps_delete_without_value(self) -> None:
        items: list[Any] = [{"indexPath": "b", "action": "delete"}]
        assert normalize_patch_items(items) == items

    def test_drops_non_delete_without_value(self) -> None:
        items: list[Any] = [
            {"indexPath": "a", "action": "update", "value": 1},
            {"indexPath": "b", "action": "delete"},
            {"indexPath": "c", "action": "add"},
        ]
        assert normalize_patch_items(items) == items[:2]

    @pytest.mark.parametrize("action", ["new", "update", "add"])
    def test_every_non_delete_action_needs_value(self, action: str) -> None:
        assert normalize_patch_items([{"indexPath": "x", "action": action}]) == []  # type: ignore[typeddict-item]

    def test_null_value_counts_as_present(self) -> None:
        items: list[Any] = [{"indexPath": "a", "action": "new", "value": None}]
        assert normalize_patch_items(items) == items

    def test_preserves_order_and_identity(self) -> None:
        items: list[Any] = [
            {"indexPath": "z", "action": "delete"},
            {"indexPath": "y", "action": "add"},
            {"indexPath": "a", "action": "add", "value": [1]},
        ]
        result = normalize_patch_items(items)
        assert [i["indexPath"] for i in result] == ["z", "a"]
        assert result[1] is items[2]

    def test_empty(self) -> None:
        assert normalize_patch_items([]) == []

    def test_does_not_mutate_input(self) -> None:
        items: list[Any] = [{"indexPath": "c", "action": "add"}]
        normalize_patch_items(items)
        assert items == [{"indexPath": "c", "action": "add"}]


class TestValidateArguments:
    def test_valid_file_args(self) -> None:
        validate_arguments(INPUT_SCHEMAS["file"], {"resumeTopping": "cheese", "resumePdf": _PDF})

    def test_missing_required(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_arguments(INPUT_SCHEMAS["file"], {"resumePdf": _PDF})
        assert "resumeTopping" in str(exc_info.value)

    def test_rejects_extra_top_level(self) -> None:
        with pytest.raises(ValidationError):
            validate_arguments(INPUT_SCHEMAS["plain"], {"resumeTopping": "x", "extra": True})

    def test_rejects_extra_nested(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_arguments(INPUT_SCHEMAS["file"], {"resumeTopping": "x", "resumePdf": {**_PDF, "size": 3}})
        assert exc_info.value.path == "$.resumePdf"

    @pytest.mark.parametrize("url", ["not a url", "/relative/path.pdf", "files.test/f1.pdf"])
    def test_rejects_non_absolute_url(self, url: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_arguments(INPUT_SCHEMAS["file"], {"resumeTopping": "x", "resumePdf": {**_PDF, "download_url": url}})
        assert "is not a valid URL" in str(exc_info.value)
        assert exc_info.value.path == "$.resumePdf.download_url"

    def test_wrong_type(self) -> None:
        with pytest.raises(ValidationError):
            validate_arguments(INPUT_SCHEMAS["plain"], {"resumeTopping": 3})

    def test_diagnose_needs_only_file_id(self) -> None:
        validate_arguments(INPUT_SCHEMAS["diagnose"], {"resumeTopping": "x", "resumePdf": {"file_id": "f1"}})

    def test_diagnose_accepts_any_inline_analysis(self) -> None:
        for res in ({"skills": []}, [1, 2], "text", None):
            validate_arguments(INPUT_SCHEMAS["diagnose"], {"resumeTopping": "x", "resumePdf": {"file_id": "f1", "res": res}})

    def test_update_item_shape(self) -> None:
        args = {"resumeTopping": "x", "resumePdf": {"file_id": "f1"}, "items": [{"indexPath": "a", "action": "delete"}]}
        validate_arguments(INPUT_SCHEMAS["update"], args)

    def test_update_item_empty_index_path(self) -> None:
        args = {"resumeTopping": "x", "resumePdf": {"file_id": "f1"}, "items": [{"indexPath": "", "action": "delete"}]}
        with pytest.raises(ValidationError) as exc_info:
            validate_arguments(INPUT_SCHEMAS["update"], args)
        assert exc_info.value.path == "$.items[0].indexPath"

    def test_update_item_extra_key(self) -> None:
        args = {"resumeTopping": "x", "resumePdf": {"file_id": "f1"}, "items": [{"indexPath": "a", "action": "delete", "why": 1}]}
        with pytest.raises(ValidationError):
            validate_arguments(INPUT_SCHEMAS["update"], args)

    def test_does_not_mutate(self) -> None:
        args = {"resumeTopping": "x", "resumePdf": dict(_PDF)}
        snapshot = {"resumeTopping": "x", "resumePdf": dict(_PDF)}
        validate_arguments(INPUT_SCHEMAS["file"], args)
        assert args == snapshot
