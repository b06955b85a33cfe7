"""Shared validation functions for tool arguments and patch lists.

Pure functions with no MCP or FastAPI dependencies.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

import httpx
from jsonschema import Draft202012Validator, FormatChecker
from jsonschema.exceptions import best_match

from resume_mcp.errors import ValidationError
from resume_mcp.types.inputs import PatchItem

_format_checker = FormatChecker(formats=())
_validators: dict[str, Draft202012Validator] = {}


@_format_checker.checks("uri", raises=(httpx.InvalidURL,))
def _is_absolute_url(value: object) -> bool:
    """Accept only absolute URLs with a scheme and a host."""
    if not isinstance(value, str):
        return True
    url = httpx.URL(value)
    return bool(url.scheme) and bool(url.host)


def _validator(schema: Mapping[str, Any]) -> Draft202012Validator:
    key = json.dumps(schema, sort_keys=True)
    validator = _validators.get(key)
    if validator is None:
        validator = Draft202012Validator(schema, format_checker=_format_checker)
        _validators[key] = validator
    return validator


def validate_arguments(schema: Mapping[str, Any], arguments: Any) -> None:
    """Validate *arguments* against a closed JSON Schema.

    Raises :class:`ValidationError` naming the offending path of the most
    relevant failure.  Nothing is mutated.
    """
    error = best_match(_validator(schema).iter_errors(arguments))
    if error is None:
        return
    path = error.json_path
    if error.validator == "format":
        message = f"{path}: {error.instance!r} is not a valid URL"
    else:
        message = f"{path}: {error.message}"
    raise ValidationError(message, path=path)


def normalize_patch_items(items: Sequence[PatchItem]) -> list[PatchItem]:
    """Drop edit instructions that cannot be applied.

    ``delete`` items are kept unconditionally; every other action is kept
    only when the item carries a ``value`` key (JSON ``null`` counts as a
    value).  Order is preserved and kept items are returned as-is.
    """
    return [item for item in items if item["action"] == "delete" or "value" in item]
