# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
"""TypedDict contracts for tool input arguments.

Each TypedDict mirrors the closed JSON Schema for one tool kind in
``registry.INPUT_SCHEMAS``.  ``KIND_ARGS_MAP`` maps the schema tag to its
TypedDict so the sync test can verify structural agreement.

Unlike the schemas, these are a static-analysis aid only: the dispatcher
validates arguments with ``jsonschema`` before it ``cast()``s them.
"""

# NOTE: Do NOT add ``from __future__ import annotations`` to this module.
# It breaks TypedDict.__required_keys__ / __optional_keys__ introspection,
# which test_input_type_contracts.py depends on.

from typing import Any, Literal, NotRequired, TypedDict

PatchAction = Literal["new", "update", "add", "delete"]


class PlainArgs(TypedDict):
    resumeTopping: str


class PdfRef(TypedDict):
    download_url: str
    file_id: str


class FileToolArgs(TypedDict):
    resumeTopping: str
    resumePdf: PdfRef


class DiagnosePdfRef(TypedDict):
    file_id: str
    download_url: NotRequired[str]
    res: NotRequired[Any]


class DiagnoseArgs(TypedDict):
    resumeTopping: str
    resumePdf: DiagnosePdfRef


class PatchItem(TypedDict):
    indexPath: str
    action: PatchAction
    value: NotRequired[Any]


class UpdateArgs(TypedDict):
    resumeTopping: str
    resumePdf: DiagnosePdfRef
    items: NotRequired[list[PatchItem]]


# Schema tag -> args TypedDict.  Nested objects are keyed "<tag>.<property>".
KIND_ARGS_MAP: dict[str, type] = {
    "plain": PlainArgs,
    "file": FileToolArgs,
    "file.resumePdf": PdfRef,
    "diagnose": DiagnoseArgs,
    "diagnose.resumePdf": DiagnosePdfRef,
    "update": UpdateArgs,
    "update.resumePdf": DiagnosePdfRef,
    "update.items": PatchItem,
}
