"""Typed contracts shared across importing services."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypedDict

from .constants import FILE_LEVEL_ROW, ImportIssueCode


@dataclass(frozen=True)
class ImportRow:
    """One raw spreadsheet row. ``row_number`` is assigned once and never recomputed."""

    row_number: int
    values: Mapping[str, Any]

    @classmethod
    def from_mappings(cls, rows: Iterable[Mapping[str, Any]]) -> list[ImportRow]:
        return [cls(row_number=index, values=dict(values)) for index, values in enumerate(rows, start=1)]


@dataclass(frozen=True)
class ValidRow:
    """A row that passed structural validation, with normalized values."""

    row_number: int
    data: dict[str, Any]


@dataclass(frozen=True)
class ValidationIssue:
    row: int
    field: str
    message: str
    value: Any = None
    row_index: int | None = None
    code: ImportIssueCode = ImportIssueCode.STRUCTURAL_ERROR

    @property
    def is_file_level(self) -> bool:
        return self.row == FILE_LEVEL_ROW

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "row": self.row,
            "field": self.field,
            "message": self.message,
            "value": self.value,
            "code": self.code.value,
        }
        if self.row_index is not None:
            payload["row_index"] = self.row_index
        return payload


@dataclass
class SchemaValidationResult:
    success: bool
    valid_rows: list[ValidRow] = field(default_factory=list)
    invalid_rows: list[ImportRow] = field(default_factory=list)
    errors: list[ValidationIssue] = field(default_factory=list)
    message: str | None = None

    @property
    def total_rows(self) -> int:
        return len(self.valid_rows) + len(self.invalid_rows)


@dataclass
class BusinessValidationResult:
    errors: list[ValidationIssue] = field(default_factory=list)

    @property
    def flagged_row_numbers(self) -> set[int]:
        return {issue.row for issue in self.errors}


class PreviewSummary(TypedDict):
    total_rows: int
    valid_rows: int
    invalid_rows: int
    duplicates_in_file: int


class PreviewResult(TypedDict, total=False):
    success: bool
    message: str
    summary: PreviewSummary
    errors: list[dict[str, Any]]
    preview: list[dict[str, Any]]
    valid_data: list[dict[str, Any]]


class ImportRowFailure(TypedDict):
    natural_key: str | None
    error: str


@dataclass
class ImportResult:
    created: int = 0
    updated: int = 0
    failed: int = 0
    errors: list[ImportRowFailure] = field(default_factory=list)

    def record_failure(self, natural_key: str | None, error: str) -> None:
        self.failed += 1
        self.errors.append({"natural_key": natural_key, "error": error})

    def as_dict(self) -> dict[str, Any]:
        return {
            "created": self.created,
            "updated": self.updated,
            "failed": self.failed,
            "errors": [dict(error) for error in self.errors],
        }


class ImportTemplate(TypedDict):
    headers: list[str]
    sample: dict[str, str]


@dataclass(frozen=True)
class ClassRef:
    """Active class/section of a tenant, as seen by the import pipeline."""

    id: Any
    name: str
    section: str

    @property
    def lookup_key(self) -> str:
        return class_lookup_key(self.name, self.section)


def class_lookup_key(name: Any, section: Any) -> str:
    return f"{name}-{section}".lower()


@dataclass(frozen=True)
class EntityRecord:
    """A fully prepared record handed to the entity store for creation."""

    tenant_id: Any
    role: str
    natural_key: str
    display_name: str
    credential: str
    attributes: dict[str, Any]
    must_change_password: bool = True
