"""Domain exceptions for import services."""

from __future__ import annotations

from typing import Any

from ..constants import ImportIssueCode


class ImportServiceError(Exception):
    """Typed error used by import services to provide issue code and context."""

    def __init__(
        self,
        code: ImportIssueCode,
        message: str,
        *,
        row_number: int | None = None,
        field_path: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.row_number = row_number
        self.field_path = field_path


class UnknownImportKindError(ImportServiceError):
    def __init__(self, kind: str) -> None:
        super().__init__(
            ImportIssueCode.UNKNOWN_IMPORT_KIND,
            f"Unknown import kind '{kind}'.",
        )
        self.kind = kind


class PersistenceError(ImportServiceError):
    """A row could not be written to the entity store at commit time.

    When raised out of ``execute_import`` (``skip_errors=False``) ``result``
    holds the partial outcome up to and including the failing row.
    """

    def __init__(
        self,
        message: str,
        *,
        natural_key: str | None = None,
        field_path: str | None = None,
        code: ImportIssueCode = ImportIssueCode.PERSISTENCE_ERROR,
    ) -> None:
        super().__init__(code, message, field_path=field_path)
        self.natural_key = natural_key
        self.result: Any = None


class DuplicateKeyError(PersistenceError):
    """The store's uniqueness constraint rejected a record."""

    def __init__(self, message: str, *, field: str | None = None, value: Any = None) -> None:
        super().__init__(message, natural_key=None, field_path=field)
        self.field = field
        self.value = value
