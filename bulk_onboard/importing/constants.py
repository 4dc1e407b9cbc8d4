"""Shared constants for the import pipeline."""

from __future__ import annotations

from enum import Enum

DEFAULT_PREVIEW_SIZE = 10
DEFAULT_MAX_ROWS = 5000
DEFAULT_CREDENTIAL_SUFFIX = "@123"
EMPTY_FILE_MESSAGE = "File is empty"
FILE_LEVEL_ROW = 0


class ImportIssueCode(str, Enum):
    STRUCTURAL_ERROR = "STRUCTURAL_ERROR"
    DUPLICATE_IN_BATCH = "DUPLICATE_IN_BATCH"
    BUSINESS_CONFLICT = "BUSINESS_CONFLICT"
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"
    ROW_LIMIT_EXCEEDED = "ROW_LIMIT_EXCEEDED"
    UNKNOWN_IMPORT_KIND = "UNKNOWN_IMPORT_KIND"


class DuplicatePolicy(str, Enum):
    """What happens to rows whose business key repeats inside one file."""

    EXCLUDE = "exclude"
    KEEP_FIRST = "keep_first"
    PASS_THROUGH = "pass_through"


class ImportStage(str, Enum):
    EMPTY = "EMPTY"
    PARSED = "PARSED"
    SCHEMA_VALIDATED = "SCHEMA_VALIDATED"
    BUSINESS_VALIDATED = "BUSINESS_VALIDATED"
    PREVIEWED = "PREVIEWED"
    COMMITTING = "COMMITTING"
    COMMITTED = "COMMITTED"
    COMMIT_PARTIAL = "COMMIT_PARTIAL"
