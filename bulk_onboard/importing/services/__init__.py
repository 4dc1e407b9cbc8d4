"""Service layer for the import pipeline."""

from .access_control import require_import_access, resolve_tenant_id
from .audit_log import log_import_event
from .business_rules import validate_business_rules
from .duplicate_detector import find_duplicates
from .error_report import generate_error_report
from .errors import (
    DuplicateKeyError,
    ImportServiceError,
    PersistenceError,
    UnknownImportKindError,
)
from .executor import execute_import
from .preview import assemble_preview, preview_import
from .schema_validator import validate_row, validate_rows
from .template import generate_template, render_template_csv

__all__ = [
    "require_import_access",
    "resolve_tenant_id",
    "log_import_event",
    "validate_business_rules",
    "find_duplicates",
    "generate_error_report",
    "DuplicateKeyError",
    "ImportServiceError",
    "PersistenceError",
    "UnknownImportKindError",
    "execute_import",
    "assemble_preview",
    "preview_import",
    "validate_row",
    "validate_rows",
    "generate_template",
    "render_template_csv",
]
