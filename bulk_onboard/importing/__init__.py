"""Spreadsheet import pipeline: preview (validate) then commit (persist)."""

from .constants import DEFAULT_PREVIEW_SIZE, DuplicatePolicy, ImportIssueCode, ImportStage
from .profiles import get_import_profile, registered_kinds
from .services import (
    execute_import,
    generate_error_report,
    generate_template,
    preview_import,
    render_template_csv,
)
from .store import DjangoEntityStore, EntityStore

__all__ = [
    "DEFAULT_PREVIEW_SIZE",
    "DuplicatePolicy",
    "ImportIssueCode",
    "ImportStage",
    "get_import_profile",
    "registered_kinds",
    "preview_import",
    "execute_import",
    "generate_template",
    "render_template_csv",
    "generate_error_report",
    "EntityStore",
    "DjangoEntityStore",
]
