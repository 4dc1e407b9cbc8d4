"""Preview (dry run): validate a batch and assemble the committable row set."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from ..constants import (
    DEFAULT_PREVIEW_SIZE,
    EMPTY_FILE_MESSAGE,
    FILE_LEVEL_ROW,
    DuplicatePolicy,
    ImportIssueCode,
    ImportStage,
)
from ..settings import ImportSettings
from ..types import (
    BusinessValidationResult,
    PreviewResult,
    PreviewSummary,
    SchemaValidationResult,
    ValidationIssue,
    ValidRow,
)
from .audit_log import log_import_event
from .business_rules import validate_business_rules
from .duplicate_detector import find_duplicates
from .schema_validator import validate_rows

if TYPE_CHECKING:
    from ..profiles.base import EntityImportProfile
    from ..store import EntityStore

logger = logging.getLogger(__name__)


def _empty_preview(message: str = EMPTY_FILE_MESSAGE) -> PreviewResult:
    return {
        "success": False,
        "message": message,
        "summary": {
            "total_rows": 0,
            "valid_rows": 0,
            "invalid_rows": 0,
            "duplicates_in_file": 0,
        },
        "errors": [],
        "preview": [],
        "valid_data": [],
    }


def _apply_duplicate_policy(
    rows: list[ValidRow],
    duplicate_values: Sequence[Any],
    *,
    key_field: str,
    policy: DuplicatePolicy,
) -> list[ValidRow]:
    if not duplicate_values or policy == DuplicatePolicy.PASS_THROUGH:
        return rows
    duplicated = set(duplicate_values)
    if policy == DuplicatePolicy.EXCLUDE:
        return [row for row in rows if row.data.get(key_field) not in duplicated]

    kept: list[ValidRow] = []
    seen: set[Any] = set()
    for row in rows:
        value = row.data.get(key_field)
        if value in duplicated:
            if value in seen:
                continue
            seen.add(value)
        kept.append(row)
    return kept


def assemble_preview(
    schema_result: SchemaValidationResult,
    duplicate_values: Sequence[Any],
    business_errors: Sequence[ValidationIssue],
    *,
    key_field: str,
    duplicate_message: Any = None,
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.EXCLUDE,
    sample_size: int = DEFAULT_PREVIEW_SIZE,
) -> PreviewResult:
    """Merge stage outputs into one decision artifact.

    Final valid set = schema-valid rows, minus rows with business conflicts
    (matched by their stable row number), minus in-file duplicates as the
    duplicate policy dictates. ``valid_rows + invalid_rows == total_rows``
    always holds.
    """
    if not schema_result.success:
        return _empty_preview(schema_result.message or EMPTY_FILE_MESSAGE)

    flagged = {issue.row for issue in business_errors}
    remaining = [row for row in schema_result.valid_rows if row.row_number not in flagged]
    final_rows = _apply_duplicate_policy(
        remaining,
        duplicate_values,
        key_field=key_field,
        policy=duplicate_policy,
    )

    format_duplicate = duplicate_message or (lambda value: f"Duplicate {key_field} in file: {value}")
    duplicate_errors = [
        ValidationIssue(
            row=FILE_LEVEL_ROW,
            field=key_field,
            message=format_duplicate(value),
            value=value,
            code=ImportIssueCode.DUPLICATE_IN_BATCH,
        )
        for value in duplicate_values
    ]
    errors = [*schema_result.errors, *business_errors, *duplicate_errors]

    total_rows = schema_result.total_rows
    valid_data = [dict(row.data) for row in final_rows]
    summary: PreviewSummary = {
        "total_rows": total_rows,
        "valid_rows": len(valid_data),
        "invalid_rows": total_rows - len(valid_data),
        "duplicates_in_file": len(duplicate_values),
    }
    return {
        "success": True,
        "summary": summary,
        "errors": [issue.as_dict() for issue in errors],
        "preview": valid_data[:sample_size],
        "valid_data": valid_data,
    }


def _row_limit_preview(total_rows: int, max_rows: int) -> PreviewResult:
    result = _empty_preview(f"File exceeds row limit of {max_rows}.")
    result["summary"]["total_rows"] = total_rows
    result["summary"]["invalid_rows"] = total_rows
    result["errors"] = [
        ValidationIssue(
            row=FILE_LEVEL_ROW,
            field="",
            message=f"File exceeds row limit of {max_rows}.",
            value=total_rows,
            code=ImportIssueCode.ROW_LIMIT_EXCEEDED,
        ).as_dict()
    ]
    return result


def preview_import(
    rows: Sequence[Mapping[str, Any]],
    tenant_id: Any,
    *,
    profile: EntityImportProfile,
    store: EntityStore,
    settings: ImportSettings | None = None,
) -> PreviewResult:
    """Run the read-only preview for one batch. Nothing is persisted."""
    settings = settings or profile.settings
    if not rows:
        log_import_event(
            "preview",
            tenant_id=tenant_id,
            kind=profile.kind,
            stage=ImportStage.EMPTY,
            details={"message": EMPTY_FILE_MESSAGE},
        )
        return _empty_preview()

    if len(rows) > settings.max_rows:
        logger.warning(
            "Rejected %s import for tenant %s: %d rows exceed limit %d",
            profile.kind,
            tenant_id,
            len(rows),
            settings.max_rows,
        )
        return _row_limit_preview(len(rows), settings.max_rows)

    schema_result = validate_rows(rows, profile.schema)
    duplicate_values = find_duplicates(schema_result.valid_rows, profile.unique_key_field)
    business_result: BusinessValidationResult = validate_business_rules(
        schema_result.valid_rows,
        tenant_id,
        profile=profile,
        store=store,
    )

    result = assemble_preview(
        schema_result,
        duplicate_values,
        business_result.errors,
        key_field=profile.unique_key_field,
        duplicate_message=profile.duplicate_message,
        duplicate_policy=settings.duplicate_policy,
        sample_size=settings.preview_size,
    )

    summary = result["summary"]
    log_import_event(
        "preview",
        tenant_id=tenant_id,
        kind=profile.kind,
        stage=ImportStage.PREVIEWED,
        details={"duplicate_policy": settings.duplicate_policy.value},
        kpis={
            "total_rows": summary["total_rows"],
            "valid_rows": summary["valid_rows"],
            "invalid_rows": summary["invalid_rows"],
            "duplicates_in_file": summary["duplicates_in_file"],
            "errors": len(result["errors"]),
        },
    )
    return result
