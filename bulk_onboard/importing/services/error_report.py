"""Error report generation for preview issues."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Mapping
from typing import Any

from ..types import ValidationIssue

REPORT_HEADERS = ["Row Number", "Field", "Error", "Invalid Value"]


def _issue_fields(issue: ValidationIssue | Mapping[str, Any]) -> tuple[Any, Any, Any, Any]:
    if isinstance(issue, ValidationIssue):
        return issue.row, issue.field, issue.message, issue.value
    return issue.get("row"), issue.get("field"), issue.get("message"), issue.get("value")


def generate_error_report(errors: Iterable[ValidationIssue | Mapping[str, Any]]) -> str:
    """Render preview errors as CSV text, one line per issue.

    File-level issues (row 0) keep their row number so the report lines up
    with the preview payload.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(REPORT_HEADERS)
    for issue in errors:
        row, field, message, value = _issue_fields(issue)
        writer.writerow(
            [
                "" if row is None else row,
                field or "",
                message or "",
                "" if value is None else value,
            ]
        )
    return buffer.getvalue()
