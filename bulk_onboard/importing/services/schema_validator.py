"""Row-level structural validation against a declarative field schema."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import Any

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from ..constants import EMPTY_FILE_MESSAGE, ImportIssueCode
from ..schema_rules import CHOICE, DATE, EMAIL, INTEGER, FieldRule, FieldSchema
from ..types import ImportRow, SchemaValidationResult, ValidationIssue, ValidRow

_FALLBACK_DATE_FORMATS = ("%d/%m/%Y", "%d-%m-%Y", "%Y/%m/%d")


class _FieldError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def _clean(raw: Any) -> Any:
    if raw is None:
        return None
    if isinstance(raw, (date, datetime)):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    text = str(raw).strip()
    return text or None


def _apply_case(rule: FieldRule, value: str) -> str:
    if rule.normalize == "upper":
        return value.upper()
    if rule.normalize == "lower":
        return value.lower()
    return value


def _check_length(rule: FieldRule, value: str) -> None:
    label = rule.display_label
    if rule.min_length is not None and len(value) < rule.min_length:
        raise _FieldError(
            rule.message("min_length", f"{label} must be at least {rule.min_length} characters")
        )
    if rule.max_length is not None and len(value) > rule.max_length:
        raise _FieldError(
            rule.message("max_length", f"{label} cannot exceed {rule.max_length} characters")
        )


def _check_pattern(rule: FieldRule, value: str) -> None:
    pattern = rule.compiled_pattern
    if pattern is not None and not pattern.fullmatch(value):
        raise _FieldError(rule.message("pattern", f"{rule.display_label} has an invalid format"))


def _check_choice(rule: FieldRule, value: str) -> None:
    if rule.allowed_values and value not in rule.allowed_values:
        raise _FieldError(
            rule.message(
                "choice",
                f"{rule.display_label} must be one of: {', '.join(rule.allowed_values)}",
            )
        )


def _parse_date_value(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    try:
        parsed = parse_date(text)
        if parsed is None:
            parsed_dt = parse_datetime(text)
            parsed = parsed_dt.date() if parsed_dt is not None else None
    except ValueError:
        return None
    if parsed is not None:
        return parsed
    for fmt in _FALLBACK_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            pass
    return None


def _coerce_date(rule: FieldRule, value: Any, today: date) -> str:
    label = rule.display_label
    parsed = _parse_date_value(value)
    if parsed is None:
        raise _FieldError(rule.message("date", f"Invalid {label.lower()}"))
    if not rule.allow_future and parsed > today:
        raise _FieldError(rule.message("date_max", f"{label} cannot be in the future"))
    if rule.min_date is not None and parsed < rule.min_date:
        raise _FieldError(rule.message("date_min", f"{label} seems too old"))
    return parsed.isoformat()


def _coerce_integer(rule: FieldRule, value: Any) -> int:
    label = rule.display_label
    try:
        number = int(str(value))
    except ValueError:
        raise _FieldError(rule.message("integer", f"{label} must be a number")) from None
    if rule.min_value is not None and number < rule.min_value:
        raise _FieldError(rule.message("min_value", f"{label} must be at least {rule.min_value}"))
    return number


def _coerce_value(rule: FieldRule, value: Any, today: date) -> Any:
    if rule.kind == DATE:
        return _coerce_date(rule, value, today)
    if rule.kind == INTEGER:
        return _coerce_integer(rule, value)

    text = _apply_case(rule, str(value))
    if rule.kind == EMAIL:
        text = text.lower()
        try:
            validate_email(text)
        except DjangoValidationError:
            raise _FieldError(rule.message("email", "Invalid email format")) from None
        _check_length(rule, text)
        return text
    if rule.kind == CHOICE:
        _check_choice(rule, text)
        return text

    _check_length(rule, text)
    _check_pattern(rule, text)
    _check_choice(rule, text)
    return text


def validate_row(
    row: ImportRow,
    schema: FieldSchema,
    *,
    today: date,
    row_index: int | None = None,
) -> tuple[dict[str, Any], list[ValidationIssue]]:
    """Normalize one row; return ``(normalized_values, issues)``."""
    normalized: dict[str, Any] = {}
    issues: list[ValidationIssue] = []

    for key, raw_value in row.values.items():
        if key not in schema:
            issues.append(
                ValidationIssue(
                    row=row.row_number,
                    row_index=row_index,
                    field=str(key),
                    message=f'"{key}" is not allowed',
                    value=raw_value,
                )
            )

    for rule in schema.fields:
        raw_value = row.values.get(rule.name)
        value = _clean(raw_value)
        if value is None:
            if rule.required:
                issues.append(
                    ValidationIssue(
                        row=row.row_number,
                        row_index=row_index,
                        field=rule.name,
                        message=rule.message("required", f"{rule.display_label} is required"),
                        value=raw_value,
                    )
                )
            continue
        try:
            normalized[rule.name] = _coerce_value(rule, value, today)
        except _FieldError as exc:
            issues.append(
                ValidationIssue(
                    row=row.row_number,
                    row_index=row_index,
                    field=rule.name,
                    message=exc.message,
                    value=raw_value,
                    code=ImportIssueCode.STRUCTURAL_ERROR,
                )
            )

    return normalized, issues


def _today() -> date:
    if settings.USE_TZ:
        return timezone.localdate()
    return date.today()


def _as_import_rows(rows: Sequence[ImportRow | Mapping[str, Any]]) -> list[ImportRow]:
    if all(isinstance(row, ImportRow) for row in rows):
        return list(rows)  # type: ignore[arg-type]
    return ImportRow.from_mappings(
        row.values if isinstance(row, ImportRow) else row for row in rows
    )


def validate_rows(
    rows: Sequence[ImportRow | Mapping[str, Any]],
    schema: FieldSchema,
    *,
    today: date | None = None,
) -> SchemaValidationResult:
    """Validate every row against ``schema``. Pure: no store access, no side effects."""
    if not rows:
        return SchemaValidationResult(success=False, message=EMPTY_FILE_MESSAGE)

    reference_day = today or _today()
    result = SchemaValidationResult(success=True)
    for index, row in enumerate(_as_import_rows(rows)):
        normalized, issues = validate_row(row, schema, today=reference_day, row_index=index)
        if issues:
            result.invalid_rows.append(row)
            result.errors.extend(issues)
        else:
            result.valid_rows.append(ValidRow(row_number=row.row_number, data=normalized))
    return result
