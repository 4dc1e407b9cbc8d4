"""Import mutation root definitions."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import graphene

from ..constants import FILE_LEVEL_ROW, ImportIssueCode
from ..profiles import get_import_profile
from ..services import (
    execute_import,
    generate_error_report,
    log_import_event,
    preview_import,
    require_import_access,
    resolve_tenant_id,
)
from ..services.errors import ImportServiceError, PersistenceError
from ..store import DjangoEntityStore
from .types import CommitImportPayloadType, PreviewImportPayloadType


def _input_get(value: Any, key: str, default: Any = None) -> Any:
    if isinstance(value, dict):
        return value.get(key, default)
    return getattr(value, key, default)


def _coerce_rows(value: Any) -> list[dict[str, Any]] | None:
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            return None
    if not isinstance(value, list):
        return None
    if not all(isinstance(row, Mapping) for row in value):
        return None
    return [dict(row) for row in value]


def _issue_payload(
    *,
    code: ImportIssueCode | str,
    message: str,
    row: int | None = None,
    field: str | None = None,
) -> dict[str, Any]:
    return {
        "row": FILE_LEVEL_ROW if row is None else row,
        "row_index": None,
        "field": field or "",
        "message": message,
        "value": None,
        "code": getattr(code, "value", code),
    }


def _error_issue(exc: ImportServiceError) -> dict[str, Any]:
    return _issue_payload(
        code=exc.code,
        message=exc.message,
        row=exc.row_number,
        field=exc.field_path,
    )


def _malformed_rows_issue(field: str) -> dict[str, Any]:
    return _issue_payload(
        code=ImportIssueCode.STRUCTURAL_ERROR,
        message=f"{field} must be a JSON array of objects.",
        field=field,
    )


class PreviewImportInput(graphene.InputObjectType):
    kind = graphene.String(required=True)
    rows = graphene.JSONString(required=True)


class CommitImportInput(graphene.InputObjectType):
    kind = graphene.String(required=True)
    valid_data = graphene.JSONString(required=True)
    skip_errors = graphene.Boolean(default_value=True)


class PreviewImportMutation(graphene.Mutation):
    class Arguments:
        input = PreviewImportInput(required=True)

    Output = PreviewImportPayloadType

    def mutate(self, info, input):
        user = getattr(info.context, "user", None)
        require_import_access(user)
        tenant_id = resolve_tenant_id(info.context)

        try:
            profile = get_import_profile(_input_get(input, "kind"))
        except ImportServiceError as exc:
            return {"ok": False, "message": exc.message, "issues": [_error_issue(exc)]}

        rows = _coerce_rows(_input_get(input, "rows"))
        if rows is None:
            issue = _malformed_rows_issue("rows")
            return {"ok": False, "message": issue["message"], "issues": [issue]}

        result = preview_import(rows, tenant_id, profile=profile, store=DjangoEntityStore())
        errors = result["errors"]
        return {
            "ok": result["success"],
            "message": result.get("message"),
            "summary": result["summary"],
            "issues": errors,
            "preview": result["preview"],
            "valid_data": result["valid_data"],
            "error_report": generate_error_report(errors) if errors else None,
        }


class CommitImportMutation(graphene.Mutation):
    class Arguments:
        input = CommitImportInput(required=True)

    Output = CommitImportPayloadType

    def mutate(self, info, input):
        user = getattr(info.context, "user", None)
        user_id = require_import_access(user)
        tenant_id = resolve_tenant_id(info.context)

        try:
            profile = get_import_profile(_input_get(input, "kind"))
        except ImportServiceError as exc:
            return {"ok": False, "result": None, "issues": [_error_issue(exc)]}

        valid_data = _coerce_rows(_input_get(input, "valid_data"))
        if valid_data is None:
            return {"ok": False, "result": None, "issues": [_malformed_rows_issue("validData")]}

        max_rows = profile.settings.max_rows
        if len(valid_data) > max_rows:
            issue = _issue_payload(
                code=ImportIssueCode.ROW_LIMIT_EXCEEDED,
                message=f"File exceeds row limit of {max_rows}.",
                field="validData",
            )
            return {"ok": False, "result": None, "issues": [issue]}

        skip_errors = bool(_input_get(input, "skip_errors", True))
        log_import_event(
            "commit_requested",
            tenant_id=tenant_id,
            kind=profile.kind,
            user_id=user_id,
            details={"skip_errors": skip_errors},
            kpis={"rows": len(valid_data)},
        )
        try:
            result = execute_import(
                valid_data,
                tenant_id,
                profile=profile,
                store=DjangoEntityStore(),
                skip_errors=skip_errors,
            )
        except PersistenceError as exc:
            partial = exc.result.as_dict() if exc.result is not None else None
            return {"ok": False, "result": partial, "issues": [_error_issue(exc)]}

        return {"ok": True, "result": result.as_dict(), "issues": []}


class ImportMutations(graphene.ObjectType):
    preview_import = PreviewImportMutation.Field()
    commit_import = CommitImportMutation.Field()
