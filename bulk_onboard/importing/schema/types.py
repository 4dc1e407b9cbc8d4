"""GraphQL type definitions for member imports."""

from __future__ import annotations

from typing import Any

import graphene


def _read_value(source: Any, key: str) -> Any:
    if isinstance(source, dict):
        return source.get(key)
    return getattr(source, key, None)


class ImportIssueType(graphene.ObjectType):
    row = graphene.Int(required=True)
    row_index = graphene.Int()
    field = graphene.String(required=True)
    message = graphene.String(required=True)
    value = graphene.JSONString()
    code = graphene.String(required=True)

    def resolve_code(self, info):
        value = _read_value(self, "code")
        return getattr(value, "value", value)


class ImportTemplateType(graphene.ObjectType):
    kind = graphene.String(required=True)
    headers = graphene.List(graphene.NonNull(graphene.String), required=True)
    sample = graphene.JSONString(required=True)
    csv = graphene.String(required=True)


class PreviewSummaryType(graphene.ObjectType):
    total_rows = graphene.Int(required=True)
    valid_rows = graphene.Int(required=True)
    invalid_rows = graphene.Int(required=True)
    duplicates_in_file = graphene.Int(required=True)


class ImportRowFailureType(graphene.ObjectType):
    natural_key = graphene.String()
    error = graphene.String(required=True)


class ImportResultType(graphene.ObjectType):
    created = graphene.Int(required=True)
    updated = graphene.Int(required=True)
    failed = graphene.Int(required=True)
    errors = graphene.List(graphene.NonNull(ImportRowFailureType), required=True)


class PreviewImportPayloadType(graphene.ObjectType):
    ok = graphene.Boolean(required=True)
    message = graphene.String()
    summary = graphene.Field(PreviewSummaryType)
    issues = graphene.List(graphene.NonNull(ImportIssueType), required=True)
    preview = graphene.JSONString()
    valid_data = graphene.JSONString()
    error_report = graphene.String()


class CommitImportPayloadType(graphene.ObjectType):
    ok = graphene.Boolean(required=True)
    result = graphene.Field(ImportResultType)
    issues = graphene.List(graphene.NonNull(ImportIssueType), required=True)
