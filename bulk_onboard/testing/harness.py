"""
Testing helpers for bulk-onboard.

Builds request contexts and a GraphQL test client bound to a tenant, for
unit and integration tests of the import API.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Mapping, Optional

from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory
from graphene.test import Client


def _normalize_headers(headers: Optional[Mapping[str, str]]) -> dict[str, str]:
    if not headers:
        return {}
    normalized: dict[str, str] = {}
    for key, value in headers.items():
        if not key:
            continue
        name = key.replace("-", "_").upper()
        if name not in {"CONTENT_TYPE", "CONTENT_LENGTH"} and not name.startswith("HTTP_"):
            name = f"HTTP_{name}"
        normalized[name] = value
    return normalized


def build_request(
    path: str = "/graphql/",
    method: str = "POST",
    *,
    user: Any = None,
    tenant_id: Any = None,
    headers: Optional[Mapping[str, str]] = None,
    data: Optional[dict[str, Any]] = None,
    body: Optional[str] = None,
):
    rf = RequestFactory()
    method_upper = method.upper()
    request_headers = _normalize_headers(headers)

    if method_upper in {"GET", "HEAD", "OPTIONS", "TRACE"}:
        request = rf.get(path, data=data or {}, **request_headers)
    else:
        if body is None:
            body = json.dumps(data or {})
        request = rf.generic(
            method_upper,
            path,
            data=body,
            content_type="application/json",
            **request_headers,
        )

    request.user = user or AnonymousUser()
    if tenant_id is not None:
        request.tenant_id = tenant_id
    return request


class ImportGraphQLTestClient:
    def __init__(
        self,
        schema: Any = None,
        *,
        user: Any = None,
        tenant_id: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ):
        if schema is None:
            from bulk_onboard.schema import schema as default_schema

            schema = default_schema
        self.schema = schema
        self.user = user
        self.tenant_id = tenant_id
        self.headers = dict(headers or {})
        self._client = Client(schema)

    def execute(
        self,
        query: str,
        *,
        variables: Optional[dict[str, Any]] = None,
        user: Any = None,
        tenant_id: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        operation_name: Optional[str] = None,
        middleware: Optional[Iterable[Any]] = None,
    ):
        merged_headers = dict(self.headers)
        if headers:
            merged_headers.update(headers)

        request = build_request(
            user=user or self.user,
            tenant_id=tenant_id if tenant_id is not None else self.tenant_id,
            headers=merged_headers,
            data={"query": query, "variables": variables or {}},
        )
        execute_kwargs = {
            "variable_values": variables,
            "context_value": request,
            "operation_name": operation_name,
        }
        if middleware is not None:
            execute_kwargs["middleware"] = middleware
        return self._client.execute(query, **execute_kwargs)
