"""Permission helpers for import operations."""

from __future__ import annotations

from typing import Any

from django.core.exceptions import PermissionDenied
from django.db import models

IMPORT_PERMISSION = "bulk_onboard.add_memberaccount"
TENANT_HEADER = "X-Tenant-ID"


def _to_user_id(user: Any) -> str:
    if user is None:
        return ""
    raw_id = getattr(user, "id", None)
    if raw_id is None:
        return ""
    return str(raw_id)


def _has_permission(user: Any) -> bool:
    if user is None or not getattr(user, "is_authenticated", False):
        return False
    if getattr(user, "is_superuser", False) or getattr(user, "is_staff", False):
        return True
    return bool(user.has_perm(IMPORT_PERMISSION))


def require_import_access(user: Any) -> str:
    """Validate import access and return normalized user id."""
    if not _has_permission(user):
        raise PermissionDenied("User is not allowed to import members.")
    return _to_user_id(user)


def _get_header_value(request: Any, header_name: str) -> str | None:
    headers = getattr(request, "headers", None)
    if headers:
        value = headers.get(header_name)
        if value:
            return str(value).strip() or None
    meta = getattr(request, "META", None)
    if isinstance(meta, dict):
        value = meta.get(f"HTTP_{header_name.upper().replace('-', '_')}")
        if value:
            return str(value).strip() or None
    return None


def resolve_tenant_id(request: Any) -> Any:
    """Tenant of the current request.

    Looks at ``request.tenant_id``, then ``request.tenant`` (a School or a raw
    id), then the ``X-Tenant-ID`` header.
    """
    if request is None:
        raise PermissionDenied("No tenant bound to this request.")
    tenant_id = getattr(request, "tenant_id", None)
    if tenant_id in (None, ""):
        tenant = getattr(request, "tenant", None)
        tenant_id = tenant.pk if isinstance(tenant, models.Model) else tenant
    if tenant_id in (None, ""):
        tenant_id = _get_header_value(request, TENANT_HEADER)
    if tenant_id in (None, ""):
        raise PermissionDenied("No tenant bound to this request.")
    return tenant_id
