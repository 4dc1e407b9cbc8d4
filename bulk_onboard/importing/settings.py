"""
Import pipeline settings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from django.conf import settings as django_settings

from .constants import (
    DEFAULT_CREDENTIAL_SUFFIX,
    DEFAULT_MAX_ROWS,
    DEFAULT_PREVIEW_SIZE,
    DuplicatePolicy,
)

SETTINGS_KEY = "BULK_ONBOARD_IMPORT"


@dataclass(frozen=True)
class ImportSettings:
    preview_size: int
    duplicate_policy: DuplicatePolicy
    credential_suffix: str
    require_password_change: bool
    max_rows: int


def _coerce_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _coerce_str(value: Any, default: str) -> str:
    if value is None:
        return default
    value = str(value).strip()
    return value or default


def _coerce_positive_int(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        coerced = int(value)
    except (TypeError, ValueError):
        return default
    return coerced if coerced > 0 else default


def _coerce_policy(value: Any) -> DuplicatePolicy:
    normalized = _coerce_str(value, DuplicatePolicy.EXCLUDE.value).lower()
    try:
        return DuplicatePolicy(normalized)
    except ValueError:
        return DuplicatePolicy.EXCLUDE


def get_import_settings(overrides: dict[str, Any] | None = None) -> ImportSettings:
    configured: dict[str, Any] = dict(getattr(django_settings, SETTINGS_KEY, None) or {})
    if overrides:
        configured.update(overrides)

    return ImportSettings(
        preview_size=_coerce_positive_int(configured.get("preview_size"), DEFAULT_PREVIEW_SIZE),
        duplicate_policy=_coerce_policy(configured.get("duplicate_policy")),
        credential_suffix=_coerce_str(configured.get("credential_suffix"), DEFAULT_CREDENTIAL_SUFFIX),
        require_password_change=_coerce_bool(configured.get("require_password_change"), True),
        max_rows=_coerce_positive_int(configured.get("max_rows"), DEFAULT_MAX_ROWS),
    )
