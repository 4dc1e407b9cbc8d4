"""Commit phase: persist an approved row set, one independent unit of work per row."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from django.db import DatabaseError

from ..constants import ImportStage
from ..types import ImportResult
from .audit_log import log_import_event
from .errors import DuplicateKeyError, PersistenceError

if TYPE_CHECKING:
    from ..profiles.base import EntityImportProfile
    from ..store import EntityStore

logger = logging.getLogger(__name__)


def _duplicate_key_message(profile: EntityImportProfile, exc: DuplicateKeyError, row: Mapping[str, Any]) -> str:
    if exc.field in (profile.store_key_field, None, ""):
        return profile.existing_key_message(profile.natural_key(row))
    if exc.field == "email":
        return f"Email already exists: {row.get('email')}"
    return exc.message


def _persist_row(
    row: Mapping[str, Any],
    tenant_id: Any,
    *,
    profile: EntityImportProfile,
    store: EntityStore,
    references: Mapping[str, Any],
) -> Any:
    natural_key = profile.natural_key(row)
    try:
        record = profile.to_record(row, tenant_id, references)
        return store.create(record)
    except DuplicateKeyError as exc:
        error = DuplicateKeyError(
            _duplicate_key_message(profile, exc, row),
            field=exc.field,
            value=exc.value,
        )
        error.natural_key = natural_key
        raise error from exc
    except PersistenceError as exc:
        exc.natural_key = exc.natural_key or natural_key
        raise
    except (DatabaseError, ValueError, TypeError) as exc:
        raise PersistenceError(str(exc), natural_key=natural_key) from exc


def execute_import(
    valid_data: Sequence[Mapping[str, Any]],
    tenant_id: Any,
    *,
    profile: EntityImportProfile,
    store: EntityStore,
    skip_errors: bool = True,
) -> ImportResult:
    """Create one entity per row of ``valid_data``.

    Each row is committed on its own; there is no batch-wide transaction and
    rows created before a failure are never rolled back. With
    ``skip_errors=True`` failures are collected in ``result.errors`` and the
    loop continues. With ``skip_errors=False`` the first failure is raised as
    a ``PersistenceError`` whose ``result`` holds the partial outcome, and the
    remaining rows are not attempted.
    """
    result = ImportResult()
    references = profile.load_references(tenant_id, store)

    for row in valid_data:
        try:
            _persist_row(row, tenant_id, profile=profile, store=store, references=references)
        except PersistenceError as exc:
            result.record_failure(exc.natural_key, exc.message)
            logger.warning(
                "Failed to import %s %s for tenant %s: %s",
                profile.kind,
                exc.natural_key,
                tenant_id,
                exc.message,
            )
            if not skip_errors:
                exc.result = result
                _log_commit(profile, tenant_id, result, skip_errors=skip_errors, aborted=True)
                raise
            continue
        result.created += 1

    _log_commit(profile, tenant_id, result, skip_errors=skip_errors, aborted=False)
    return result


def _log_commit(
    profile: EntityImportProfile,
    tenant_id: Any,
    result: ImportResult,
    *,
    skip_errors: bool,
    aborted: bool,
) -> None:
    stage = ImportStage.COMMIT_PARTIAL if result.failed else ImportStage.COMMITTED
    log_import_event(
        "commit",
        tenant_id=tenant_id,
        kind=profile.kind,
        stage=stage,
        details={"skip_errors": skip_errors, "aborted": aborted},
        kpis={"created": result.created, "updated": result.updated, "failed": result.failed},
    )
