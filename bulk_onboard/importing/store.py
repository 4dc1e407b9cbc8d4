"""Entity store seam: the persisted state the import pipeline reads and writes."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Protocol

from django.db import IntegrityError, transaction

from ..models import MemberAccount, SchoolClass
from .services.errors import DuplicateKeyError, PersistenceError
from .types import ClassRef, EntityRecord

logger = logging.getLogger(__name__)

UNIQUE_MEMBER_FIELDS = ("admission_number", "employee_id", "email")


class EntityStore(Protocol):
    def active_classes(self, tenant_id: Any) -> list[ClassRef]:
        """All active classes of a tenant, in one round trip."""

    def find_existing(self, tenant_id: Any, field: str, values: Iterable[str]) -> set[str]:
        """Subset of ``values`` already stored under ``field`` for the tenant, in one round trip."""

    def create(self, record: EntityRecord) -> Any:
        """Persist one record as its own unit of work; raise DuplicateKeyError on a unique conflict."""


def _conflicting_field(exc: IntegrityError) -> str | None:
    text = str(exc).lower()
    if "unique" not in text and "duplicate" not in text:
        return None
    for field_name in UNIQUE_MEMBER_FIELDS:
        if field_name in text:
            return field_name
    return ""


class DjangoEntityStore:
    """EntityStore backed by the ``MemberAccount``/``SchoolClass`` models."""

    def active_classes(self, tenant_id: Any) -> list[ClassRef]:
        rows = (
            SchoolClass.objects.for_tenant(tenant_id)
            .filter(is_active=True)
            .values_list("id", "name", "section")
        )
        return [ClassRef(id=pk, name=name, section=section) for pk, name, section in rows]

    def find_existing(self, tenant_id: Any, field: str, values: Iterable[str]) -> set[str]:
        if field not in UNIQUE_MEMBER_FIELDS:
            raise ValueError(f"'{field}' is not a unique member field.")
        lookup_values = sorted({value for value in values if value})
        if not lookup_values:
            return set()
        existing = (
            MemberAccount.objects.for_tenant(tenant_id)
            .filter(**{f"{field}__in": lookup_values})
            .values_list(field, flat=True)
        )
        return set(existing)

    def create(self, record: EntityRecord) -> MemberAccount:
        account = MemberAccount(
            tenant_id=record.tenant_id,
            role=record.role,
            name=record.display_name,
            must_change_password=record.must_change_password,
            **record.attributes,
        )
        account.set_password(record.credential)
        try:
            with transaction.atomic():
                account.save()
        except IntegrityError as exc:
            field_name = _conflicting_field(exc)
            if field_name is None:
                raise PersistenceError(str(exc), natural_key=record.natural_key) from exc
            logger.debug("Unique conflict on %s for %s: %s", field_name, record.natural_key, exc)
            raise DuplicateKeyError(
                str(exc),
                field=field_name or None,
                value=record.attributes.get(field_name) if field_name else None,
            ) from exc
        return account
