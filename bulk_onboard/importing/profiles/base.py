"""Entity import profile: everything the generic pipeline needs to know about one entity kind."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

from ..constants import ImportIssueCode
from ..schema_rules import FieldSchema
from ..services.errors import PersistenceError
from ..settings import ImportSettings, get_import_settings
from ..store import EntityStore
from ..types import EntityRecord, ImportTemplate, ValidationIssue, ValidRow


def parse_iso_date(value: Any) -> date | None:
    if value in (None, ""):
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def text_or_blank(row: Mapping[str, Any], key: str) -> str:
    value = row.get(key)
    return "" if value is None else str(value)


class EntityImportProfile(ABC):
    """Parameterizes the import pipeline for one entity kind.

    Subclasses declare the schema and the business key, check store-backed
    business rules in batch, and turn a validated row into an ``EntityRecord``.
    """

    kind: str
    schema: FieldSchema
    unique_key_field: str
    store_key_field: str
    key_label: str

    def __init__(self, settings: ImportSettings | None = None) -> None:
        self.settings = settings or get_import_settings()

    def natural_key(self, row: Mapping[str, Any]) -> str | None:
        value = row.get(self.unique_key_field)
        return None if value in (None, "") else str(value)

    def display_name(self, row: Mapping[str, Any]) -> str:
        parts = [text_or_blank(row, "firstName"), text_or_blank(row, "lastName")]
        return " ".join(part for part in parts if part)

    def default_credential(self, row: Mapping[str, Any]) -> str:
        # Paired with must_change_password on the account.
        return f"{self.natural_key(row)}{self.settings.credential_suffix}"

    def duplicate_message(self, value: Any) -> str:
        return f"Duplicate {self.key_label.lower()} in file: {value}"

    def existing_key_message(self, value: Any) -> str:
        return f"{self.key_label} already exists: {value}"

    def template(self) -> ImportTemplate:
        headers = self.schema.required_names + self.schema.optional_names
        sample = {name: self.schema.rule(name).sample for name in headers}
        return {"headers": headers, "sample": sample}

    def load_references(self, tenant_id: Any, store: EntityStore) -> dict[str, Any]:
        """Foreign references needed at creation time; refreshed once per commit call."""
        return {}

    @abstractmethod
    def check_business_rules(
        self,
        rows: Sequence[ValidRow],
        tenant_id: Any,
        store: EntityStore,
    ) -> list[ValidationIssue]:
        """Return business conflicts; ``row_index`` points into ``rows``."""

    @abstractmethod
    def to_record(
        self,
        row: Mapping[str, Any],
        tenant_id: Any,
        references: Mapping[str, Any],
    ) -> EntityRecord:
        """Build the record to persist; raise PersistenceError when a reference no longer resolves."""

    def _check_row(self, row: Mapping[str, Any]) -> str:
        """Reject approved rows that cannot be stored as-is; return the natural key."""
        natural_key = self.natural_key(row)
        if natural_key is None or not natural_key.strip():
            raise PersistenceError(
                f"{self.key_label} is required",
                natural_key=None,
                field_path=self.unique_key_field,
            )
        for key, value in row.items():
            if isinstance(value, (list, tuple, set, dict)):
                raise PersistenceError(
                    f"{key} must be a single value",
                    natural_key=natural_key,
                    field_path=str(key),
                )
        return natural_key

    def _build_record(
        self,
        row: Mapping[str, Any],
        tenant_id: Any,
        *,
        role: str,
        attributes: dict[str, Any],
    ) -> EntityRecord:
        return EntityRecord(
            tenant_id=tenant_id,
            role=role,
            natural_key=self.natural_key(row) or "",
            display_name=self.display_name(row),
            credential=self.default_credential(row),
            attributes=attributes,
            must_change_password=self.settings.require_password_change,
        )

    def _conflict(
        self,
        row: ValidRow,
        index: int,
        *,
        field: str,
        message: str,
        value: Any,
    ) -> ValidationIssue:
        return ValidationIssue(
            row=row.row_number,
            row_index=index,
            field=field,
            message=message,
            value=value,
            code=ImportIssueCode.BUSINESS_CONFLICT,
        )

    def _uniqueness_conflicts(
        self,
        rows: Sequence[ValidRow],
        tenant_id: Any,
        store: EntityStore,
    ) -> dict[int, list[ValidationIssue]]:
        """Business-key and email conflicts with the store: two round trips for the whole batch."""
        keys = [row.data.get(self.unique_key_field) for row in rows]
        emails = [row.data.get("email") for row in rows]
        existing_keys = store.find_existing(tenant_id, self.store_key_field, [k for k in keys if k])
        existing_emails = store.find_existing(tenant_id, "email", [e for e in emails if e])

        conflicts: dict[int, list[ValidationIssue]] = {}
        for index, row in enumerate(rows):
            key = row.data.get(self.unique_key_field)
            if key in existing_keys:
                conflicts.setdefault(index, []).append(
                    self._conflict(
                        row,
                        index,
                        field=self.unique_key_field,
                        message=self.existing_key_message(key),
                        value=key,
                    )
                )
            email = row.data.get("email")
            if email and email in existing_emails:
                conflicts.setdefault(index, []).append(
                    self._conflict(
                        row,
                        index,
                        field="email",
                        message=f"Email already exists: {email}",
                        value=email,
                    )
                )
        return conflicts
