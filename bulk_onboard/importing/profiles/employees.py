"""Employee import: employee-ID keyed staff accounts."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

from ...models import EMPLOYEE_ROLES
from ..schema_rules import CHOICE, DATE, EMAIL, FieldRule, FieldSchema
from ..store import EntityStore
from ..types import EntityRecord, ValidationIssue, ValidRow
from .base import EntityImportProfile, parse_iso_date, text_or_blank
from .students import GENDERS, PHONE_PATTERN, PINCODE_PATTERN

ROLES = tuple(role.value for role in EMPLOYEE_ROLES)

EMPLOYEE_SCHEMA = FieldSchema(
    kind="employee",
    fields=(
        FieldRule(
            "employeeId",
            required=True,
            label="Employee ID",
            normalize="upper",
            pattern=r"[A-Z0-9]+",
            min_length=3,
            max_length=20,
            sample="EMP001",
            messages={"pattern": "Employee ID must be alphanumeric"},
        ),
        FieldRule("firstName", required=True, min_length=2, max_length=50, sample="Alice"),
        FieldRule("lastName", required=True, min_length=2, max_length=50, sample="Smith"),
        FieldRule("email", kind=EMAIL, required=True, sample="alice@school.com"),
        FieldRule(
            "phone",
            required=True,
            pattern=PHONE_PATTERN,
            sample="9876543210",
            messages={"pattern": "Phone number must be 10 digits"},
        ),
        FieldRule(
            "role",
            kind=CHOICE,
            required=True,
            normalize="lower",
            allowed_values=ROLES,
            sample="teacher",
            messages={"choice": "Role must be: teacher, admin, accountant, librarian, or staff"},
        ),
        FieldRule("dateOfJoining", kind=DATE, required=True, sample="2024-01-15"),
        FieldRule(
            "dateOfBirth",
            kind=DATE,
            required=True,
            min_date=date(1950, 1, 1),
            sample="1990-03-20",
        ),
        FieldRule(
            "gender",
            kind=CHOICE,
            required=True,
            normalize="lower",
            allowed_values=GENDERS,
            sample="female",
            messages={"choice": "Gender must be male, female, or other"},
        ),
        FieldRule("department", max_length=50, sample="Science"),
        FieldRule("qualification", max_length=100, sample="M.Sc"),
        FieldRule("address", max_length=200, sample="456 Park Ave"),
        FieldRule("city", max_length=50, sample="Delhi"),
        FieldRule("state", max_length=50, sample="Delhi"),
        FieldRule(
            "pincode",
            pattern=PINCODE_PATTERN,
            sample="110001",
            messages={"pattern": "Pincode must be 6 digits"},
        ),
        FieldRule("emergencyContact", max_length=100, sample="Bob Smith"),
        FieldRule(
            "emergencyPhone",
            pattern=PHONE_PATTERN,
            sample="9876543211",
            messages={"pattern": "Emergency phone must be 10 digits"},
        ),
    ),
)


class EmployeeImportProfile(EntityImportProfile):
    kind = "employee"
    schema = EMPLOYEE_SCHEMA
    unique_key_field = "employeeId"
    store_key_field = "employee_id"
    key_label = "Employee ID"

    def duplicate_message(self, value: Any) -> str:
        return f"Duplicate employee ID in file: {value}"

    def check_business_rules(
        self,
        rows: Sequence[ValidRow],
        tenant_id: Any,
        store: EntityStore,
    ) -> list[ValidationIssue]:
        conflicts = self._uniqueness_conflicts(rows, tenant_id, store)
        return [issue for index in range(len(rows)) for issue in conflicts.get(index, [])]

    def to_record(
        self,
        row: Mapping[str, Any],
        tenant_id: Any,
        references: Mapping[str, Any],
    ) -> EntityRecord:
        natural_key = self._check_row(row)
        attributes = {
            "employee_id": natural_key,
            "first_name": text_or_blank(row, "firstName"),
            "last_name": text_or_blank(row, "lastName"),
            "email": row.get("email") or None,
            "phone": text_or_blank(row, "phone"),
            "date_of_birth": parse_iso_date(row.get("dateOfBirth")),
            "date_of_joining": parse_iso_date(row.get("dateOfJoining")),
            "gender": text_or_blank(row, "gender"),
            "department": text_or_blank(row, "department"),
            "qualification": text_or_blank(row, "qualification"),
            "address": text_or_blank(row, "address"),
            "city": text_or_blank(row, "city"),
            "state": text_or_blank(row, "state"),
            "pincode": text_or_blank(row, "pincode"),
            "emergency_contact": text_or_blank(row, "emergencyContact"),
            "emergency_phone": text_or_blank(row, "emergencyPhone"),
        }
        return self._build_record(row, tenant_id, role=text_or_blank(row, "role"), attributes=attributes)
