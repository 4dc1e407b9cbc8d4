"""Student import: admission-number keyed, enrolled into an existing class/section."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

from ...models import MemberRole
from ..schema_rules import CHOICE, DATE, EMAIL, INTEGER, FieldRule, FieldSchema
from ..services.errors import PersistenceError
from ..store import EntityStore
from ..types import EntityRecord, ValidationIssue, ValidRow, class_lookup_key
from .base import EntityImportProfile, parse_iso_date, text_or_blank

GENDERS = ("male", "female", "other")
BLOOD_GROUPS = ("A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-")
PHONE_PATTERN = r"[0-9]{10}"
PINCODE_PATTERN = r"[0-9]{6}"

STUDENT_SCHEMA = FieldSchema(
    kind="student",
    fields=(
        FieldRule(
            "admissionNumber",
            required=True,
            normalize="upper",
            pattern=r"[A-Z0-9]+",
            min_length=3,
            max_length=20,
            sample="ANE2024001",
            messages={"pattern": "Admission number must be alphanumeric"},
        ),
        FieldRule("firstName", required=True, min_length=2, max_length=50, sample="John"),
        FieldRule("lastName", required=True, min_length=2, max_length=50, sample="Doe"),
        FieldRule(
            "dateOfBirth",
            kind=DATE,
            required=True,
            min_date=date(1990, 1, 1),
            sample="2010-05-15",
        ),
        FieldRule(
            "gender",
            kind=CHOICE,
            required=True,
            normalize="lower",
            allowed_values=GENDERS,
            sample="male",
            messages={"choice": "Gender must be male, female, or other"},
        ),
        FieldRule("class", required=True, sample="10"),
        FieldRule("section", required=True, normalize="upper", sample="A"),
        FieldRule("email", kind=EMAIL, sample="john@example.com"),
        FieldRule(
            "phone",
            pattern=PHONE_PATTERN,
            sample="9876543210",
            messages={"pattern": "Phone number must be 10 digits"},
        ),
        FieldRule("rollNumber", kind=INTEGER, min_value=1, sample="1"),
        FieldRule(
            "bloodGroup",
            kind=CHOICE,
            normalize="upper",
            allowed_values=BLOOD_GROUPS,
            sample="O+",
            messages={"choice": "Invalid blood group"},
        ),
        FieldRule("address", max_length=200, sample="123 Main St"),
        FieldRule("city", max_length=50, sample="Mumbai"),
        FieldRule("state", max_length=50, sample="Maharashtra"),
        FieldRule(
            "pincode",
            pattern=PINCODE_PATTERN,
            sample="400001",
            messages={"pattern": "Pincode must be 6 digits"},
        ),
        FieldRule("guardianName", max_length=100, sample="Jane Doe"),
        FieldRule(
            "guardianPhone",
            pattern=PHONE_PATTERN,
            sample="9876543211",
            messages={"pattern": "Guardian phone must be 10 digits"},
        ),
        FieldRule(
            "guardianEmail",
            kind=EMAIL,
            sample="jane@example.com",
            messages={"email": "Invalid guardian email format"},
        ),
    ),
)


class StudentImportProfile(EntityImportProfile):
    kind = "student"
    schema = STUDENT_SCHEMA
    unique_key_field = "admissionNumber"
    store_key_field = "admission_number"
    key_label = "Admission number"

    def load_references(self, tenant_id: Any, store: EntityStore) -> dict[str, Any]:
        classes = store.active_classes(tenant_id)
        return {"classes": {ref.lookup_key: ref for ref in classes}}

    def check_business_rules(
        self,
        rows: Sequence[ValidRow],
        tenant_id: Any,
        store: EntityStore,
    ) -> list[ValidationIssue]:
        class_map = self.load_references(tenant_id, store)["classes"]
        conflicts = self._uniqueness_conflicts(rows, tenant_id, store)

        issues: list[ValidationIssue] = []
        for index, row in enumerate(rows):
            class_name = row.data.get("class")
            section = row.data.get("section")
            if class_lookup_key(class_name, section) not in class_map:
                issues.append(
                    self._conflict(
                        row,
                        index,
                        field="class/section",
                        message=f'Class "{class_name}" Section "{section}" not found',
                        value=f"{class_name}-{section}",
                    )
                )
            issues.extend(conflicts.get(index, []))
        return issues

    def to_record(
        self,
        row: Mapping[str, Any],
        tenant_id: Any,
        references: Mapping[str, Any],
    ) -> EntityRecord:
        natural_key = self._check_row(row)
        class_ref = references.get("classes", {}).get(
            class_lookup_key(row.get("class"), row.get("section"))
        )
        if class_ref is None:
            raise PersistenceError("Class not found", natural_key=natural_key, field_path="class/section")

        attributes = {
            "admission_number": natural_key,
            "first_name": text_or_blank(row, "firstName"),
            "last_name": text_or_blank(row, "lastName"),
            "email": row.get("email") or None,
            "phone": text_or_blank(row, "phone"),
            "date_of_birth": parse_iso_date(row.get("dateOfBirth")),
            "gender": text_or_blank(row, "gender"),
            "school_class_id": class_ref.id,
            "section": text_or_blank(row, "section"),
            "roll_number": row.get("rollNumber") or None,
            "blood_group": text_or_blank(row, "bloodGroup"),
            "address": text_or_blank(row, "address"),
            "city": text_or_blank(row, "city"),
            "state": text_or_blank(row, "state"),
            "pincode": text_or_blank(row, "pincode"),
            "guardian_name": text_or_blank(row, "guardianName"),
            "guardian_phone": text_or_blank(row, "guardianPhone"),
            "guardian_email": text_or_blank(row, "guardianEmail"),
        }
        return self._build_record(row, tenant_id, role=MemberRole.STUDENT.value, attributes=attributes)
