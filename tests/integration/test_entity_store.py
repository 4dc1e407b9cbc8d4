import pytest

from bulk_onboard.importing.profiles import EmployeeImportProfile, StudentImportProfile
from bulk_onboard.importing.services import (
    PersistenceError,
    execute_import,
    preview_import,
    validate_business_rules,
)
from bulk_onboard.importing.services.errors import DuplicateKeyError
from bulk_onboard.importing.store import DjangoEntityStore
from bulk_onboard.importing.types import EntityRecord, ValidRow
from bulk_onboard.models import MemberAccount, SchoolClass

pytestmark = [pytest.mark.integration, pytest.mark.django_db]


def _student(admission_number, **overrides):
    row = {
        "admissionNumber": admission_number,
        "firstName": "John",
        "lastName": "Doe",
        "dateOfBirth": "2010-05-15",
        "gender": "male",
        "class": "10",
        "section": "A",
    }
    row.update(overrides)
    return row


def _employee(employee_id, **overrides):
    row = {
        "employeeId": employee_id,
        "firstName": "Alice",
        "lastName": "Smith",
        "email": f"{employee_id.lower()}@school.com",
        "phone": "9876543210",
        "role": "teacher",
        "dateOfJoining": "2024-01-15",
        "dateOfBirth": "1990-03-20",
        "gender": "female",
    }
    row.update(overrides)
    return row


def _record(tenant_id, key, **attributes):
    attributes.setdefault("admission_number", key)
    return EntityRecord(
        tenant_id=tenant_id,
        role="student",
        natural_key=key,
        display_name="John Doe",
        credential=f"{key}@123",
        attributes=attributes,
    )


def test_active_classes_are_tenant_scoped(school, other_school, class_10a):
    SchoolClass.objects.create(tenant=school, name="9", section="B", is_active=False)
    SchoolClass.objects.create(tenant=other_school, name="10", section="B")

    refs = DjangoEntityStore().active_classes(school.id)

    assert [(ref.id, ref.lookup_key) for ref in refs] == [(class_10a.id, "10-a")]


def test_find_existing_returns_stored_subset(school, other_school):
    store = DjangoEntityStore()
    store.create(_record(school.id, "S100", email="s100@example.com"))
    store.create(_record(other_school.id, "S101"))

    assert store.find_existing(school.id, "admission_number", ["S100", "S101", "S102"]) == {"S100"}
    assert store.find_existing(school.id, "email", ["s100@example.com"]) == {"s100@example.com"}


def test_find_existing_skips_the_query_for_no_values(school, django_assert_num_queries):
    with django_assert_num_queries(0):
        assert DjangoEntityStore().find_existing(school.id, "employee_id", ["", None]) == set()


def test_find_existing_rejects_non_unique_fields(school):
    with pytest.raises(ValueError):
        DjangoEntityStore().find_existing(school.id, "first_name", ["John"])


def test_create_hashes_the_default_credential(school, class_10a):
    account = DjangoEntityStore().create(
        _record(school.id, "S100", first_name="John", last_name="Doe", school_class_id=class_10a.id)
    )

    account.refresh_from_db()
    assert account.name == "John Doe"
    assert account.school_class == class_10a
    assert account.must_change_password is True
    assert account.password != "S100@123"
    assert account.check_password("S100@123")


def test_create_translates_unique_violations(school, other_school):
    store = DjangoEntityStore()
    store.create(_record(school.id, "S100", email="shared@example.com"))

    with pytest.raises(DuplicateKeyError) as key_conflict:
        store.create(_record(school.id, "S100"))
    with pytest.raises(DuplicateKeyError) as email_conflict:
        store.create(_record(school.id, "S200", email="shared@example.com"))
    store.create(_record(other_school.id, "S100", email="shared@example.com"))

    assert key_conflict.value.field == "admission_number"
    assert email_conflict.value.field == "email"
    assert MemberAccount.objects.filter(admission_number="S100").count() == 2


@pytest.mark.parametrize("row_count", [1, 50])
def test_business_validation_query_budget(school, class_10a, row_count, django_assert_max_num_queries):
    rows = [
        ValidRow(row_number=index + 1, data=_student(f"S{index:03d}", email=f"s{index}@example.com"))
        for index in range(row_count)
    ]

    with django_assert_max_num_queries(3):
        validate_business_rules(rows, school.id, profile=StudentImportProfile(), store=DjangoEntityStore())


def test_missing_class_section_is_flagged(school, class_10a):
    rows = [_student("S100"), _student("S101", section="Z")]

    result = preview_import(rows, school.id, profile=StudentImportProfile(), store=DjangoEntityStore())

    conflicts = [error for error in result["errors"] if error["field"] == "class/section"]
    assert [(error["row"], error["message"]) for error in conflicts] == [
        (2, 'Class "10" Section "Z" not found')
    ]
    assert [row["admissionNumber"] for row in result["valid_data"]] == ["S100"]


def test_existing_employee_id_is_rejected_at_preview(school):
    store = DjangoEntityStore()
    execute_import([_employee("EMP001")], school.id, profile=EmployeeImportProfile(), store=store)

    result = preview_import(
        [_employee("EMP001", email="new@school.com"), _employee("EMP002")],
        school.id,
        profile=EmployeeImportProfile(),
        store=store,
    )

    assert [error["message"] for error in result["errors"]] == ["Employee ID already exists: EMP001"]
    assert [row["employeeId"] for row in result["valid_data"]] == ["EMP002"]


def test_stop_on_first_failure_commits_earlier_rows_only(school, class_10a):
    store = DjangoEntityStore()
    profile = StudentImportProfile()
    rows = [_student(f"S10{index}") for index in range(5)]
    preview = preview_import(rows, school.id, profile=profile, store=store)
    store.create(_record(school.id, "S101"))

    with pytest.raises(PersistenceError) as excinfo:
        execute_import(preview["valid_data"], school.id, profile=profile, store=store, skip_errors=False)

    partial = excinfo.value.result
    assert (partial.created, partial.failed) == (1, 1)
    assert partial.errors == [{"natural_key": "S101", "error": "Admission number already exists: S101"}]
    assert sorted(
        MemberAccount.objects.for_tenant(school.id).values_list("admission_number", flat=True)
    ) == ["S100", "S101"]


def test_second_commit_of_same_data_creates_nothing(school, class_10a):
    store = DjangoEntityStore()
    profile = StudentImportProfile()
    rows = [_student("S100", email="s100@example.com"), _student("S101")]

    first = execute_import(rows, school.id, profile=profile, store=store)
    second = execute_import(rows, school.id, profile=profile, store=store)

    assert first.created == 2
    assert (second.created, second.failed) == (0, 2)
    assert MemberAccount.objects.for_tenant(school.id).count() == 2


def test_keyless_and_nested_rows_are_not_saved(school, class_10a):
    keyless = _student("S100")
    del keyless["admissionNumber"]
    rows = [keyless, _student("S101", rollNumber=[1]), _student("S102")]

    result = execute_import(rows, school.id, profile=StudentImportProfile(), store=DjangoEntityStore())

    assert (result.created, result.failed) == (1, 2)
    assert [error["error"] for error in result.errors] == [
        "Admission number is required",
        "rollNumber must be a single value",
    ]
    assert list(
        MemberAccount.objects.for_tenant(school.id).values_list("admission_number", flat=True)
    ) == ["S102"]
