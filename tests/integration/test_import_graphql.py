import csv
import io
import json

import pytest
from django.contrib.auth.models import Permission
from django.test import override_settings

from bulk_onboard.models import MemberAccount
from bulk_onboard.testing import ImportGraphQLTestClient

pytestmark = [pytest.mark.integration, pytest.mark.django_db]

TEMPLATE_QUERY = """
query Template($kind: String!) {
  importTemplate(kind: $kind) {
    kind
    headers
    sample
    csv
  }
}
"""

PREVIEW_MUTATION = """
mutation Preview($input: PreviewImportInput!) {
  previewImport(input: $input) {
    ok
    message
    summary { totalRows validRows invalidRows duplicatesInFile }
    issues { row rowIndex field message value code }
    preview
    validData
    errorReport
  }
}
"""

COMMIT_MUTATION = """
mutation Commit($input: CommitImportInput!) {
  commitImport(input: $input) {
    ok
    result { created updated failed errors { naturalKey error } }
    issues { row field message code }
  }
}
"""


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


@pytest.fixture
def client(staff_user, school):
    return ImportGraphQLTestClient(user=staff_user, tenant_id=school.id)


def _preview(client, kind, rows):
    result = client.execute(
        PREVIEW_MUTATION,
        variables={"input": {"kind": kind, "rows": json.dumps(rows)}},
    )
    assert "errors" not in result
    return result["data"]["previewImport"]


def _commit(client, kind, valid_data, skip_errors=True):
    result = client.execute(
        COMMIT_MUTATION,
        variables={
            "input": {"kind": kind, "validData": valid_data, "skipErrors": skip_errors}
        },
    )
    assert "errors" not in result
    return result["data"]["commitImport"]


def test_template_query(client):
    result = client.execute(TEMPLATE_QUERY, variables={"kind": "employee"})

    template = result["data"]["importTemplate"]
    assert template["kind"] == "employee"
    assert template["headers"][0] == "employeeId"
    assert json.loads(template["sample"])["employeeId"] == "EMP001"
    assert next(csv.reader(io.StringIO(template["csv"]))) == template["headers"]


def test_preview_then_commit_round_trip(client, school, class_10a):
    preview = _preview(
        client,
        "student",
        [_student("S100"), _student("S101", section="Z"), _student("S102"), _student("S102")],
    )

    assert preview["ok"] is True
    assert preview["summary"] == {
        "totalRows": 4,
        "validRows": 1,
        "invalidRows": 3,
        "duplicatesInFile": 1,
    }
    assert [issue["code"] for issue in preview["issues"]] == ["BUSINESS_CONFLICT", "DUPLICATE_IN_BATCH"]
    assert preview["issues"][0]["rowIndex"] == 1
    assert preview["errorReport"].startswith("Row Number,Field,Error,Invalid Value")
    assert MemberAccount.objects.count() == 0

    commit = _commit(client, "student", preview["validData"])

    assert commit == {
        "ok": True,
        "result": {"created": 1, "updated": 0, "failed": 0, "errors": []},
        "issues": [],
    }
    account = MemberAccount.objects.get(tenant=school, admission_number="S100")
    assert account.school_class == class_10a
    assert account.must_change_password is True


def test_commit_without_skipping_errors_reports_partial_result(client, school, class_10a):
    valid_data = json.dumps([_student("S100"), _student("S100"), _student("S101")])

    commit = _commit(client, "student", valid_data, skip_errors=False)

    assert commit["ok"] is False
    assert commit["result"]["created"] == 1
    assert commit["result"]["failed"] == 1
    assert commit["issues"][0]["code"] == "PERSISTENCE_ERROR"
    assert commit["issues"][0]["message"] == "Admission number already exists: S100"
    assert not MemberAccount.objects.filter(admission_number="S101").exists()


def test_unknown_kind_and_malformed_rows(client):
    unknown = _preview(client, "parent", [_student("S100")])
    assert unknown["ok"] is False
    assert unknown["issues"][0]["code"] == "UNKNOWN_IMPORT_KIND"

    result = client.execute(
        PREVIEW_MUTATION,
        variables={"input": {"kind": "student", "rows": json.dumps({"not": "a list"})}},
    )
    malformed = result["data"]["previewImport"]
    assert malformed["ok"] is False
    assert malformed["issues"][0]["code"] == "STRUCTURAL_ERROR"


def test_empty_file_preview(client):
    preview = _preview(client, "student", [])

    assert preview["ok"] is False
    assert preview["message"] == "File is empty"
    assert preview["summary"]["totalRows"] == 0


def test_anonymous_users_are_denied(school):
    client = ImportGraphQLTestClient(tenant_id=school.id)

    result = client.execute(
        PREVIEW_MUTATION,
        variables={"input": {"kind": "student", "rows": json.dumps([_student("S100")])}},
    )

    assert result["errors"]
    assert result["data"]["previewImport"] is None


def test_model_permission_grants_access(django_user_model, school):
    user = django_user_model.objects.create_user(username="clerk", password="clerk-pass")
    user.user_permissions.add(Permission.objects.get(codename="add_memberaccount"))
    user = django_user_model.objects.get(pk=user.pk)
    client = ImportGraphQLTestClient(user=user, tenant_id=school.id)

    result = client.execute(TEMPLATE_QUERY, variables={"kind": "student"})

    assert "errors" not in result
    assert result["data"]["importTemplate"]["kind"] == "student"


def test_requests_without_tenant_are_rejected(staff_user):
    client = ImportGraphQLTestClient(user=staff_user)

    result = client.execute(
        PREVIEW_MUTATION,
        variables={"input": {"kind": "student", "rows": json.dumps([_student("S100")])}},
    )

    assert result["errors"]


def test_tenant_header_is_honoured(staff_user, school, class_10a):
    client = ImportGraphQLTestClient(user=staff_user, headers={"X-Tenant-ID": str(school.id)})

    preview = _preview(client, "student", [_student("S100")])

    assert preview["summary"]["validRows"] == 1


@override_settings(BULK_ONBOARD_IMPORT={"max_rows": 2})
def test_commit_enforces_row_limit(client, class_10a):
    valid_data = json.dumps([_student("S100"), _student("S101"), _student("S102")])

    commit = _commit(client, "student", valid_data)

    assert commit["ok"] is False
    assert commit["result"] is None
    assert commit["issues"][0]["code"] == "ROW_LIMIT_EXCEEDED"
    assert MemberAccount.objects.count() == 0
