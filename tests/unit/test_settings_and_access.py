from types import SimpleNamespace

import pytest
from django.core.exceptions import PermissionDenied
from django.test import override_settings

from bulk_onboard.importing.constants import DuplicatePolicy
from bulk_onboard.importing.profiles import get_import_profile, registered_kinds
from bulk_onboard.importing.services import (
    UnknownImportKindError,
    require_import_access,
    resolve_tenant_id,
)
from bulk_onboard.importing.settings import get_import_settings
from bulk_onboard.testing import build_request

pytestmark = pytest.mark.unit


def test_defaults_come_from_framework_settings():
    settings = get_import_settings()

    assert settings.preview_size == 10
    assert settings.duplicate_policy == DuplicatePolicy.EXCLUDE
    assert settings.credential_suffix == "@123"
    assert settings.require_password_change is True
    assert settings.max_rows == 5000


@override_settings(
    BULK_ONBOARD_IMPORT={
        "preview_size": "0",
        "duplicate_policy": "KEEP_FIRST",
        "credential_suffix": "  ",
        "require_password_change": "no",
        "max_rows": "200",
    }
)
def test_settings_are_coerced():
    settings = get_import_settings()

    assert settings.preview_size == 10
    assert settings.duplicate_policy == DuplicatePolicy.KEEP_FIRST
    assert settings.credential_suffix == "@123"
    assert settings.require_password_change is False
    assert settings.max_rows == 200


def test_unknown_duplicate_policy_falls_back_to_exclude():
    assert get_import_settings({"duplicate_policy": "merge"}).duplicate_policy == DuplicatePolicy.EXCLUDE


def test_profile_registry():
    assert registered_kinds() == ["student", "employee"]
    assert get_import_profile(" Student ").kind == "student"
    with pytest.raises(UnknownImportKindError) as excinfo:
        get_import_profile("parent")
    assert excinfo.value.code.value == "UNKNOWN_IMPORT_KIND"


def _user(**attrs):
    defaults = {"id": 7, "is_authenticated": True, "is_staff": False, "is_superuser": False}
    defaults.update(attrs)
    perms = defaults.pop("perms", set())
    return SimpleNamespace(has_perm=lambda perm: perm in perms, **defaults)


def test_access_requires_authentication():
    with pytest.raises(PermissionDenied):
        require_import_access(_user(is_authenticated=False, is_staff=True))
    with pytest.raises(PermissionDenied):
        require_import_access(None)


def test_access_for_staff_or_model_permission():
    assert require_import_access(_user(is_staff=True)) == "7"
    assert require_import_access(_user(perms={"bulk_onboard.add_memberaccount"})) == "7"
    with pytest.raises(PermissionDenied):
        require_import_access(_user(perms={"bulk_onboard.view_memberaccount"}))


def test_tenant_resolution_order():
    request = build_request(tenant_id=3, headers={"X-Tenant-ID": "9"})
    assert resolve_tenant_id(request) == 3

    request = build_request(headers={"X-Tenant-ID": "9"})
    assert resolve_tenant_id(request) == "9"

    request = build_request()
    request.tenant = 4
    assert resolve_tenant_id(request) == 4

    with pytest.raises(PermissionDenied):
        resolve_tenant_id(build_request())
