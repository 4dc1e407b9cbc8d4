import pytest

from bulk_onboard.models import School, SchoolClass


@pytest.fixture
def school(db):
    return School.objects.create(name="Greenfield High", code="greenfield")


@pytest.fixture
def other_school(db):
    return School.objects.create(name="Riverside Public", code="riverside")


@pytest.fixture
def class_10a(school):
    return SchoolClass.objects.create(tenant=school, name="10", section="A")


@pytest.fixture
def staff_user(django_user_model):
    return django_user_model.objects.create_user(
        username="registrar",
        password="registrar-pass",
        is_staff=True,
    )
