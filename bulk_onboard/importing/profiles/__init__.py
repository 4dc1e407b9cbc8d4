"""Registry of entity import profiles keyed by import kind."""

from __future__ import annotations

from ..services.errors import UnknownImportKindError
from ..settings import ImportSettings
from .base import EntityImportProfile
from .employees import EMPLOYEE_SCHEMA, EmployeeImportProfile
from .students import STUDENT_SCHEMA, StudentImportProfile

_PROFILES: dict[str, type[EntityImportProfile]] = {
    StudentImportProfile.kind: StudentImportProfile,
    EmployeeImportProfile.kind: EmployeeImportProfile,
}


def registered_kinds() -> list[str]:
    return list(_PROFILES)


def get_import_profile(kind: str, settings: ImportSettings | None = None) -> EntityImportProfile:
    profile_class = _PROFILES.get(str(kind).strip().lower())
    if profile_class is None:
        raise UnknownImportKindError(kind)
    return profile_class(settings=settings)


__all__ = [
    "EntityImportProfile",
    "StudentImportProfile",
    "EmployeeImportProfile",
    "STUDENT_SCHEMA",
    "EMPLOYEE_SCHEMA",
    "registered_kinds",
    "get_import_profile",
]
