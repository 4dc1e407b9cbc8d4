"""Declarative, closed field schemas used to validate spreadsheet rows."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from functools import cached_property
from typing import Mapping

STRING = "string"
EMAIL = "email"
DATE = "date"
INTEGER = "integer"
CHOICE = "choice"

FIELD_KINDS = frozenset({STRING, EMAIL, DATE, INTEGER, CHOICE})

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def humanize_field_name(name: str) -> str:
    words = _CAMEL_BOUNDARY.sub(" ", name).split()
    if not words:
        return name
    text = " ".join(word.lower() for word in words)
    return text[0].upper() + text[1:]


@dataclass(frozen=True)
class FieldRule:
    name: str
    kind: str = STRING
    required: bool = False
    label: str | None = None
    normalize: str | None = None
    pattern: str | None = None
    min_length: int | None = None
    max_length: int | None = None
    allowed_values: tuple[str, ...] = ()
    min_value: int | None = None
    min_date: date | None = None
    allow_future: bool = False
    sample: str = ""
    messages: Mapping[str, str] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        if self.kind not in FIELD_KINDS:
            raise ValueError(f"Unsupported field kind '{self.kind}' for '{self.name}'.")
        if self.normalize not in (None, "upper", "lower"):
            raise ValueError(f"Unsupported normalization '{self.normalize}' for '{self.name}'.")

    @property
    def display_label(self) -> str:
        return self.label or humanize_field_name(self.name)

    @cached_property
    def compiled_pattern(self) -> re.Pattern[str] | None:
        return re.compile(self.pattern) if self.pattern else None

    def message(self, key: str, default: str) -> str:
        return self.messages.get(key, default)


@dataclass(frozen=True)
class FieldSchema:
    """Ordered set of field rules for one entity kind. Undeclared keys are rejected."""

    kind: str
    fields: tuple[FieldRule, ...]

    def __post_init__(self) -> None:
        names = [rule.name for rule in self.fields]
        duplicated = sorted({name for name in names if names.count(name) > 1})
        if duplicated:
            raise ValueError(f"Duplicate field rules in '{self.kind}' schema: {', '.join(duplicated)}")

    @cached_property
    def _by_name(self) -> dict[str, FieldRule]:
        return {rule.name: rule for rule in self.fields}

    @property
    def names(self) -> list[str]:
        return [rule.name for rule in self.fields]

    @property
    def required_names(self) -> list[str]:
        return [rule.name for rule in self.fields if rule.required]

    @property
    def optional_names(self) -> list[str]:
        return [rule.name for rule in self.fields if not rule.required]

    def rule(self, name: str) -> FieldRule | None:
        return self._by_name.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name
