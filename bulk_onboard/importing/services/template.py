"""Import template generation."""

from __future__ import annotations

import csv
import io
from typing import TYPE_CHECKING

from ..types import ImportTemplate

if TYPE_CHECKING:
    from ..profiles.base import EntityImportProfile


def generate_template(profile: EntityImportProfile) -> ImportTemplate:
    """Return headers (required first, then optional) and one sample row."""
    return profile.template()


def render_template_csv(profile: EntityImportProfile) -> str:
    template = generate_template(profile)
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(template["headers"])
    writer.writerow([template["sample"].get(header) or "" for header in template["headers"]])
    return buffer.getvalue()
