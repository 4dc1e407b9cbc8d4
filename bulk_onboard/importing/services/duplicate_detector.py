"""In-file duplicate detection on a designated business key."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from typing import Any

from ..types import ValidRow


def _key_value(row: ValidRow | Mapping[str, Any], key_field: str) -> Any:
    data = row.data if isinstance(row, ValidRow) else row
    return data.get(key_field)


def find_duplicates(rows: Iterable[ValidRow | Mapping[str, Any]], key_field: str) -> list[Any]:
    """Return each non-blank ``key_field`` value seen more than once, once, in first-seen order."""
    counts: Counter = Counter()
    for row in rows:
        value = _key_value(row, key_field)
        if value in (None, ""):
            continue
        counts[value] += 1
    return [value for value, count in counts.items() if count > 1]
