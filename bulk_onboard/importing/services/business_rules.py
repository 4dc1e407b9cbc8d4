"""Store-backed business validation of schema-valid rows."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from ..types import BusinessValidationResult, ValidRow

if TYPE_CHECKING:
    from ..profiles.base import EntityImportProfile
    from ..store import EntityStore

logger = logging.getLogger(__name__)


def validate_business_rules(
    rows: Sequence[ValidRow],
    tenant_id: Any,
    *,
    profile: EntityImportProfile,
    store: EntityStore,
) -> BusinessValidationResult:
    """Check ``rows`` against persisted state. Lookups are batched per key, never per row."""
    if not rows:
        return BusinessValidationResult()
    errors = profile.check_business_rules(rows, tenant_id, store)
    logger.debug(
        "Business validation for %s import: %d rows, %d conflicts",
        profile.kind,
        len(rows),
        len(errors),
    )
    return BusinessValidationResult(errors=list(errors))
