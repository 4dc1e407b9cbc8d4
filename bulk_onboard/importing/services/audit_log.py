"""Audit logging helpers for import lifecycle events."""

from __future__ import annotations

import logging
from typing import Any

from ..constants import ImportStage

logger = logging.getLogger(__name__)


def log_import_event(
    event_name: str,
    *,
    tenant_id: Any = None,
    kind: str | None = None,
    stage: ImportStage | None = None,
    user_id: str | None = None,
    details: dict[str, Any] | None = None,
    kpis: dict[str, Any] | None = None,
) -> None:
    payload = {
        "event": event_name,
        "tenant_id": None if tenant_id is None else str(tenant_id),
        "kind": kind,
        "stage": stage.value if stage is not None else None,
        "user_id": user_id,
        "details": details or {},
        "kpis": kpis or {},
    }
    logger.info("import_event=%s", payload)
