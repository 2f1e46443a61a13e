"""Audit log helpers for privileged station actions."""
from __future__ import annotations

import json
import logging
from typing import Any, Sequence

from sqlalchemy.orm import Session

from crew_deck.models import AuditLogEntry, Capability
from crew_deck.services.lookup import load_station
from crew_deck.services.permissions import require_permission

__all__ = ["log_action", "get_audit_log", "decode_details"]

logger = logging.getLogger(__name__)


def log_action(
    db: Session,
    station_id: int,
    action: str,
    actor: str,
    target: str | None = None,
    details: dict[str, Any] | None = None,
) -> AuditLogEntry:
    """Append an audit entry inside the caller's transaction."""
    entry = AuditLogEntry(
        station_id=station_id,
        action=action,
        actor_principal=actor,
        target_principal=target,
        details=json.dumps(details, sort_keys=True, default=str) if details else None,
    )
    db.add(entry)
    logger.info(
        "audit station=%s action=%s actor=%s target=%s",
        station_id,
        action,
        actor,
        target,
    )
    return entry


def decode_details(entry: AuditLogEntry) -> dict[str, Any] | None:
    """Return the detail payload of ``entry`` as a dictionary."""
    if entry.details is None:
        return None
    decoded: dict[str, Any] = json.loads(entry.details)
    return decoded


def get_audit_log(
    db: Session,
    station_id: int,
    principal: str,
    limit: int = 50,
) -> Sequence[AuditLogEntry]:
    """Return the newest audit entries for a station.

    Only principals holding the ``settings`` capability may read the log.
    """
    load_station(db, station_id)
    require_permission(
        db,
        station_id,
        principal,
        Capability.SETTINGS,
        "You do not have permission to view the audit log",
    )
    return (
        db.query(AuditLogEntry)
        .filter(AuditLogEntry.station_id == station_id)
        .order_by(AuditLogEntry.timestamp.desc(), AuditLogEntry.id.desc())
        .limit(limit)
        .all()
    )
