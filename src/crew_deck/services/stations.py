"""Station lookups, settings and the membership lifecycle."""
from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy.orm import Session

from crew_deck.core.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from crew_deck.core.settings import settings
from crew_deck.db.session import atomic
from crew_deck.models import Capability, Membership, Station
from crew_deck.models.role import ROLE_CREW
from crew_deck.models.station import STATION_STATUS_ACTIVE, STATION_STATUS_ARCHIVED
from crew_deck.services.audit import log_action
from crew_deck.services.lookup import load_station
from crew_deck.services.moderation import ModerationService
from crew_deck.services.permissions import get_membership, require_permission

__all__ = [
    "STATION_SORT_ORDERS",
    "clamp_limit",
    "get_station",
    "get_station_by_slug",
    "list_stations",
    "ensure_active",
    "join_station",
    "leave_station",
    "require_membership",
    "list_crew",
    "list_memberships",
    "update_station",
    "archive_station",
]

logger = logging.getLogger(__name__)

STATION_SORT_ORDERS = ("members", "recent")


def clamp_limit(limit: int | None) -> int:
    """Bound a caller supplied page size by the configured maximum."""
    if limit is None or limit <= 0:
        return settings.default_page_limit
    return min(limit, settings.max_page_limit)


def get_station(db: Session, station_id: int) -> Station:
    return load_station(db, station_id)


def get_station_by_slug(db: Session, slug: str) -> Station:
    station = db.query(Station).filter(Station.slug == slug).first()
    if station is None:
        raise NotFoundError("Station not found", code="station_not_found")
    return station


def list_stations(
    db: Session, sort_by: str = "members", limit: int | None = None
) -> Sequence[Station]:
    """Return active stations, most populated or most recent first."""
    if sort_by not in STATION_SORT_ORDERS:
        raise ValidationError(f"sort_by must be one of {', '.join(STATION_SORT_ORDERS)}")
    query = db.query(Station).filter(Station.status == STATION_STATUS_ACTIVE)
    if sort_by == "members":
        query = query.order_by(Station.member_count.desc(), Station.id.desc())
    else:
        query = query.order_by(Station.created_at.desc(), Station.id.desc())
    return query.limit(clamp_limit(limit)).all()


def ensure_active(station: Station) -> None:
    if not station.is_active:
        raise InvalidStateError("Station is archived", code="station_archived")


def require_membership(db: Session, station_id: int, principal: str) -> Membership:
    """Return the caller's membership or raise PermissionDeniedError."""
    membership = get_membership(db, station_id, principal)
    if membership is None:
        raise PermissionDeniedError("You must be a member of this station", code="not_member")
    return membership


def join_station(db: Session, station_id: int, principal: str) -> Membership:
    """Add ``principal`` to a station as crew."""
    station = load_station(db, station_id)
    ensure_active(station)
    if get_membership(db, station_id, principal) is not None:
        raise ConflictError("You are already a member of this station", code="already_member")
    if ModerationService.is_banned(db, station_id, principal):
        raise InvalidStateError("You are banned from this station", code="banned")

    with atomic(db):
        membership = Membership(
            station_id=station_id,
            principal=principal,
            system_role=ROLE_CREW,
        )
        db.add(membership)
        station.add_member()
        db.flush()

    logger.debug("Principal %s joined station %s", principal, station_id)
    return membership


def leave_station(db: Session, station_id: int, principal: str) -> None:
    """Remove the caller's own membership."""
    station = load_station(db, station_id)
    if station.is_owner(principal):
        raise PermissionDeniedError(
            "The captain cannot leave their own station", code="owner_protected"
        )
    membership = get_membership(db, station_id, principal)
    if membership is None:
        raise NotFoundError("You are not a member of this station", code="not_member")

    with atomic(db):
        db.delete(membership)
        station.remove_member()

    logger.debug("Principal %s left station %s", principal, station_id)


def list_crew(db: Session, station_id: int, limit: int | None = None) -> Sequence[Membership]:
    """Return a station's members in join order."""
    load_station(db, station_id)
    return (
        db.query(Membership)
        .filter(Membership.station_id == station_id)
        .order_by(Membership.joined_at, Membership.id)
        .limit(clamp_limit(limit))
        .all()
    )


def list_memberships(db: Session, principal: str) -> list[tuple[Membership, Station]]:
    """Return every station ``principal`` belongs to with the membership row."""
    rows = (
        db.query(Membership, Station)
        .join(Station, Station.id == Membership.station_id)
        .filter(Membership.principal == principal)
        .order_by(Membership.joined_at.desc(), Membership.id.desc())
        .all()
    )
    return [(membership, station) for membership, station in rows]


def update_station(
    db: Session,
    station_id: int,
    actor: str,
    *,
    name: str | None = None,
    description: str | None = None,
) -> Station:
    """Change a station's display name or description."""
    station = load_station(db, station_id)
    require_permission(
        db, station_id, actor, Capability.SETTINGS, "You do not have permission to edit settings"
    )
    ensure_active(station)

    changes: dict[str, str] = {}
    if name is not None:
        if not name.strip():
            raise ValidationError("Station name is required")
        changes["name"] = name.strip()
    if description is not None:
        changes["description"] = description.strip()

    with atomic(db):
        for key, value in changes.items():
            setattr(station, key, value)
        log_action(db, station_id, "station_update", actor, details={"fields": sorted(changes)})
    return station


def archive_station(db: Session, station_id: int, actor: str) -> Station:
    """Archive a station. Only its captain may do this."""
    station = load_station(db, station_id)
    if not station.is_owner(actor):
        raise PermissionDeniedError("Only the captain can archive the station", code="owner_only")
    ensure_active(station)

    with atomic(db):
        station.status = STATION_STATUS_ARCHIVED
        log_action(db, station_id, "station_archive", actor)

    logger.info("Station %s archived by %s", station_id, actor)
    return station
