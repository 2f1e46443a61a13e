"""Permission resolution for station members."""
from __future__ import annotations

from sqlalchemy.orm import Session

from crew_deck.core.errors import PermissionDeniedError
from crew_deck.models import Capability, Membership, Role
from crew_deck.models.role import SYSTEM_ROLE_CAPABILITIES

__all__ = [
    "get_membership",
    "effective_capabilities",
    "check_permission",
    "require_permission",
]


def get_membership(db: Session, station_id: int, principal: str) -> Membership | None:
    """Return the membership row for ``principal`` in a station, if any."""
    return (
        db.query(Membership)
        .filter(Membership.station_id == station_id, Membership.principal == principal)
        .first()
    )


def effective_capabilities(db: Session, membership: Membership) -> frozenset[Capability]:
    """Return the capabilities a membership actually grants.

    A custom role replaces the system role outright; there is no union with
    the system role it shadows.
    """
    if membership.custom_role_id is not None:
        custom_role = db.get(Role, membership.custom_role_id)
        if custom_role is not None:
            return custom_role.capability_set
    return SYSTEM_ROLE_CAPABILITIES.get(membership.system_role, frozenset())


def check_permission(
    db: Session,
    station_id: int,
    principal: str,
    capability: Capability,
) -> bool:
    """Return True if ``principal`` holds ``capability`` in the station."""
    membership = get_membership(db, station_id, principal)
    if membership is None:
        return False
    return Capability(capability) in effective_capabilities(db, membership)


def require_permission(
    db: Session,
    station_id: int,
    principal: str,
    capability: Capability,
    message: str | None = None,
) -> None:
    """Raise PermissionDeniedError unless ``principal`` holds ``capability``."""
    if not check_permission(db, station_id, principal, capability):
        raise PermissionDeniedError(
            message or f"Missing permission: {Capability(capability).value}",
            code="missing_capability",
        )
