"""Invite codes that gate admission to a station."""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Sequence

from sqlalchemy.orm import Session

from crew_deck.core.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from crew_deck.db.session import atomic
from crew_deck.db.time import hours_from, utcnow
from crew_deck.models import Capability, Invite, Membership
from crew_deck.models.role import ROLE_CREW
from crew_deck.services.audit import log_action
from crew_deck.services.lookup import load_invite, load_station
from crew_deck.services.moderation import ModerationService
from crew_deck.services.permissions import get_membership, require_permission
from crew_deck.services.roles import ensure_can_grant, get_role_by_slug
from crew_deck.services.stations import ensure_active

__all__ = [
    "INVITE_ALPHABET",
    "INVITE_CODE_LENGTH",
    "InviteRedemption",
    "generate_invite_code",
    "create_invite",
    "use_invite",
    "revoke_invite",
    "list_invites",
]

logger = logging.getLogger(__name__)

# Upper and lower case letters and digits minus the look-alikes I, O, i, l, o, 0 and 1.
INVITE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZabcdefghjkmnpqrstuvwxyz23456789"
INVITE_CODE_LENGTH = 8
_MAX_CODE_ATTEMPTS = 10


@dataclass
class InviteRedemption:
    """Outcome of a successful invite redemption."""

    station_id: int
    role: str
    membership: Membership


def generate_invite_code(length: int = INVITE_CODE_LENGTH) -> str:
    """Return a random invite code drawn from a CSPRNG."""
    return "".join(secrets.choice(INVITE_ALPHABET) for _ in range(length))


def _fresh_code(db: Session) -> str:
    for _ in range(_MAX_CODE_ATTEMPTS):
        code = generate_invite_code()
        if db.query(Invite.id).filter(Invite.code == code).first() is None:
            return code
    raise ConflictError("Could not allocate a unique invite code", code="invite_code_exhausted")


def create_invite(
    db: Session,
    station_id: int,
    creator: str,
    invited_principal: str | None = None,
    role_on_join: str = ROLE_CREW,
    max_uses: int | None = None,
    expires_in_hours: float | None = None,
) -> Invite:
    """Create an invite into a station."""
    station = load_station(db, station_id)
    require_permission(
        db, station_id, creator, Capability.PROMOTE, "You do not have permission to create invites"
    )
    ensure_active(station)
    if max_uses is not None and max_uses < 1:
        raise ValidationError("max_uses must be at least 1")
    if expires_in_hours is not None and expires_in_hours <= 0:
        raise ValidationError("expires_in_hours must be positive")

    role = get_role_by_slug(db, station_id, role_on_join)
    if role is None:
        raise NotFoundError(f"Role '{role_on_join}' not found", code="role_not_found")
    ensure_can_grant(db, station, creator, role)

    now = utcnow()
    with atomic(db):
        invite = Invite(
            station_id=station_id,
            code=_fresh_code(db),
            invited_by=creator,
            invited_principal=invited_principal,
            role_on_join=role.slug,
            max_uses=max_uses,
            used_count=0,
            expires_at=hours_from(now, expires_in_hours) if expires_in_hours is not None else None,
            is_active=True,
            created_at=now,
        )
        db.add(invite)
        db.flush()
        log_action(
            db,
            station_id,
            "invite_create",
            creator,
            invited_principal,
            details={"invite_id": invite.id, "role": role.slug, "max_uses": max_uses},
        )

    logger.info("Invite %s created for station %s by %s", invite.id, station_id, creator)
    return invite


def use_invite(db: Session, code: str, principal: str) -> InviteRedemption:
    """Redeem ``code`` for ``principal``.

    Checks run in a fixed order so each failure reports one specific reason.
    """
    invite = db.query(Invite).filter(Invite.code == code).first()
    if invite is None:
        raise NotFoundError("Invalid invite code", code="invite_not_found")
    if not invite.is_active:
        raise InvalidStateError("This invite is no longer active", code="invite_inactive")

    now = utcnow()
    if invite.is_expired(now):
        raise InvalidStateError("This invite has expired", code="invite_expired")
    if invite.is_exhausted():
        raise InvalidStateError(
            "This invite has reached its usage limit", code="invite_usage_limit"
        )
    if invite.invited_principal is not None and invite.invited_principal != principal:
        raise PermissionDeniedError(
            "This invite is for a specific user", code="invite_wrong_principal"
        )

    station_id = invite.station_id
    if get_membership(db, station_id, principal) is not None:
        raise ConflictError("You are already a member of this station", code="already_member")
    if ModerationService.is_banned(db, station_id, principal, now):
        raise InvalidStateError("You are banned from this station", code="banned")

    station = load_station(db, station_id)
    ensure_active(station)

    role = get_role_by_slug(db, station_id, invite.role_on_join)
    with atomic(db):
        membership = Membership(
            station_id=station_id,
            principal=principal,
            system_role=ROLE_CREW,
        )
        # A role deleted after the invite was issued falls back to crew.
        if role is not None and role.is_system:
            membership.system_role = role.slug
        elif role is not None:
            membership.custom_role_id = role.id
        db.add(membership)
        station.add_member()
        invite.used_count = (invite.used_count or 0) + 1
        db.flush()
        log_action(
            db,
            station_id,
            "member_join_invite",
            principal,
            principal,
            details={"invite_id": invite.id, "role": invite.role_on_join},
        )

    logger.info("Principal %s joined station %s via invite %s", principal, station_id, invite.id)
    role_slug = role.slug if role is not None else ROLE_CREW
    return InviteRedemption(station_id=station_id, role=role_slug, membership=membership)


def revoke_invite(db: Session, invite_id: int, actor: str) -> Invite:
    """Deactivate an invite so it can no longer be redeemed."""
    invite = load_invite(db, invite_id)
    require_permission(
        db,
        invite.station_id,
        actor,
        Capability.PROMOTE,
        "You do not have permission to revoke invites",
    )
    if not invite.is_active:
        raise InvalidStateError("This invite is no longer active", code="invite_inactive")

    with atomic(db):
        invite.is_active = False
        log_action(db, invite.station_id, "invite_revoke", actor, details={"invite_id": invite.id})
    return invite


def list_invites(db: Session, station_id: int, actor: str) -> Sequence[Invite]:
    """Return a station's active invites, newest first."""
    load_station(db, station_id)
    require_permission(
        db, station_id, actor, Capability.PROMOTE, "You do not have permission to view invites"
    )
    return (
        db.query(Invite)
        .filter(Invite.station_id == station_id, Invite.is_active.is_(True))
        .order_by(Invite.created_at.desc(), Invite.id.desc())
        .all()
    )
