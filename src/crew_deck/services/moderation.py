# src/crew_deck/services/moderation.py
"""Moderation services: bans, mutes and restriction checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.orm import Session

from crew_deck.core.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from crew_deck.db.session import atomic
from crew_deck.db.time import hours_from, utcnow
from crew_deck.models import Capability, ModerationAction
from crew_deck.models.moderation import MODERATION_KIND_BAN, MODERATION_KIND_MUTE
from crew_deck.services.audit import log_action
from crew_deck.services.lookup import load_station
from crew_deck.services.permissions import get_membership, require_permission

logger = logging.getLogger(__name__)


def is_restriction_active(action: ModerationAction, now: datetime) -> bool:
    """Return True while ``action`` still restricts its target at ``now``.

    Expiry is lazy: an action whose ``expires_at`` has passed stops counting
    without anything ever rewriting the row.
    """
    if not action.is_active:
        return False
    return action.expires_at is None or action.expires_at > now


@dataclass
class MemberStatus:
    """Current restrictions on a principal inside one station."""

    is_banned: bool = False
    is_muted: bool = False
    moderations: list[ModerationAction] = field(default_factory=list)


class ModerationService:
    """Service handling ban and mute issuance, lifting and lookups."""

    @staticmethod
    def active_actions(
        db: Session,
        station_id: int,
        target: str,
        kind: str,
        now: datetime | None = None,
    ) -> list[ModerationAction]:
        """Return actions of ``kind`` that currently restrict ``target``."""
        now = now or utcnow()
        rows = (
            db.query(ModerationAction)
            .filter(
                ModerationAction.station_id == station_id,
                ModerationAction.target_principal == target,
                ModerationAction.kind == kind,
                ModerationAction.is_active.is_(True),
            )
            .order_by(ModerationAction.issued_at.desc())
            .all()
        )
        return [action for action in rows if is_restriction_active(action, now)]

    @staticmethod
    def is_banned(
        db: Session, station_id: int, principal: str, now: datetime | None = None
    ) -> bool:
        return bool(
            ModerationService.active_actions(db, station_id, principal, MODERATION_KIND_BAN, now)
        )

    @staticmethod
    def is_muted(db: Session, station_id: int, principal: str, now: datetime | None = None) -> bool:
        return bool(
            ModerationService.active_actions(db, station_id, principal, MODERATION_KIND_MUTE, now)
        )

    @staticmethod
    def ensure_not_muted(db: Session, station_id: int, principal: str) -> None:
        """Raise PermissionDeniedError while ``principal`` is muted."""
        if ModerationService.is_muted(db, station_id, principal):
            raise PermissionDeniedError("You are muted in this station", code="muted")

    @staticmethod
    def ban_member(
        db: Session,
        station_id: int,
        moderator: str,
        target: str,
        reason: str | None = None,
        duration_hours: float | None = None,
    ) -> ModerationAction:
        """Ban ``target`` and remove their membership.

        A ban without ``duration_hours`` is permanent until lifted.
        """
        station = load_station(db, station_id)
        require_permission(
            db, station_id, moderator, Capability.BAN, "You do not have permission to ban members"
        )
        if station.is_owner(target):
            raise PermissionDeniedError("The captain cannot be banned", code="owner_protected")
        if duration_hours is not None and duration_hours <= 0:
            raise ValidationError("Ban duration must be positive")
        if ModerationService.is_banned(db, station_id, target):
            raise ConflictError("User is already banned", code="already_banned")

        now = utcnow()
        with atomic(db):
            membership = get_membership(db, station_id, target)
            if membership is not None:
                db.delete(membership)
                station.remove_member()

            action = ModerationAction(
                station_id=station_id,
                target_principal=target,
                kind=MODERATION_KIND_BAN,
                reason=reason,
                issued_by=moderator,
                issued_at=now,
                expires_at=hours_from(now, duration_hours) if duration_hours is not None else None,
                is_active=True,
            )
            db.add(action)
            db.flush()
            log_action(
                db,
                station_id,
                "member_ban",
                moderator,
                target,
                details={"reason": reason, "duration_hours": duration_hours},
            )

        logger.info("Principal %s banned from station %s by %s", target, station_id, moderator)
        return action

    @staticmethod
    def unban_member(db: Session, station_id: int, moderator: str, target: str) -> int:
        """Lift every active ban on ``target``. Membership is not restored."""
        load_station(db, station_id)
        require_permission(
            db, station_id, moderator, Capability.BAN, "You do not have permission to unban members"
        )
        bans = ModerationService.active_actions(db, station_id, target, MODERATION_KIND_BAN)
        if not bans:
            raise NotFoundError("User is not banned", code="not_banned")

        now = utcnow()
        with atomic(db):
            for ban in bans:
                ban.is_active = False
                ban.lifted_by = moderator
                ban.lifted_at = now
            log_action(db, station_id, "member_unban", moderator, target)

        logger.info("Principal %s unbanned from station %s by %s", target, station_id, moderator)
        return len(bans)

    @staticmethod
    def mute_member(
        db: Session,
        station_id: int,
        moderator: str,
        target: str,
        duration_hours: float,
        reason: str | None = None,
    ) -> ModerationAction:
        """Mute ``target`` for ``duration_hours``; membership is kept."""
        station = load_station(db, station_id)
        require_permission(
            db, station_id, moderator, Capability.BAN, "You do not have permission to mute members"
        )
        if station.is_owner(target):
            raise PermissionDeniedError("The captain cannot be muted", code="owner_protected")
        if duration_hours is None or duration_hours <= 0:
            raise ValidationError("Mute duration must be a positive number of hours")

        now = utcnow()
        with atomic(db):
            action = ModerationAction(
                station_id=station_id,
                target_principal=target,
                kind=MODERATION_KIND_MUTE,
                reason=reason,
                issued_by=moderator,
                issued_at=now,
                expires_at=hours_from(now, duration_hours),
                is_active=True,
            )
            db.add(action)
            db.flush()
            log_action(
                db,
                station_id,
                "member_mute",
                moderator,
                target,
                details={"reason": reason, "duration_hours": duration_hours},
            )
        return action

    @staticmethod
    def unmute_member(db: Session, station_id: int, moderator: str, target: str) -> int:
        """Lift every unexpired mute on ``target``."""
        load_station(db, station_id)
        require_permission(
            db,
            station_id,
            moderator,
            Capability.BAN,
            "You do not have permission to unmute members",
        )
        mutes = ModerationService.active_actions(db, station_id, target, MODERATION_KIND_MUTE)
        if not mutes:
            raise NotFoundError("User is not muted", code="not_muted")

        now = utcnow()
        with atomic(db):
            for mute in mutes:
                mute.is_active = False
                mute.lifted_by = moderator
                mute.lifted_at = now
            log_action(db, station_id, "member_unmute", moderator, target)
        return len(mutes)

    @staticmethod
    def check_member_status(
        db: Session,
        station_id: int,
        principal: str,
        now: datetime | None = None,
    ) -> MemberStatus:
        """Summarise the restrictions currently in force on ``principal``."""
        now = now or utcnow()
        rows = (
            db.query(ModerationAction)
            .filter(
                ModerationAction.station_id == station_id,
                ModerationAction.target_principal == principal,
                ModerationAction.is_active.is_(True),
            )
            .order_by(ModerationAction.issued_at.desc())
            .all()
        )
        current = [action for action in rows if is_restriction_active(action, now)]
        return MemberStatus(
            is_banned=any(action.kind == MODERATION_KIND_BAN for action in current),
            is_muted=any(action.kind == MODERATION_KIND_MUTE for action in current),
            moderations=current,
        )

    @staticmethod
    def list_active_moderations(
        db: Session,
        station_id: int,
        actor: str,
        now: datetime | None = None,
    ) -> list[ModerationAction]:
        """Return all unexpired bans and mutes in a station, newest first."""
        load_station(db, station_id)
        require_permission(
            db, station_id, actor, Capability.BAN, "You do not have permission to view moderation"
        )
        now = now or utcnow()
        rows = (
            db.query(ModerationAction)
            .filter(
                ModerationAction.station_id == station_id,
                ModerationAction.is_active.is_(True),
            )
            .order_by(ModerationAction.issued_at.desc(), ModerationAction.id.desc())
            .all()
        )
        return [action for action in rows if is_restriction_active(action, now)]


__all__ = ["MemberStatus", "ModerationService", "is_restriction_active"]
