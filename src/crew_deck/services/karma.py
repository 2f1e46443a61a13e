"""Cross-station karma: rewards for contributing to other people's stations."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from crew_deck.db.session import atomic
from crew_deck.db.time import utcnow
from crew_deck.models import KarmaLedgerEntry, Membership, Station
from crew_deck.services.permissions import get_membership
from crew_deck.services.stations import clamp_limit

__all__ = [
    "KARMA_REWARDS",
    "DEFAULT_KARMA_REWARD",
    "StationKarma",
    "calculate_promotion_boost",
    "karma_for",
    "accrue_karma",
    "award_karma",
    "get_karma",
    "get_leaderboard",
    "get_karma_breakdown",
    "recalculate_karma",
]

logger = logging.getLogger(__name__)

KARMA_REWARDS: dict[str, int] = {
    "feedback": 5,
    "bug": 8,
    "feature": 5,
    "discussion": 2,
    "question": 2,
    "vote": 1,
    "update": 0,
}
DEFAULT_KARMA_REWARD = 2

MAX_PROMOTION_BOOST = 3.0
# Karma needed before the boost starts to climb above 1.
BOOST_KARMA_UNIT = 50


@dataclass
class StationKarma:
    """Karma one principal earned inside one station."""

    station_id: int
    station_slug: str
    station_name: str
    karma: int


def calculate_promotion_boost(karma: int) -> float:
    """Return the ranking multiplier for ``karma`` points, between 1 and 3."""
    if karma <= 0:
        return 1.0
    return min(MAX_PROMOTION_BOOST, 1 + math.log10(max(1.0, karma / BOOST_KARMA_UNIT)))


def karma_for(contribution_type: str) -> int:
    return KARMA_REWARDS.get(contribution_type, DEFAULT_KARMA_REWARD)


def _helped_stations_query(db: Session, principal: str):
    return (
        db.query(Membership)
        .join(Station, Station.id == Membership.station_id)
        .filter(
            Membership.principal == principal,
            Membership.karma_earned_here > 0,
            Station.owner_principal != principal,
        )
    )


def _ledger_for(db: Session, principal: str) -> KarmaLedgerEntry:
    ledger = db.get(KarmaLedgerEntry, principal)
    if ledger is None:
        ledger = KarmaLedgerEntry(
            principal=principal,
            external_karma=0,
            unique_stations_helped=0,
            promotion_boost=1.0,
        )
        db.add(ledger)
    return ledger


def accrue_karma(db: Session, station: Station, principal: str, contribution_type: str) -> int:
    """Credit karma inside the caller's transaction and return the amount.

    Captains never earn in their own station, zero rewards are skipped and
    only members can earn.
    """
    if station.is_owner(principal):
        return 0
    reward = karma_for(contribution_type)
    if reward <= 0:
        return 0
    membership = get_membership(db, station.id, principal)
    if membership is None:
        return 0

    membership.karma_earned_here = (membership.karma_earned_here or 0) + reward
    ledger = _ledger_for(db, principal)
    ledger.external_karma = (ledger.external_karma or 0) + reward
    db.flush()
    ledger.unique_stations_helped = _helped_stations_query(db, principal).count()
    ledger.promotion_boost = calculate_promotion_boost(ledger.external_karma)
    ledger.updated_at = utcnow()

    logger.debug(
        "Awarded %d karma to %s in station %s for %s",
        reward,
        principal,
        station.id,
        contribution_type,
    )
    return reward


def award_karma(db: Session, station: Station, principal: str, contribution_type: str) -> int:
    """Credit karma as a standalone unit of work."""
    with atomic(db):
        return accrue_karma(db, station, principal, contribution_type)


def get_karma(db: Session, principal: str) -> KarmaLedgerEntry:
    """Return the principal's ledger; principals who never earned get zeroes."""
    ledger = db.get(KarmaLedgerEntry, principal)
    if ledger is None:
        return KarmaLedgerEntry(
            principal=principal,
            external_karma=0,
            unique_stations_helped=0,
            promotion_boost=1.0,
        )
    return ledger


def get_leaderboard(db: Session, limit: int | None = None) -> Sequence[KarmaLedgerEntry]:
    return (
        db.query(KarmaLedgerEntry)
        .filter(KarmaLedgerEntry.external_karma > 0)
        .order_by(KarmaLedgerEntry.external_karma.desc(), KarmaLedgerEntry.principal)
        .limit(clamp_limit(limit))
        .all()
    )


def get_karma_breakdown(db: Session, principal: str) -> list[StationKarma]:
    """Return per-station karma for stations ``principal`` helped, largest first."""
    rows = (
        db.query(Membership.karma_earned_here, Station.id, Station.slug, Station.name)
        .join(Station, Station.id == Membership.station_id)
        .filter(
            Membership.principal == principal,
            Membership.karma_earned_here > 0,
            Station.owner_principal != principal,
        )
        .order_by(Membership.karma_earned_here.desc(), Station.id)
        .all()
    )
    return [
        StationKarma(station_id=station_id, station_slug=slug, station_name=name, karma=karma)
        for karma, station_id, slug, name in rows
    ]


def recalculate_karma(db: Session, principal: str) -> KarmaLedgerEntry:
    """Rebuild the ledger entry from the per-station membership totals."""
    with atomic(db):
        total = (
            db.query(func.coalesce(func.sum(Membership.karma_earned_here), 0))
            .join(Station, Station.id == Membership.station_id)
            .filter(
                Membership.principal == principal,
                Station.owner_principal != principal,
            )
            .scalar()
        )
        ledger = _ledger_for(db, principal)
        ledger.external_karma = int(total or 0)
        ledger.unique_stations_helped = _helped_stations_query(db, principal).count()
        ledger.promotion_boost = calculate_promotion_boost(ledger.external_karma)
        ledger.updated_at = utcnow()

    logger.info("Recalculated karma for %s: %d", principal, ledger.external_karma)
    return ledger
