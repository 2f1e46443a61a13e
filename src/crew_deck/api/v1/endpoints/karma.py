# src/crew_deck/api/v1/endpoints/karma.py
"""Cross-station karma endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from crew_deck.models import KarmaLedgerEntry
from crew_deck.schemas.karma import KarmaResponse, StationKarmaResponse
from crew_deck.services import karma
from crew_deck.services.karma import StationKarma

from ..dependencies import PrincipalDep, SessionDep

router = APIRouter(prefix="/karma", tags=["karma"])


@router.get("/leaderboard", response_model=list[KarmaResponse])
async def get_leaderboard(
    db: SessionDep,
    limit: int | None = Query(None, ge=1),
) -> list[KarmaLedgerEntry]:
    """Principals ranked by karma earned in other people's stations."""
    return list(karma.get_leaderboard(db, limit))


@router.get("/me", response_model=KarmaResponse)
async def get_my_karma(principal: PrincipalDep, db: SessionDep) -> KarmaLedgerEntry:
    return karma.get_karma(db, principal)


@router.post("/me/recalculate", response_model=KarmaResponse)
async def recalculate_my_karma(principal: PrincipalDep, db: SessionDep) -> KarmaLedgerEntry:
    """Rebuild the caller's ledger from per-station totals."""
    return karma.recalculate_karma(db, principal)


@router.get("/{principal}", response_model=KarmaResponse)
async def get_karma(principal: str, db: SessionDep) -> KarmaLedgerEntry:
    return karma.get_karma(db, principal)


@router.get("/{principal}/breakdown", response_model=list[StationKarmaResponse])
async def get_karma_breakdown(principal: str, db: SessionDep) -> list[StationKarma]:
    """Per-station karma for one principal."""
    return karma.get_karma_breakdown(db, principal)
