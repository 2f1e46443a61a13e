# src/crew_deck/api/v1/endpoints/moderation.py
"""Ban and mute endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from crew_deck.models import ModerationAction
from crew_deck.schemas.moderation import (
    BanRequest,
    LiftResponse,
    MemberStatusResponse,
    ModerationActionResponse,
    MuteRequest,
)
from crew_deck.services.lookup import load_station
from crew_deck.services.moderation import MemberStatus, ModerationService

from ..dependencies import PrincipalDep, SessionDep

router = APIRouter(prefix="/stations/{station_id}/moderation", tags=["moderation"])


@router.get("", response_model=list[ModerationActionResponse])
async def list_active_moderations(
    station_id: int,
    principal: PrincipalDep,
    db: SessionDep,
) -> list[ModerationAction]:
    """List unexpired bans and mutes."""
    return ModerationService.list_active_moderations(db, station_id, principal)


@router.get("/status/{member}", response_model=MemberStatusResponse)
async def member_status(station_id: int, member: str, db: SessionDep) -> MemberStatus:
    """Report whether a principal is currently banned or muted."""
    load_station(db, station_id)
    return ModerationService.check_member_status(db, station_id, member)


@router.post(
    "/bans",
    response_model=ModerationActionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def ban_member(
    station_id: int,
    ban: BanRequest,
    principal: PrincipalDep,
    db: SessionDep,
) -> ModerationAction:
    return ModerationService.ban_member(
        db,
        station_id,
        principal,
        ban.principal,
        reason=ban.reason,
        duration_hours=ban.duration_hours,
    )


@router.delete("/bans/{member}", response_model=LiftResponse)
async def unban_member(
    station_id: int,
    member: str,
    principal: PrincipalDep,
    db: SessionDep,
) -> LiftResponse:
    lifted = ModerationService.unban_member(db, station_id, principal, member)
    return LiftResponse(lifted=lifted)


@router.post(
    "/mutes",
    response_model=ModerationActionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def mute_member(
    station_id: int,
    mute: MuteRequest,
    principal: PrincipalDep,
    db: SessionDep,
) -> ModerationAction:
    return ModerationService.mute_member(
        db,
        station_id,
        principal,
        mute.principal,
        duration_hours=mute.duration_hours,
        reason=mute.reason,
    )


@router.delete("/mutes/{member}", response_model=LiftResponse)
async def unmute_member(
    station_id: int,
    member: str,
    principal: PrincipalDep,
    db: SessionDep,
) -> LiftResponse:
    lifted = ModerationService.unmute_member(db, station_id, principal, member)
    return LiftResponse(lifted=lifted)
