# src/crew_deck/api/v1/endpoints/invites.py
"""Invite endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from crew_deck.models import Invite
from crew_deck.schemas.invite import (
    InviteCreate,
    InviteRedeem,
    InviteRedeemResponse,
    InviteResponse,
)
from crew_deck.services import invites

from ..dependencies import PrincipalDep, SessionDep

router = APIRouter(tags=["invites"])


@router.post(
    "/stations/{station_id}/invites",
    response_model=InviteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_invite(
    station_id: int,
    invite_data: InviteCreate,
    principal: PrincipalDep,
    db: SessionDep,
) -> Invite:
    """Create an invite code."""
    return invites.create_invite(
        db,
        station_id,
        principal,
        invited_principal=invite_data.invited_principal,
        role_on_join=invite_data.role_on_join,
        max_uses=invite_data.max_uses,
        expires_in_hours=invite_data.expires_in_hours,
    )


@router.get("/stations/{station_id}/invites", response_model=list[InviteResponse])
async def list_invites(station_id: int, principal: PrincipalDep, db: SessionDep) -> list[Invite]:
    return list(invites.list_invites(db, station_id, principal))


@router.post("/invites/redeem", response_model=InviteRedeemResponse)
async def redeem_invite(
    redeem: InviteRedeem,
    principal: PrincipalDep,
    db: SessionDep,
) -> InviteRedeemResponse:
    """Join a station with an invite code."""
    redemption = invites.use_invite(db, redeem.code, principal)
    return InviteRedeemResponse(station_id=redemption.station_id, role=redemption.role)


@router.delete("/invites/{invite_id}", response_model=InviteResponse)
async def revoke_invite(invite_id: int, principal: PrincipalDep, db: SessionDep) -> Invite:
    """Deactivate an invite."""
    return invites.revoke_invite(db, invite_id, principal)
