# src/crew_deck/schemas/invite.py
"""Invite-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class InviteCreate(BaseModel):
    """Schema for creating an invite code."""

    invited_principal: str | None = None
    role_on_join: str = "crew"
    max_uses: int | None = Field(None, ge=1)
    expires_in_hours: float | None = Field(None, gt=0)


class InviteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    station_id: int
    code: str
    invited_by: str
    invited_principal: str | None
    role_on_join: str
    max_uses: int | None
    used_count: int
    expires_at: datetime | None
    is_active: bool
    created_at: datetime


class InviteRedeem(BaseModel):
    code: str = Field(..., min_length=1, max_length=8)


class InviteRedeemResponse(BaseModel):
    """Result of redeeming an invite."""

    station_id: int
    role: str
