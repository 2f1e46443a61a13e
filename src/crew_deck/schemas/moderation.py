# src/crew_deck/schemas/moderation.py
"""Moderation and audit Pydantic schemas."""

import json
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BanRequest(BaseModel):
    """Schema for banning a member. Omit the duration for a permanent ban."""

    principal: str = Field(..., min_length=1)
    reason: str | None = Field(None, max_length=500)
    duration_hours: float | None = Field(None, gt=0)


class MuteRequest(BaseModel):
    """Schema for muting a member; mutes always expire."""

    principal: str = Field(..., min_length=1)
    reason: str | None = Field(None, max_length=500)
    duration_hours: float = Field(..., gt=0)


class ModerationActionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    station_id: int
    target_principal: str
    kind: str
    reason: str | None
    issued_by: str
    issued_at: datetime
    expires_at: datetime | None
    is_active: bool
    lifted_by: str | None
    lifted_at: datetime | None


class LiftResponse(BaseModel):
    success: bool = True
    lifted: int


class MemberStatusResponse(BaseModel):
    """Restrictions currently in force on a principal."""

    model_config = ConfigDict(from_attributes=True)

    is_banned: bool
    is_muted: bool
    moderations: list[ModerationActionResponse]


class AuditLogEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    station_id: int
    action: str
    actor_principal: str
    target_principal: str | None
    details: dict[str, Any] | None
    timestamp: datetime

    @field_validator("details", mode="before")
    @classmethod
    def _decode_details(cls, value: object) -> object:
        if isinstance(value, str):
            return json.loads(value)
        return value
