# src/crew_deck/schemas/station.py
"""Station and membership Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class StationCreate(BaseModel):
    """Schema for creating a new station."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=2000)


class StationUpdate(BaseModel):
    """Partial update of a station's settings."""

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=2000)


class StationResponse(BaseModel):
    """Schema for station information returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    name: str
    description: str
    owner_principal: str
    member_count: int
    post_count: int
    status: str
    created_at: datetime


class MembershipResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    station_id: int
    principal: str
    system_role: str
    custom_role_id: int | None
    karma_earned_here: int
    joined_at: datetime


class StationMembershipResponse(BaseModel):
    """A membership together with the station it belongs to."""

    station: StationResponse
    membership: MembershipResponse


StationSort = Literal["members", "recent"]
