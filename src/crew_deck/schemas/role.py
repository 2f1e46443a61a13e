# src/crew_deck/schemas/role.py
"""Role-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from crew_deck.models.role import Capability


class RoleCreate(BaseModel):
    """Schema for creating a custom role."""

    name: str = Field(..., min_length=1, max_length=50)
    slug: str | None = Field(None, max_length=50)
    color: str | None = Field(None, max_length=20)
    capabilities: list[Capability] = Field(default_factory=list)
    priority: int = Field(..., ge=0)


class RoleUpdate(BaseModel):
    """Partial update of a custom role."""

    name: str | None = Field(None, min_length=1, max_length=50)
    color: str | None = Field(None, max_length=20)
    capabilities: list[Capability] | None = None
    priority: int | None = Field(None, ge=0)


class RoleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    station_id: int
    name: str
    slug: str
    color_hint: str | None
    capabilities: list[Capability]
    priority: int
    is_default: bool
    is_system: bool
    created_at: datetime


class RoleAssign(BaseModel):
    """Schema for giving a member a role."""

    principal: str = Field(..., min_length=1)
    role_slug: str = Field(..., min_length=1)


class RoleDeleteResponse(BaseModel):
    success: bool = True
    reassigned: int
