# src/crew_deck/api/v1/endpoints/roles.py
"""Role management endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from crew_deck.models import Membership, Role
from crew_deck.schemas.role import (
    RoleAssign,
    RoleCreate,
    RoleDeleteResponse,
    RoleResponse,
    RoleUpdate,
)
from crew_deck.schemas.station import MembershipResponse
from crew_deck.services import roles

from ..dependencies import PrincipalDep, SessionDep

router = APIRouter(tags=["roles"])


@router.get("/stations/{station_id}/roles", response_model=list[RoleResponse])
async def list_roles(station_id: int, db: SessionDep) -> list[Role]:
    """List a station's roles, highest priority first."""
    return list(roles.list_roles(db, station_id))


@router.post(
    "/stations/{station_id}/roles",
    response_model=RoleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_role(
    station_id: int,
    role_data: RoleCreate,
    principal: PrincipalDep,
    db: SessionDep,
) -> Role:
    """Create a custom role."""
    return roles.create_custom_role(
        db,
        station_id,
        principal,
        name=role_data.name,
        slug=role_data.slug,
        capabilities=role_data.capabilities,
        priority=role_data.priority,
        color=role_data.color,
    )


@router.patch("/roles/{role_id}", response_model=RoleResponse)
async def update_role(
    role_id: int,
    role_data: RoleUpdate,
    principal: PrincipalDep,
    db: SessionDep,
) -> Role:
    return roles.update_custom_role(
        db,
        role_id,
        principal,
        name=role_data.name,
        color=role_data.color,
        capabilities=role_data.capabilities,
        priority=role_data.priority,
    )


@router.delete("/roles/{role_id}", response_model=RoleDeleteResponse)
async def delete_role(role_id: int, principal: PrincipalDep, db: SessionDep) -> RoleDeleteResponse:
    """Delete a custom role; its holders fall back to crew."""
    reassigned = roles.delete_custom_role(db, role_id, principal)
    return RoleDeleteResponse(reassigned=reassigned)


@router.post("/stations/{station_id}/roles/assign", response_model=MembershipResponse)
async def assign_role(
    station_id: int,
    assignment: RoleAssign,
    principal: PrincipalDep,
    db: SessionDep,
) -> Membership:
    """Give a member a role."""
    return roles.assign_role(db, station_id, principal, assignment.principal, assignment.role_slug)


@router.post("/stations/{station_id}/members/{member}/demote", response_model=MembershipResponse)
async def demote_member(
    station_id: int,
    member: str,
    principal: PrincipalDep,
    db: SessionDep,
) -> Membership:
    """Reset a member to crew (captain only)."""
    return roles.demote_to_crew(db, station_id, principal, member)
