# src/crew_deck/api/v1/endpoints/stations.py
"""Station and membership endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, Response, status

from crew_deck.core.errors import NotFoundError
from crew_deck.models import AuditLogEntry, Membership, Station
from crew_deck.schemas.moderation import AuditLogEntryResponse
from crew_deck.schemas.station import (
    MembershipResponse,
    StationCreate,
    StationMembershipResponse,
    StationResponse,
    StationSort,
    StationUpdate,
)
from crew_deck.services import audit, roles, stations
from crew_deck.services.permissions import get_membership

from ..dependencies import PrincipalDep, SessionDep

router = APIRouter(prefix="/stations", tags=["stations"])


@router.get("/", response_model=list[StationResponse])
async def list_stations(
    db: SessionDep,
    sort_by: StationSort = "members",
    limit: int | None = Query(None, ge=1),
) -> list[Station]:
    """List active stations."""
    return list(stations.list_stations(db, sort_by=sort_by, limit=limit))


@router.post("/", response_model=StationResponse, status_code=status.HTTP_201_CREATED)
async def create_station(
    station_data: StationCreate,
    principal: PrincipalDep,
    db: SessionDep,
) -> Station:
    """Create a station owned by the caller."""
    return roles.create_station(db, station_data.name, station_data.description, principal)


@router.get("/memberships/me", response_model=list[StationMembershipResponse])
async def list_my_memberships(
    principal: PrincipalDep,
    db: SessionDep,
) -> list[StationMembershipResponse]:
    """List every station the caller belongs to."""
    return [
        StationMembershipResponse(
            station=StationResponse.model_validate(station),
            membership=MembershipResponse.model_validate(membership),
        )
        for membership, station in stations.list_memberships(db, principal)
    ]


@router.get("/by-slug/{slug}", response_model=StationResponse)
async def get_station_by_slug(slug: str, db: SessionDep) -> Station:
    return stations.get_station_by_slug(db, slug)


@router.get("/{station_id}", response_model=StationResponse)
async def get_station(station_id: int, db: SessionDep) -> Station:
    """Get a specific station by ID."""
    return stations.get_station(db, station_id)


@router.patch("/{station_id}", response_model=StationResponse)
async def update_station(
    station_id: int,
    update_data: StationUpdate,
    principal: PrincipalDep,
    db: SessionDep,
) -> Station:
    return stations.update_station(
        db,
        station_id,
        principal,
        name=update_data.name,
        description=update_data.description,
    )


@router.post("/{station_id}/archive", response_model=StationResponse)
async def archive_station(station_id: int, principal: PrincipalDep, db: SessionDep) -> Station:
    """Archive a station (captain only)."""
    return stations.archive_station(db, station_id, principal)


@router.post(
    "/{station_id}/join",
    response_model=MembershipResponse,
    status_code=status.HTTP_201_CREATED,
)
async def join_station(station_id: int, principal: PrincipalDep, db: SessionDep) -> Membership:
    """Join a station as crew."""
    return stations.join_station(db, station_id, principal)


@router.delete(
    "/{station_id}/leave",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def leave_station(station_id: int, principal: PrincipalDep, db: SessionDep) -> Response:
    """Leave a station."""
    stations.leave_station(db, station_id, principal)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{station_id}/crew", response_model=list[MembershipResponse])
async def list_crew(
    station_id: int,
    db: SessionDep,
    limit: int | None = Query(None, ge=1),
) -> list[Membership]:
    return list(stations.list_crew(db, station_id, limit))


@router.get("/{station_id}/members/{member}", response_model=MembershipResponse)
async def get_member(station_id: int, member: str, db: SessionDep) -> Membership:
    stations.get_station(db, station_id)
    membership = get_membership(db, station_id, member)
    if membership is None:
        raise NotFoundError("User is not a member of this station", code="not_member")
    return membership


@router.get("/{station_id}/audit-log", response_model=list[AuditLogEntryResponse])
async def get_audit_log(
    station_id: int,
    principal: PrincipalDep,
    db: SessionDep,
    limit: int = Query(50, ge=1, le=200),
) -> list[AuditLogEntry]:
    """Newest privileged actions in a station."""
    return list(audit.get_audit_log(db, station_id, principal, limit))
