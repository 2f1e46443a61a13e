# mypy: ignore-errors
"""Tests for joining, leaving and station settings."""

import pytest

from crew_deck.core.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from crew_deck.models import AuditLogEntry
from crew_deck.services import audit, roles, stations


def test_join_and_leave(db_session, station) -> None:
    membership = stations.join_station(db_session, station.id, "bob")
    assert membership.system_role == "crew"
    assert station.member_count == 2
    with pytest.raises(ConflictError):
        stations.join_station(db_session, station.id, "bob")

    stations.leave_station(db_session, station.id, "bob")
    assert station.member_count == 1
    with pytest.raises(NotFoundError):
        stations.leave_station(db_session, station.id, "bob")


def test_captain_cannot_leave(db_session, station) -> None:
    with pytest.raises(PermissionDeniedError):
        stations.leave_station(db_session, station.id, "alice")


def test_list_crew_and_memberships(db_session, station, add_member) -> None:
    add_member("bob")
    other = roles.create_station(db_session, "Other", "", "carol")
    stations.join_station(db_session, other.id, "bob")

    crew = stations.list_crew(db_session, station.id)
    assert [m.principal for m in crew] == ["alice", "bob"]

    mine = stations.list_memberships(db_session, "bob")
    assert {station_row.slug for _, station_row in mine} == {"test-station", "other"}


def test_list_stations_sorting(db_session, station, add_member) -> None:
    add_member("bob")
    newer = roles.create_station(db_session, "Newer", "", "carol")

    by_members = stations.list_stations(db_session, sort_by="members")
    assert [s.id for s in by_members] == [station.id, newer.id]
    by_recent = stations.list_stations(db_session, sort_by="recent")
    assert by_recent[0].id == newer.id
    with pytest.raises(ValidationError):
        stations.list_stations(db_session, sort_by="alphabetical")


def test_update_station_requires_settings(db_session, station, add_member) -> None:
    add_member("bob", "moderator")
    with pytest.raises(PermissionDeniedError):
        stations.update_station(db_session, station.id, "bob", name="Renamed")

    add_member("carol", "co-captain")
    updated = stations.update_station(db_session, station.id, "carol", description="New text")
    assert updated.description == "New text"
    assert updated.name == "Test Station"


def test_archive_station(db_session, station, add_member) -> None:
    add_member("bob", "co-captain")
    with pytest.raises(PermissionDeniedError):
        stations.archive_station(db_session, station.id, "bob")

    archived = stations.archive_station(db_session, station.id, "alice")
    assert archived.status == "archived"
    assert stations.list_stations(db_session) == []
    with pytest.raises(InvalidStateError):
        stations.join_station(db_session, station.id, "dave")


def test_lookup_by_slug(db_session, station) -> None:
    assert stations.get_station_by_slug(db_session, "test-station").id == station.id
    with pytest.raises(NotFoundError):
        stations.get_station_by_slug(db_session, "missing")


def test_audit_log_visibility(db_session, station, add_member) -> None:
    add_member("bob")
    add_member("carol", "co-captain")
    stations.update_station(db_session, station.id, "alice", name="Renamed")

    with pytest.raises(PermissionDeniedError):
        audit.get_audit_log(db_session, station.id, "bob")

    entries = audit.get_audit_log(db_session, station.id, "carol")
    assert entries[0].action == "station_update"
    assert audit.decode_details(entries[0]) == {"fields": ["name"]}
    assert db_session.query(AuditLogEntry).filter_by(action="role_assign").count() == 1
