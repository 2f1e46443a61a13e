# mypy: ignore-errors
"""Tests for station creation, custom roles and role assignment."""

import pytest

from crew_deck.core.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
)
from crew_deck.models import AuditLogEntry, Capability, Membership, Role, Station
from crew_deck.services import roles
from crew_deck.services.permissions import get_membership


def test_create_station_seeds_system_roles_and_captain(db_session, station) -> None:
    """A new station owns four system roles and one captain membership."""
    role_rows = roles.list_roles(db_session, station.id)
    assert [(r.slug, r.priority) for r in role_rows] == [
        ("captain", 100),
        ("co-captain", 90),
        ("moderator", 50),
        ("crew", 10),
    ]
    assert all(r.is_system for r in role_rows)
    assert [r.slug for r in role_rows if r.is_default] == ["crew"]

    captain = next(r for r in role_rows if r.slug == "captain")
    assert captain.capability_set == frozenset(Capability)
    co_captain = next(r for r in role_rows if r.slug == "co-captain")
    assert Capability.ROLES not in co_captain.capability_set

    membership = get_membership(db_session, station.id, "alice")
    assert membership.system_role == "captain"
    assert station.member_count == 1
    assert station.slug == "test-station"


def test_station_slug_collisions_get_numeric_suffix(db_session) -> None:
    first = roles.create_station(db_session, "My Station", "", "alice")
    second = roles.create_station(db_session, "My Station", "", "bob")
    third = roles.create_station(db_session, "my  station!", "", "carol")
    assert first.slug == "my-station"
    assert second.slug == "my-station-1"
    assert third.slug == "my-station-2"


def test_station_slug_race_reports_conflict(db_session, monkeypatch) -> None:
    """A slug claimed between the availability check and the insert is a Conflict."""
    winner = roles.create_station(db_session, "Taken", "", "alice")
    monkeypatch.setattr(roles, "_unique_station_slug", lambda db, base: "taken")

    with pytest.raises(ConflictError) as excinfo:
        roles.create_station(db_session, "Taken", "", "bob")
    assert excinfo.value.code == "slug_taken"

    assert db_session.query(Station).count() == 1
    assert {r.station_id for r in db_session.query(Role)} == {winner.id}
    assert [m.principal for m in db_session.query(Membership)] == ["alice"]


def test_slugify_rules() -> None:
    assert roles.slugify("  Hello, World!! ") == "hello-world"
    assert roles.slugify("!!!") == "station"
    assert len(roles.slugify("a" * 80)) == 50


def test_custom_role_priority_must_stay_below_captain(db_session, station) -> None:
    with pytest.raises(InvalidStateError):
        roles.create_custom_role(
            db_session, station.id, "alice", "Admiral", None, ["view"], priority=100
        )


def test_custom_role_cannot_carry_roles_capability(db_session, station) -> None:
    with pytest.raises(PermissionDeniedError):
        roles.create_custom_role(
            db_session, station.id, "alice", "Admin", None, ["view", "roles"], priority=80
        )


def test_custom_role_slug_must_be_unique(db_session, station) -> None:
    roles.create_custom_role(db_session, station.id, "alice", "Helper", "helper", ["view"], 20)
    with pytest.raises(ConflictError):
        roles.create_custom_role(db_session, station.id, "alice", "Helper 2", "helper", ["view"], 30)


def test_role_management_requires_roles_capability(db_session, station, add_member) -> None:
    add_member("bob", "co-captain")
    with pytest.raises(PermissionDeniedError):
        roles.create_custom_role(db_session, station.id, "bob", "Helper", None, ["view"], 20)


def test_system_roles_cannot_be_modified_or_deleted(db_session, station) -> None:
    moderator = roles.get_role_by_slug(db_session, station.id, "moderator")
    with pytest.raises(PermissionDeniedError):
        roles.update_custom_role(db_session, moderator.id, "alice", name="Mods")
    with pytest.raises(PermissionDeniedError):
        roles.delete_custom_role(db_session, moderator.id, "alice")


def test_update_custom_role(db_session, station) -> None:
    role = roles.create_custom_role(
        db_session, station.id, "alice", "Helper", None, ["view"], 20, color="#123456"
    )
    updated = roles.update_custom_role(
        db_session, role.id, "alice", capabilities=["view", "post", "pin"], priority=40
    )
    assert updated.priority == 40
    assert updated.capability_set == {Capability.VIEW, Capability.POST, Capability.PIN}
    assert updated.color_hint == "#123456"
    with pytest.raises(InvalidStateError):
        roles.update_custom_role(db_session, role.id, "alice", priority=150)


def test_delete_custom_role_reassigns_every_holder(db_session, station, add_member) -> None:
    role = roles.create_custom_role(
        db_session, station.id, "alice", "Reviewer", "reviewer", ["view", "post"], 30
    )
    add_member("bob", "reviewer")
    add_member("carol", "reviewer")

    role_id = role.id
    reassigned = roles.delete_custom_role(db_session, role_id, "alice")

    assert reassigned == 2
    assert db_session.get(Role, role_id) is None
    holders = db_session.query(Membership).filter(Membership.principal.in_(["bob", "carol"])).all()
    assert {(m.system_role, m.custom_role_id) for m in holders} == {("crew", None)}
    actions = [entry.action for entry in db_session.query(AuditLogEntry).all()]
    assert "role_delete" in actions


def test_assign_system_role_clears_custom_role(db_session, station, add_member) -> None:
    roles.create_custom_role(db_session, station.id, "alice", "Scout", "scout", ["view"], 20)
    membership = add_member("bob", "scout")
    assert membership.system_role == "crew"
    assert membership.custom_role_id is not None

    membership = roles.assign_role(db_session, station.id, "alice", "bob", "moderator")
    assert membership.system_role == "moderator"
    assert membership.custom_role_id is None


def test_captain_role_is_never_assignable(db_session, station, add_member) -> None:
    add_member("bob")
    with pytest.raises(PermissionDeniedError):
        roles.assign_role(db_session, station.id, "alice", "bob", "captain")


def test_co_captain_cannot_grant_co_captain(db_session, station, add_member) -> None:
    """Co-captains hold promote but may not create peers."""
    add_member("bob", "co-captain")
    add_member("carol")
    with pytest.raises(PermissionDeniedError):
        roles.assign_role(db_session, station.id, "bob", "carol", "co-captain")

    membership = roles.assign_role(db_session, station.id, "bob", "carol", "moderator")
    assert membership.system_role == "moderator"


def test_co_captain_cannot_demote_a_peer(db_session, station, add_member) -> None:
    add_member("bob", "co-captain")
    add_member("carol", "co-captain")
    with pytest.raises(PermissionDeniedError):
        roles.assign_role(db_session, station.id, "bob", "carol", "crew")


def test_custom_role_holder_cannot_grant_at_or_above_own_priority(
    db_session, station, add_member
) -> None:
    roles.create_custom_role(
        db_session, station.id, "alice", "Recruiter", "recruiter", ["view", "promote"], 60
    )
    roles.create_custom_role(db_session, station.id, "alice", "Senior", "senior", ["view"], 70)
    add_member("bob", "recruiter")
    add_member("carol")

    with pytest.raises(PermissionDeniedError):
        roles.assign_role(db_session, station.id, "bob", "carol", "senior")
    with pytest.raises(PermissionDeniedError):
        roles.assign_role(db_session, station.id, "bob", "carol", "recruiter")
    assert roles.assign_role(db_session, station.id, "bob", "carol", "moderator").system_role == (
        "moderator"
    )


def test_assign_role_target_rules(db_session, station, add_member) -> None:
    add_member("bob", "co-captain")
    with pytest.raises(PermissionDeniedError):
        roles.assign_role(db_session, station.id, "bob", "alice", "crew")
    with pytest.raises(NotFoundError):
        roles.assign_role(db_session, station.id, "alice", "mallory", "moderator")
    with pytest.raises(NotFoundError):
        roles.assign_role(db_session, station.id, "alice", "bob", "no-such-role")


def test_crew_cannot_assign_roles(db_session, station, add_member) -> None:
    add_member("bob")
    add_member("carol")
    with pytest.raises(PermissionDeniedError):
        roles.assign_role(db_session, station.id, "bob", "carol", "moderator")


def test_demote_to_crew_is_captain_only(db_session, station, add_member) -> None:
    add_member("bob", "co-captain")
    add_member("carol", "moderator")
    with pytest.raises(PermissionDeniedError):
        roles.demote_to_crew(db_session, station.id, "bob", "carol")
    with pytest.raises(PermissionDeniedError):
        roles.demote_to_crew(db_session, station.id, "alice", "alice")

    membership = roles.demote_to_crew(db_session, station.id, "alice", "carol")
    assert membership.system_role == "crew"
