# mypy: ignore-errors
"""Tests for bans, mutes and lazy expiry."""

from datetime import timedelta

import pytest

from crew_deck.core.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from crew_deck.db.time import utcnow
from crew_deck.models import AuditLogEntry, ModerationAction
from crew_deck.services import content, stations, votes
from crew_deck.services.moderation import ModerationService, is_restriction_active
from crew_deck.services.permissions import get_membership


def _actions(db_session) -> list[str]:
    return [entry.action for entry in db_session.query(AuditLogEntry).order_by(AuditLogEntry.id)]


def test_is_restriction_active_rule() -> None:
    now = utcnow()
    permanent = ModerationAction(is_active=True, expires_at=None)
    running = ModerationAction(is_active=True, expires_at=now + timedelta(hours=1))
    lapsed = ModerationAction(is_active=True, expires_at=now - timedelta(seconds=1))
    lifted = ModerationAction(is_active=False, expires_at=None)

    assert is_restriction_active(permanent, now)
    assert is_restriction_active(running, now)
    assert not is_restriction_active(running, now + timedelta(hours=2))
    assert not is_restriction_active(lapsed, now)
    assert not is_restriction_active(lifted, now)


def test_ban_removes_membership_and_logs(db_session, station, add_member) -> None:
    add_member("bob")
    assert station.member_count == 2

    action = ModerationService.ban_member(db_session, station.id, "alice", "bob", reason="spam")

    assert action.kind == "ban"
    assert action.expires_at is None
    assert get_membership(db_session, station.id, "bob") is None
    assert station.member_count == 1
    assert _actions(db_session)[-1] == "member_ban"


def test_banned_principal_cannot_rejoin(db_session, station, add_member) -> None:
    add_member("bob")
    ModerationService.ban_member(db_session, station.id, "alice", "bob")
    with pytest.raises(InvalidStateError) as excinfo:
        stations.join_station(db_session, station.id, "bob")
    assert excinfo.value.code == "banned"


def test_ban_rules(db_session, station, add_member) -> None:
    add_member("bob", "moderator")
    add_member("carol")
    # Moderators lack the ban capability.
    with pytest.raises(PermissionDeniedError):
        ModerationService.ban_member(db_session, station.id, "bob", "carol")
    with pytest.raises(PermissionDeniedError):
        ModerationService.ban_member(db_session, station.id, "alice", "alice")

    ModerationService.ban_member(db_session, station.id, "alice", "carol", duration_hours=24)
    with pytest.raises(ConflictError):
        ModerationService.ban_member(db_session, station.id, "alice", "carol")


def test_ban_of_non_member_is_allowed(db_session, station) -> None:
    """Pre-emptive bans keep the member count untouched."""
    ModerationService.ban_member(db_session, station.id, "alice", "mallory")
    assert station.member_count == 1
    assert ModerationService.is_banned(db_session, station.id, "mallory")


def test_unban_lifts_without_restoring_membership(db_session, station, add_member) -> None:
    add_member("bob")
    ModerationService.ban_member(db_session, station.id, "alice", "bob")

    lifted = ModerationService.unban_member(db_session, station.id, "alice", "bob")

    assert lifted == 1
    ban = db_session.query(ModerationAction).filter_by(target_principal="bob").one()
    assert ban.is_active is False
    assert ban.lifted_by == "alice"
    assert ban.lifted_at is not None
    assert get_membership(db_session, station.id, "bob") is None
    assert _actions(db_session)[-1] == "member_unban"

    stations.join_station(db_session, station.id, "bob")
    assert get_membership(db_session, station.id, "bob") is not None


def test_unban_requires_active_ban(db_session, station) -> None:
    with pytest.raises(NotFoundError):
        ModerationService.unban_member(db_session, station.id, "alice", "bob")


def test_expired_ban_does_not_block(db_session, station, add_member) -> None:
    add_member("bob")
    ban = ModerationService.ban_member(db_session, station.id, "alice", "bob", duration_hours=1)
    later = utcnow() + timedelta(hours=2)
    assert not ModerationService.is_banned(db_session, station.id, "bob", later)

    ban.expires_at = utcnow() - timedelta(minutes=1)
    db_session.commit()
    # No lift happened; the row simply stopped counting.
    assert ban.is_active is True
    stations.join_station(db_session, station.id, "bob")


def test_expired_ban_can_be_reissued(db_session, station, add_member) -> None:
    add_member("bob")
    first = ModerationService.ban_member(db_session, station.id, "alice", "bob", duration_hours=1)
    with pytest.raises(ConflictError):
        ModerationService.ban_member(db_session, station.id, "alice", "bob")

    first.expires_at = utcnow() - timedelta(minutes=1)
    db_session.commit()
    second = ModerationService.ban_member(db_session, station.id, "alice", "bob", reason="again")

    assert second.id != first.id
    assert ModerationService.is_banned(db_session, station.id, "bob")
    assert ModerationService.unban_member(db_session, station.id, "alice", "bob") == 1


def test_mute_requires_positive_duration(db_session, station, add_member) -> None:
    add_member("bob")
    with pytest.raises(ValidationError):
        ModerationService.mute_member(db_session, station.id, "alice", "bob", duration_hours=0)
    with pytest.raises(ValidationError):
        ModerationService.mute_member(db_session, station.id, "alice", "bob", duration_hours=None)


def test_mute_keeps_membership_and_blocks_posting(db_session, station, add_member) -> None:
    add_member("bob")
    mute = ModerationService.mute_member(
        db_session, station.id, "alice", "bob", duration_hours=1, reason="cool off"
    )
    assert get_membership(db_session, station.id, "bob") is not None
    assert mute.expires_at is not None
    assert _actions(db_session)[-1] == "member_mute"

    with pytest.raises(PermissionDeniedError) as excinfo:
        content.create_post(db_session, station.id, "bob", "feedback", "Hi", "Body")
    assert excinfo.value.code == "muted"


def test_mute_expires_lazily(db_session, station, add_member) -> None:
    add_member("bob")
    mute = ModerationService.mute_member(db_session, station.id, "alice", "bob", duration_hours=1)

    status = ModerationService.check_member_status(
        db_session, station.id, "bob", now=utcnow() + timedelta(hours=2)
    )
    assert not status.is_muted

    mute.expires_at = utcnow() - timedelta(seconds=1)
    db_session.commit()
    post = content.create_post(db_session, station.id, "bob", "feedback", "Back", "Again")
    assert post.id is not None


def test_muted_member_can_still_vote(db_session, station, add_member) -> None:
    post = content.create_post(db_session, station.id, "alice", "discussion", "Poll", "Vote!")
    add_member("bob")
    ModerationService.mute_member(db_session, station.id, "alice", "bob", duration_hours=1)
    assert votes.vote_on_post(db_session, post.id, "bob", "up") == "upvoted"


def test_unmute(db_session, station, add_member) -> None:
    add_member("bob")
    with pytest.raises(NotFoundError):
        ModerationService.unmute_member(db_session, station.id, "alice", "bob")
    ModerationService.mute_member(db_session, station.id, "alice", "bob", duration_hours=3)

    assert ModerationService.unmute_member(db_session, station.id, "alice", "bob") == 1
    assert not ModerationService.is_muted(db_session, station.id, "bob")
    assert _actions(db_session)[-1] == "member_unmute"


def test_check_member_status_and_listing(db_session, station, add_member) -> None:
    add_member("bob")
    add_member("carol")
    ModerationService.mute_member(db_session, station.id, "alice", "bob", duration_hours=5)
    ModerationService.ban_member(db_session, station.id, "alice", "carol")

    bob_status = ModerationService.check_member_status(db_session, station.id, "bob")
    assert bob_status.is_muted and not bob_status.is_banned
    assert len(bob_status.moderations) == 1

    carol_status = ModerationService.check_member_status(db_session, station.id, "carol")
    assert carol_status.is_banned

    active = ModerationService.list_active_moderations(db_session, station.id, "alice")
    assert {(a.target_principal, a.kind) for a in active} == {("bob", "mute"), ("carol", "ban")}
    later = utcnow() + timedelta(hours=6)
    active_later = ModerationService.list_active_moderations(
        db_session, station.id, "alice", now=later
    )
    assert [(a.target_principal, a.kind) for a in active_later] == [("carol", "ban")]
