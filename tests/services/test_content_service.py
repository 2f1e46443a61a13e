# mypy: ignore-errors
"""Tests for posts, threaded comments and cascading deletion."""

import pytest

from crew_deck.core.errors import (
    InvalidStateError,
    PermissionDeniedError,
    ValidationError,
)
from crew_deck.models import Comment, CommentVote, Post, PostVote
from crew_deck.services import content, stations, votes


@pytest.fixture()
def post(db_session, station, add_member):
    add_member("bob")
    return content.create_post(db_session, station.id, "bob", "feedback", "Idea", "Please add X")


def test_create_post_updates_counters(db_session, station, post) -> None:
    assert post.post_type == "feedback"
    assert post.is_owner_post is False
    assert station.post_count == 1


def test_post_requires_membership_and_valid_text(db_session, station) -> None:
    with pytest.raises(PermissionDeniedError):
        content.create_post(db_session, station.id, "stranger", "bug", "Crash", "It broke")
    with pytest.raises(ValidationError):
        content.create_post(db_session, station.id, "alice", "bug", "   ", "Body")
    with pytest.raises(ValidationError):
        content.create_post(db_session, station.id, "alice", "bug", "x" * 201, "Body")


def test_updates_are_captain_only(db_session, station, add_member) -> None:
    add_member("bob")
    with pytest.raises(PermissionDeniedError):
        content.create_post(db_session, station.id, "bob", "update", "v2", "Shipped")
    post = content.create_post(db_session, station.id, "alice", "update", "v2", "Shipped")
    assert post.is_owner_post is True


def test_archived_station_rejects_posts(db_session, station) -> None:
    stations.archive_station(db_session, station.id, "alice")
    with pytest.raises(InvalidStateError):
        content.create_post(db_session, station.id, "alice", "discussion", "Hello", "World")


def test_edit_and_pin_post(db_session, station, post, add_member) -> None:
    with pytest.raises(PermissionDeniedError):
        content.edit_post(db_session, post.id, "alice", title="Hijack")
    edited = content.edit_post(db_session, post.id, "bob", content="Please add X and Y")
    assert edited.is_edited
    assert edited.updated_at is not None

    with pytest.raises(PermissionDeniedError):
        content.pin_post(db_session, post.id, "bob")
    add_member("mod", "moderator")
    assert content.pin_post(db_session, post.id, "mod").is_pinned


def test_comment_depth_limit(db_session, station, post) -> None:
    parent = content.create_comment(db_session, post.id, "alice", "depth 0")
    for expected_depth in (1, 2, 3):
        parent = content.create_comment(db_session, post.id, "alice", "reply", parent.id)
        assert parent.depth == expected_depth

    with pytest.raises(InvalidStateError) as excinfo:
        content.create_comment(db_session, post.id, "alice", "too deep", parent.id)
    assert excinfo.value.code == "max_depth"
    assert post.comment_count == 4


def test_parent_must_belong_to_same_post(db_session, station, post) -> None:
    other = content.create_post(db_session, station.id, "alice", "discussion", "Other", "Post")
    foreign = content.create_comment(db_session, other.id, "alice", "elsewhere")
    with pytest.raises(InvalidStateError):
        content.create_comment(db_session, post.id, "alice", "reply", foreign.id)


def test_delete_comment_removes_subtree(db_session, station, post) -> None:
    """Deleting a comment with N descendants lowers comment_count by N + 1."""
    root = content.create_comment(db_session, post.id, "bob", "root")
    child_a = content.create_comment(db_session, post.id, "alice", "a", root.id)
    content.create_comment(db_session, post.id, "bob", "a1", child_a.id)
    content.create_comment(db_session, post.id, "alice", "b", root.id)
    survivor = content.create_comment(db_session, post.id, "alice", "separate thread")
    votes.vote_on_comment(db_session, child_a.id, "bob", "up")
    assert post.comment_count == 5

    deleted = content.delete_comment(db_session, root.id, "bob")

    assert deleted == 4
    assert post.comment_count == 1
    remaining = db_session.query(Comment).filter(Comment.post_id == post.id).all()
    assert [c.id for c in remaining] == [survivor.id]
    assert db_session.query(CommentVote).count() == 0


def test_delete_comment_permissions(db_session, station, post, add_member) -> None:
    comment = content.create_comment(db_session, post.id, "bob", "mine")
    add_member("carol")
    with pytest.raises(PermissionDeniedError):
        content.delete_comment(db_session, comment.id, "carol")
    add_member("mod", "moderator")
    assert content.delete_comment(db_session, comment.id, "mod") == 1


def test_delete_post_cascades(db_session, station, post) -> None:
    comment = content.create_comment(db_session, post.id, "alice", "nice")
    content.create_comment(db_session, post.id, "bob", "thanks", comment.id)
    votes.vote_on_post(db_session, post.id, "alice", "up")
    votes.vote_on_comment(db_session, comment.id, "bob", "down")
    post_id = post.id

    removed = content.delete_post(db_session, post_id, "alice")

    assert removed == 2
    assert db_session.get(Post, post_id) is None
    assert db_session.query(Comment).count() == 0
    assert db_session.query(PostVote).count() == 0
    assert db_session.query(CommentVote).count() == 0
    assert station.post_count == 0


def test_threaded_comments(db_session, station, post) -> None:
    low = content.create_comment(db_session, post.id, "alice", "low")
    high = content.create_comment(db_session, post.id, "alice", "high")
    reply = content.create_comment(db_session, post.id, "bob", "reply", high.id)
    votes.vote_on_comment(db_session, high.id, "bob", "up")

    tree = content.get_threaded_comments(db_session, post.id)

    assert [node.comment.id for node in tree] == [high.id, low.id]
    assert [node.comment.id for node in tree[0].replies] == [reply.id]
    assert tree[1].replies == []


def test_list_posts_filters_by_type(db_session, station, post) -> None:
    bug = content.create_post(db_session, station.id, "bob", "bug", "Crash", "On launch")
    news = content.create_post(db_session, station.id, "alice", "update", "v2", "Shipped")

    assert [p.id for p in content.list_posts(db_session, station.id)] == [news.id, bug.id, post.id]
    assert [p.id for p in content.list_posts(db_session, station.id, post_type="bug")] == [bug.id]
    assert content.list_posts(db_session, station.id, post_type="question") == []
