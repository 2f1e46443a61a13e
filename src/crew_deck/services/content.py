# src/crew_deck/services/content.py
"""Posts, threaded comments and cascading deletion."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from sqlalchemy.orm import Session

from crew_deck.core.errors import InvalidStateError, PermissionDeniedError, ValidationError
from crew_deck.db.session import atomic
from crew_deck.db.time import utcnow
from crew_deck.models import Capability, Comment, CommentVote, Post, PostVote, Station
from crew_deck.models.post import MAX_COMMENT_DEPTH
from crew_deck.services.audit import log_action
from crew_deck.services.karma import accrue_karma
from crew_deck.services.lookup import load_comment, load_post, load_station
from crew_deck.services.moderation import ModerationService
from crew_deck.services.permissions import check_permission, require_permission
from crew_deck.services.stations import clamp_limit, ensure_active, require_membership

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200
MAX_CONTENT_LENGTH = 10_000
OWNER_ONLY_POST_TYPES = frozenset({"update"})


@dataclass
class CommentNode:
    """A comment together with its nested replies."""

    comment: Comment
    replies: list["CommentNode"] = field(default_factory=list)


def _clean_text(value: str | None, label: str, max_length: int) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{label} is required")
    if len(cleaned) > max_length:
        raise ValidationError(f"{label} must be at most {max_length} characters")
    return cleaned


def _ensure_can_contribute(db: Session, station: Station, principal: str) -> None:
    ensure_active(station)
    require_membership(db, station.id, principal)
    require_permission(
        db, station.id, principal, Capability.POST, "You do not have permission to post here"
    )
    ModerationService.ensure_not_muted(db, station.id, principal)


def get_post(db: Session, post_id: int) -> Post:
    return load_post(db, post_id)


def list_posts(
    db: Session,
    station_id: int,
    limit: int | None = None,
    post_type: str | None = None,
) -> Sequence[Post]:
    """Return a station's posts with pinned posts first, then newest first.

    ``post_type`` restricts the listing to one kind of post.
    """
    load_station(db, station_id)
    query = db.query(Post).filter(Post.station_id == station_id)
    if post_type is not None:
        query = query.filter(Post.post_type == post_type)
    return (
        query
        .order_by(Post.is_pinned.desc(), Post.created_at.desc(), Post.id.desc())
        .limit(clamp_limit(limit))
        .all()
    )


def create_post(
    db: Session,
    station_id: int,
    author: str,
    post_type: str,
    title: str,
    content: str,
) -> Post:
    """Publish a post. Non-owners earn karma according to the post type."""
    station = load_station(db, station_id)
    _ensure_can_contribute(db, station, author)

    post_type = (post_type or "").strip().lower()
    if not post_type:
        raise ValidationError("Post type is required")
    is_owner = station.is_owner(author)
    if post_type in OWNER_ONLY_POST_TYPES and not is_owner:
        raise PermissionDeniedError("Only the captain can publish updates", code="owner_only")
    title = _clean_text(title, "Title", MAX_TITLE_LENGTH)
    content = _clean_text(content, "Content", MAX_CONTENT_LENGTH)

    with atomic(db):
        post = Post(
            station_id=station_id,
            author_principal=author,
            post_type=post_type,
            title=title,
            content=content,
            is_owner_post=is_owner,
            is_pinned=False,
            upvotes=0,
            downvotes=0,
            comment_count=0,
        )
        db.add(post)
        station.record_post()
        db.flush()
        if not is_owner:
            accrue_karma(db, station, author, post_type)

    logger.debug("Post %s created in station %s by %s", post.id, station_id, author)
    return post


def edit_post(
    db: Session,
    post_id: int,
    principal: str,
    *,
    title: str | None = None,
    content: str | None = None,
) -> Post:
    post = load_post(db, post_id)
    if post.author_principal != principal:
        raise PermissionDeniedError("Only the author can edit this post", code="not_author")
    ModerationService.ensure_not_muted(db, post.station_id, principal)

    with atomic(db):
        if title is not None:
            post.title = _clean_text(title, "Title", MAX_TITLE_LENGTH)
        if content is not None:
            post.content = _clean_text(content, "Content", MAX_CONTENT_LENGTH)
        post.is_edited = True
        post.updated_at = utcnow()
    return post


def pin_post(db: Session, post_id: int, actor: str, pinned: bool = True) -> Post:
    """Pin or unpin a post."""
    post = load_post(db, post_id)
    require_permission(
        db, post.station_id, actor, Capability.PIN, "You do not have permission to pin posts"
    )
    with atomic(db):
        post.is_pinned = pinned
        log_action(
            db,
            post.station_id,
            "post_pin",
            actor,
            post.author_principal,
            details={"post_id": post.id, "pinned": pinned},
        )
    return post


def _can_remove(db: Session, station: Station, principal: str, author: str) -> bool:
    return (
        principal == author
        or station.is_owner(principal)
        or check_permission(db, station.id, principal, Capability.DELETE)
    )


def delete_post(db: Session, post_id: int, principal: str) -> int:
    """Delete a post with all its comments and votes.

    Returns the number of comments removed alongside the post.
    """
    post = load_post(db, post_id)
    station = load_station(db, post.station_id)
    if not _can_remove(db, station, principal, post.author_principal):
        raise PermissionDeniedError("You cannot delete this post", code="cannot_delete")

    with atomic(db):
        comment_ids = [row.id for row in db.query(Comment.id).filter(Comment.post_id == post.id)]
        if comment_ids:
            db.query(CommentVote).filter(CommentVote.comment_id.in_(comment_ids)).delete(
                synchronize_session=False
            )
            db.query(Comment).filter(Comment.id.in_(comment_ids)).delete(
                synchronize_session=False
            )
        db.query(PostVote).filter(PostVote.post_id == post.id).delete(synchronize_session=False)
        if principal != post.author_principal:
            log_action(
                db,
                station.id,
                "post_delete",
                principal,
                post.author_principal,
                details={"post_id": post.id, "comments": len(comment_ids)},
            )
        db.delete(post)
        station.discard_post()

    logger.info("Post %s deleted by %s with %d comments", post_id, principal, len(comment_ids))
    return len(comment_ids)


def create_comment(
    db: Session,
    post_id: int,
    author: str,
    content: str,
    parent_id: int | None = None,
) -> Comment:
    """Reply to a post, or to a comment on it when ``parent_id`` is given."""
    post = load_post(db, post_id)
    station = load_station(db, post.station_id)
    _ensure_can_contribute(db, station, author)
    content = _clean_text(content, "Content", MAX_CONTENT_LENGTH)

    depth = 0
    if parent_id is not None:
        parent = load_comment(db, parent_id)
        if parent.post_id != post.id:
            raise InvalidStateError(
                "Parent comment belongs to a different post", code="parent_mismatch"
            )
        depth = parent.depth + 1
        if depth > MAX_COMMENT_DEPTH:
            raise InvalidStateError(
                f"Replies cannot be nested more than {MAX_COMMENT_DEPTH} levels deep",
                code="max_depth",
            )

    with atomic(db):
        comment = Comment(
            post_id=post.id,
            station_id=station.id,
            author_principal=author,
            content=content,
            parent_id=parent_id,
            depth=depth,
            upvotes=0,
            downvotes=0,
        )
        db.add(comment)
        post.record_comments()
        db.flush()
        if post.author_principal != author:
            accrue_karma(db, station, author, "discussion")
    return comment


def edit_comment(db: Session, comment_id: int, principal: str, content: str) -> Comment:
    comment = load_comment(db, comment_id)
    if comment.author_principal != principal:
        raise PermissionDeniedError("Only the author can edit this comment", code="not_author")
    ModerationService.ensure_not_muted(db, comment.station_id, principal)
    with atomic(db):
        comment.content = _clean_text(content, "Content", MAX_CONTENT_LENGTH)
        comment.is_edited = True
        comment.updated_at = utcnow()
    return comment


def collect_subtree(db: Session, root_id: int) -> list[int]:
    """Return ``root_id`` and the ids of all its descendants, parents first."""
    collected: list[int] = []
    stack = [root_id]
    while stack:
        current = stack.pop()
        collected.append(current)
        children = db.query(Comment.id).filter(Comment.parent_id == current).all()
        stack.extend(row.id for row in children)
    return collected


def delete_comment(db: Session, comment_id: int, principal: str) -> int:
    """Delete a comment and its whole reply subtree.

    Returns the number of comments removed; the post's comment count drops by
    the same amount in the same transaction.
    """
    comment = load_comment(db, comment_id)
    station = load_station(db, comment.station_id)
    if not _can_remove(db, station, principal, comment.author_principal):
        raise PermissionDeniedError("You cannot delete this comment", code="cannot_delete")
    post = load_post(db, comment.post_id)
    author = comment.author_principal

    with atomic(db):
        subtree = collect_subtree(db, comment.id)
        db.query(CommentVote).filter(CommentVote.comment_id.in_(subtree)).delete(
            synchronize_session=False
        )
        # Children go before their parents.
        for batch_id in reversed(subtree):
            db.query(Comment).filter(Comment.id == batch_id).delete(synchronize_session=False)
        post.discard_comments(len(subtree))
        if principal != author:
            log_action(
                db,
                station.id,
                "comment_delete",
                principal,
                author,
                details={"comment_id": comment_id, "deleted": len(subtree)},
            )

    logger.debug("Comment %s deleted by %s (%d total)", comment_id, principal, len(subtree))
    return len(subtree)


def get_threaded_comments(db: Session, post_id: int) -> list[CommentNode]:
    """Return the comments of a post as a tree.

    Top-level comments are ordered by score, highest first; replies keep
    chronological order.
    """
    load_post(db, post_id)
    comments = (
        db.query(Comment)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at, Comment.id)
        .all()
    )
    nodes = {comment.id: CommentNode(comment) for comment in comments}
    roots: list[CommentNode] = []
    for comment in comments:
        node = nodes[comment.id]
        parent = nodes.get(comment.parent_id) if comment.parent_id is not None else None
        if parent is None:
            roots.append(node)
        else:
            parent.replies.append(node)
    roots.sort(key=lambda node: node.comment.score, reverse=True)
    return roots


__all__ = [
    "MAX_TITLE_LENGTH",
    "MAX_CONTENT_LENGTH",
    "CommentNode",
    "get_post",
    "list_posts",
    "create_post",
    "edit_post",
    "pin_post",
    "delete_post",
    "create_comment",
    "edit_comment",
    "collect_subtree",
    "delete_comment",
    "get_threaded_comments",
]
