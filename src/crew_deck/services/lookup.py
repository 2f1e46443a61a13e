"""Primary-key lookups that raise NotFoundError instead of returning None."""
from __future__ import annotations

from sqlalchemy.orm import Session

from crew_deck.core.errors import NotFoundError
from crew_deck.models import Comment, Invite, Post, Role, Station

__all__ = ["load_station", "load_role", "load_post", "load_comment", "load_invite"]


def load_station(db: Session, station_id: int) -> Station:
    station = db.get(Station, station_id)
    if station is None:
        raise NotFoundError("Station not found", code="station_not_found")
    return station


def load_role(db: Session, role_id: int) -> Role:
    role = db.get(Role, role_id)
    if role is None:
        raise NotFoundError("Role not found", code="role_not_found")
    return role


def load_post(db: Session, post_id: int) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found", code="post_not_found")
    return post


def load_comment(db: Session, comment_id: int) -> Comment:
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found", code="comment_not_found")
    return comment


def load_invite(db: Session, invite_id: int) -> Invite:
    invite = db.get(Invite, invite_id)
    if invite is None:
        raise NotFoundError("Invite not found", code="invite_not_found")
    return invite
