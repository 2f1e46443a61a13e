"""Single-vote-per-principal voting on posts and comments."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from crew_deck.core.errors import ValidationError
from crew_deck.db.session import atomic
from crew_deck.db.time import utcnow
from crew_deck.models import Comment, CommentVote, Post, PostVote
from crew_deck.models.post import VOTE_DIRECTIONS, VOTE_UP
from crew_deck.services.karma import accrue_karma
from crew_deck.services.lookup import load_comment, load_post, load_station
from crew_deck.services.stations import ensure_active, require_membership

__all__ = [
    "VOTE_ADDED_UP",
    "VOTE_ADDED_DOWN",
    "VOTE_REMOVED",
    "VOTE_CHANGED",
    "vote_on_post",
    "vote_on_comment",
    "get_my_post_vote",
    "get_my_comment_vote",
]

logger = logging.getLogger(__name__)

VOTE_ADDED_UP = "upvoted"
VOTE_ADDED_DOWN = "downvoted"
VOTE_REMOVED = "removed"
VOTE_CHANGED = "changed"


def _validate_direction(direction: str) -> str:
    if direction not in VOTE_DIRECTIONS:
        raise ValidationError("Vote direction must be 'up' or 'down'")
    return direction


def _handle_existing_vote(
    *,
    existing_vote: PostVote | CommentVote,
    direction: str,
    target: Post | Comment,
    db: Session,
) -> str:
    """Retract a same-direction re-vote or flip an opposite one."""
    previous = existing_vote.direction
    if previous == direction:
        db.delete(existing_vote)
        target.apply_vote(previous, None)
        return VOTE_REMOVED

    existing_vote.direction = direction
    existing_vote.created_at = utcnow()
    target.apply_vote(previous, direction)
    return VOTE_CHANGED


def vote_on_post(db: Session, post_id: int, principal: str, direction: str) -> str:
    """Cast, flip or retract ``principal``'s vote on a post.

    A fresh upvote on somebody else's post earns the voter ``vote`` karma.
    Mutes do not block voting.
    """
    direction = _validate_direction(direction)
    post = load_post(db, post_id)
    station = load_station(db, post.station_id)
    ensure_active(station)
    require_membership(db, station.id, principal)

    with atomic(db):
        existing_vote = db.get(PostVote, (post.id, principal))
        if existing_vote is not None:
            result = _handle_existing_vote(
                existing_vote=existing_vote, direction=direction, target=post, db=db
            )
        else:
            db.add(PostVote(post_id=post.id, voter_principal=principal, direction=direction))
            post.apply_vote(None, direction)
            result = VOTE_ADDED_UP if direction == VOTE_UP else VOTE_ADDED_DOWN
            if direction == VOTE_UP and post.author_principal != principal:
                db.flush()
                accrue_karma(db, station, principal, "vote")

    logger.debug("Vote on post %s by %s: %s", post_id, principal, result)
    return result


def vote_on_comment(db: Session, comment_id: int, principal: str, direction: str) -> str:
    """Cast, flip or retract ``principal``'s vote on a comment."""
    direction = _validate_direction(direction)
    comment = load_comment(db, comment_id)
    station = load_station(db, comment.station_id)
    ensure_active(station)
    require_membership(db, station.id, principal)

    with atomic(db):
        existing_vote = db.get(CommentVote, (comment.id, principal))
        if existing_vote is not None:
            result = _handle_existing_vote(
                existing_vote=existing_vote, direction=direction, target=comment, db=db
            )
        else:
            db.add(
                CommentVote(comment_id=comment.id, voter_principal=principal, direction=direction)
            )
            comment.apply_vote(None, direction)
            result = VOTE_ADDED_UP if direction == VOTE_UP else VOTE_ADDED_DOWN

    logger.debug("Vote on comment %s by %s: %s", comment_id, principal, result)
    return result


def get_my_post_vote(db: Session, post_id: int, principal: str) -> str | None:
    """Return ``principal``'s vote direction on a post, or None."""
    post = load_post(db, post_id)
    vote = db.get(PostVote, (post.id, principal))
    return vote.direction if vote is not None else None


def get_my_comment_vote(db: Session, comment_id: int, principal: str) -> str | None:
    comment = load_comment(db, comment_id)
    vote = db.get(CommentVote, (comment.id, principal))
    return vote.direction if vote is not None else None
