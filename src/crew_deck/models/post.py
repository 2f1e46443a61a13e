"""SQLAlchemy models for station posts and threaded comments."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from crew_deck.db.session import Base
from crew_deck.db.time import utcnow
from crew_deck.db.types import UTCDateTime

VOTE_UP = "up"
VOTE_DOWN = "down"
VOTE_DIRECTIONS = (VOTE_UP, VOTE_DOWN)

# Top-level comments sit at depth 0; replies deeper than this are rejected.
MAX_COMMENT_DEPTH = 3


class VoteTallyMixin:
    """Up/down counters shared by posts and comments."""

    upvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    downvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    @property
    def score(self) -> int:
        return (self.upvotes or 0) - (self.downvotes or 0)

    def apply_vote(self, previous: str | None, current: str | None) -> None:
        """Move the tallies from ``previous`` to ``current`` in one step.

        ``None`` stands for "no vote". A flip decrements one counter and
        increments the other before anything is flushed.
        """
        upvotes = self.upvotes or 0
        downvotes = self.downvotes or 0
        if previous == VOTE_UP:
            upvotes = max(0, upvotes - 1)
        elif previous == VOTE_DOWN:
            downvotes = max(0, downvotes - 1)
        if current == VOTE_UP:
            upvotes += 1
        elif current == VOTE_DOWN:
            downvotes += 1
        self.upvotes = upvotes
        self.downvotes = downvotes


class Post(VoteTallyMixin, Base):
    """Top-level content inside a station."""

    __tablename__ = "station_post"
    __table_args__ = (
        Index("ix_station_post_station_type", "station_id", "post_type"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    station_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("station.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_principal: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    # Open string set: feedback, bug, feature, discussion, question, update, ...
    post_type: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_owner_post: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_edited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    def record_comments(self, count: int = 1) -> None:
        self.comment_count = (self.comment_count or 0) + count

    def discard_comments(self, count: int) -> None:
        self.comment_count = max(0, (self.comment_count or 0) - count)


class Comment(VoteTallyMixin, Base):
    """Reply to a post or to another comment."""

    __tablename__ = "station_comment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("station_post.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    station_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("station.id", ondelete="CASCADE"),
        nullable=False,
    )
    author_principal: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("station_comment.id"),
        nullable=True,
        index=True,
    )
    depth: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_edited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
