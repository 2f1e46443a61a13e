# src/crew_deck/models/vote.py
"""Models capturing voting interactions on posts and comments."""

from datetime import datetime

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from crew_deck.db.session import Base
from crew_deck.db.time import utcnow
from crew_deck.db.types import UTCDateTime


class PostVote(Base):
    """Per-principal vote on a post."""

    __tablename__ = "station_post_vote"
    __table_args__ = (
        CheckConstraint("direction IN ('up', 'down')", name="ck_station_post_vote_direction"),
    )

    # Composite primary key prevents duplicate votes from the same principal.
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("station_post.id", ondelete="CASCADE"),
        primary_key=True,
    )
    voter_principal: Mapped[str] = mapped_column(Text, primary_key=True)
    direction: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)


class CommentVote(Base):
    """Per-principal vote on a comment."""

    __tablename__ = "station_comment_vote"
    __table_args__ = (
        CheckConstraint(
            "direction IN ('up', 'down')", name="ck_station_comment_vote_direction"
        ),
    )

    comment_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("station_comment.id", ondelete="CASCADE"),
        primary_key=True,
    )
    voter_principal: Mapped[str] = mapped_column(Text, primary_key=True)
    direction: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
