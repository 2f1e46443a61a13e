# src/crew_deck/models/moderation.py
"""Models tracking bans and mutes issued inside a station."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from crew_deck.db.session import Base
from crew_deck.db.time import utcnow
from crew_deck.db.types import UTCDateTime

MODERATION_KIND_BAN = "ban"
MODERATION_KIND_MUTE = "mute"


class ModerationAction(Base):
    """A ban or mute record.

    Rows are never deleted. Expiry is evaluated lazily by comparing
    ``expires_at`` with the evaluation time; only an explicit lift flips
    ``is_active``.
    """

    __tablename__ = "moderation_action"
    __table_args__ = (
        CheckConstraint("kind IN ('ban', 'mute')", name="ck_moderation_action_kind"),
        Index("ix_moderation_action_station_target", "station_id", "target_principal"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    station_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("station.id", ondelete="CASCADE"),
        nullable=False,
    )
    target_principal: Mapped[str] = mapped_column(Text, nullable=False)
    kind: Mapped[str] = mapped_column(Text, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    issued_by: Mapped[str] = mapped_column(Text, nullable=False)
    issued_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    # Null means permanent (bans only).
    expires_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    lifted_by: Mapped[str | None] = mapped_column(Text, nullable=True)
    lifted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
