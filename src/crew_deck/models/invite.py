"""Invitation codes gating station membership."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from crew_deck.db.session import Base
from crew_deck.db.time import utcnow
from crew_deck.db.types import UTCDateTime


class Invite(Base):
    """Redeemable invitation into a station."""

    __tablename__ = "station_invite"
    __table_args__ = (
        Index("ix_station_invite_station_active", "station_id", "is_active"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    station_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("station.id", ondelete="CASCADE"),
        nullable=False,
    )
    code: Mapped[str] = mapped_column(String(8), unique=True, nullable=False)
    invited_by: Mapped[str] = mapped_column(Text, nullable=False)
    # Restricts redemption to one principal when set.
    invited_principal: Mapped[str | None] = mapped_column(Text, nullable=True)
    role_on_join: Mapped[str] = mapped_column(Text, nullable=False, default="crew")
    max_uses: Mapped[int | None] = mapped_column(Integer, nullable=True)
    used_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    expires_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    def is_exhausted(self) -> bool:
        return self.max_uses is not None and self.used_count >= self.max_uses
