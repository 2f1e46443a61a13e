"""Station aggregate root and its membership rows."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from crew_deck.db.session import Base
from crew_deck.db.time import utcnow
from crew_deck.db.types import UTCDateTime

STATION_STATUS_ACTIVE = "active"
STATION_STATUS_ARCHIVED = "archived"


class Station(Base):
    """Community workspace owning members, roles and content.

    Member and post counters are only changed through the methods below so
    that every mutation path updates them exactly once.
    """

    __tablename__ = "station"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    owner_principal: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    member_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    post_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(Text, nullable=False, default=STATION_STATUS_ACTIVE)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == STATION_STATUS_ACTIVE

    def is_owner(self, principal: str) -> bool:
        """Return True when ``principal`` is the station captain."""
        return self.owner_principal == principal

    def add_member(self) -> None:
        self.member_count = (self.member_count or 0) + 1

    def remove_member(self) -> None:
        self.member_count = max(0, (self.member_count or 0) - 1)

    def record_post(self) -> None:
        self.post_count = (self.post_count or 0) + 1

    def discard_post(self) -> None:
        self.post_count = max(0, (self.post_count or 0) - 1)


class Membership(Base):
    """Who belongs to which station, with which role."""

    __tablename__ = "station_membership"
    __table_args__ = (
        UniqueConstraint("station_id", "principal", name="uq_station_membership_principal"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    station_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("station.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    principal: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    # One of the four system role slugs.
    system_role: Mapped[str] = mapped_column(Text, nullable=False)
    # When set, this role's capabilities replace the system role's entirely.
    custom_role_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("station_role.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    karma_earned_here: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    joined_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
