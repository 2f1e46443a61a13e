"""Append-only audit trail of privileged station actions."""

from datetime import datetime

from sqlalchemy import ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from crew_deck.db.session import Base
from crew_deck.db.time import utcnow
from crew_deck.db.types import UTCDateTime


class AuditLogEntry(Base):
    """One privileged action. Rows are inserted and never updated or deleted."""

    __tablename__ = "station_audit_log"
    __table_args__ = (
        Index("ix_station_audit_log_station_time", "station_id", "timestamp"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    station_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("station.id", ondelete="CASCADE"),
        nullable=False,
    )
    action: Mapped[str] = mapped_column(Text, nullable=False)
    actor_principal: Mapped[str] = mapped_column(Text, nullable=False)
    target_principal: Mapped[str | None] = mapped_column(Text, nullable=True)
    # JSON-encoded detail payload.
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
