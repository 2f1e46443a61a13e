"""Global cross-station karma ledger."""

from datetime import datetime

from sqlalchemy import Float, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from crew_deck.db.session import Base
from crew_deck.db.time import utcnow
from crew_deck.db.types import UTCDateTime


class KarmaLedgerEntry(Base):
    """Reputation a principal earned by contributing to other people's stations."""

    __tablename__ = "karma_ledger"

    principal: Mapped[str] = mapped_column(Text, primary_key=True)
    external_karma: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    unique_stations_helped: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Derived from external_karma on every write.
    promotion_boost: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
