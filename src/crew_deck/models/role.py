"""Roles, capabilities and the fixed system role table."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from crew_deck.db.session import Base
from crew_deck.db.time import utcnow
from crew_deck.db.types import UTCDateTime


class Capability(str, Enum):
    """A single named permission inside a station."""

    VIEW = "view"
    POST = "post"
    PIN = "pin"
    DELETE = "delete"
    SETTINGS = "settings"
    PROMOTE = "promote"
    BAN = "ban"
    ROLES = "roles"


ROLE_CAPTAIN = "captain"
ROLE_CO_CAPTAIN = "co-captain"
ROLE_MODERATOR = "moderator"
ROLE_CREW = "crew"

# Custom roles must stay strictly below the captain.
CAPTAIN_PRIORITY = 100
CO_CAPTAIN_PRIORITY = 90

SYSTEM_ROLE_CAPABILITIES: dict[str, frozenset[Capability]] = {
    ROLE_CAPTAIN: frozenset(Capability),
    ROLE_CO_CAPTAIN: frozenset(Capability) - {Capability.ROLES},
    ROLE_MODERATOR: frozenset(
        {Capability.VIEW, Capability.POST, Capability.PIN, Capability.DELETE}
    ),
    ROLE_CREW: frozenset({Capability.VIEW, Capability.POST}),
}

# (slug, display name, colour hint, priority, is_default), highest first.
SYSTEM_ROLE_DEFINITIONS: tuple[tuple[str, str, str, int, bool], ...] = (
    (ROLE_CAPTAIN, "Captain", "#FFD700", CAPTAIN_PRIORITY, False),
    (ROLE_CO_CAPTAIN, "Co-Captain", "#C0C0C0", CO_CAPTAIN_PRIORITY, False),
    (ROLE_MODERATOR, "Moderator", "#4CAF50", 50, False),
    (ROLE_CREW, "Crew", "#2196F3", 10, True),
)

SYSTEM_ROLE_PRIORITIES: dict[str, int] = {
    slug: priority for slug, _name, _color, priority, _default in SYSTEM_ROLE_DEFINITIONS
}


class Role(Base):
    """A system or custom role defined for one station."""

    __tablename__ = "station_role"
    __table_args__ = (
        UniqueConstraint("station_id", "slug", name="uq_station_role_slug"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    station_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("station.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(Text, nullable=False)
    color_hint: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Stored as a sorted list of capability values.
    capabilities: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    priority: Mapped[int] = mapped_column(Integer, nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_system: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    @property
    def capability_set(self) -> frozenset[Capability]:
        """Return the role's capabilities as enum members."""
        return frozenset(Capability(value) for value in self.capabilities or ())

    @capability_set.setter
    def capability_set(self, value: frozenset[Capability] | set[Capability]) -> None:
        self.capabilities = sorted(Capability(item).value for item in value)
