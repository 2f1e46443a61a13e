# src/crew_deck/schemas/karma.py
"""Karma Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class KarmaResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    principal: str
    external_karma: int
    unique_stations_helped: int
    promotion_boost: float
    updated_at: datetime | None = None


class StationKarmaResponse(BaseModel):
    """Karma earned inside one station."""

    model_config = ConfigDict(from_attributes=True)

    station_id: int
    station_slug: str
    station_name: str
    karma: int
