from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from jelovnik.db import Base

# Day keys as stored in radno_vrijeme; values are {"otvaranje": "HH:MM", "zatvaranje": "HH:MM"}
WEEKDAYS = ("ponedjeljak", "utorak", "srijeda", "cetvrtak", "petak", "subota", "nedjelja")

DEFAULT_HOURS: dict[str, dict[str, str]] = {
    "ponedjeljak": {"otvaranje": "09:00", "zatvaranje": "24:00"},
    "utorak": {"otvaranje": "09:00", "zatvaranje": "24:00"},
    "srijeda": {"otvaranje": "09:00", "zatvaranje": "24:00"},
    "cetvrtak": {"otvaranje": "09:00", "zatvaranje": "24:00"},
    "petak": {"otvaranje": "09:00", "zatvaranje": "24:00"},
    "subota": {"otvaranje": "10:00", "zatvaranje": "24:00"},
    "nedjelja": {"otvaranje": "10:00", "zatvaranje": "24:00"},
}


class Location(Base):
    __tablename__ = "lokacije"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lokacija: Mapped[str] = mapped_column(String(255), nullable=False)
    adresa: Mapped[str] = mapped_column(String(255), nullable=False)
    aktivna: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    radno_vrijeme: Mapped[Optional[dict]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
