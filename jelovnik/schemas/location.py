from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from jelovnik.models.location import WEEKDAYS


class DayHours(BaseModel):
    otvaranje: str = Field(pattern=r"^\d{2}:\d{2}$")
    zatvaranje: str = Field(pattern=r"^\d{2}:\d{2}$")


class DayHoursDisplay(BaseModel):
    day: str
    label: str
    opens: str
    closes: str


class LocationSchema(BaseModel):
    """GET /api/v1/locations — active locations with localised working hours."""

    id: int
    lokacija: str
    adresa: str
    aktivna: bool
    hours: list[DayHoursDisplay]


class LocationHoursUpdate(BaseModel):
    """PATCH /api/v1/admin/locations/{id} body."""

    radno_vrijeme: Optional[dict[str, DayHours]] = None
    aktivna: Optional[bool] = None
    apply_to_all_from: Optional[str] = None  # copy this day's hours to every day

    @field_validator("radno_vrijeme")
    @classmethod
    def known_days(cls, v: Optional[dict[str, DayHours]]) -> Optional[dict[str, DayHours]]:
        if v is not None:
            unknown = set(v) - set(WEEKDAYS)
            if unknown:
                raise ValueError(f"Unknown days: {sorted(unknown)}")
        return v

    @field_validator("apply_to_all_from")
    @classmethod
    def known_day(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in WEEKDAYS:
            raise ValueError(f"Unknown day: {v}")
        return v
