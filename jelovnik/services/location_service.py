"""
Locations and working hours (table lokacije).
Missing or partial schedules fall back to DEFAULT_HOURS day by day.
"""
from __future__ import annotations

import copy
import re
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from jelovnik.i18n import t
from jelovnik.models.location import DEFAULT_HOURS, WEEKDAYS, Location
from jelovnik.repositories.location_repo import LocationRepository
from jelovnik.schemas.location import DayHoursDisplay, LocationHoursUpdate, LocationSchema


def format_time(value: str) -> str:
    """'09:00' -> '09h'; times with minutes are left as they are."""
    return re.sub(r":00$", "h", value)


def effective_hours(radno_vrijeme: Optional[dict]) -> dict[str, dict[str, str]]:
    hours = copy.deepcopy(DEFAULT_HOURS)
    for day, value in (radno_vrijeme or {}).items():
        if day in hours:
            hours[day] = dict(value)
    return hours


def apply_to_all_days(hours: dict[str, dict[str, str]], day: str) -> dict[str, dict[str, str]]:
    return {d: dict(hours[day]) for d in WEEKDAYS}


def to_schema(location: Location, lang: str) -> LocationSchema:
    hours = effective_hours(location.radno_vrijeme)
    return LocationSchema(
        id=location.id,
        lokacija=location.lokacija,
        adresa=location.adresa,
        aktivna=location.aktivna,
        hours=[
            DayHoursDisplay(
                day=day,
                label=t(day, lang),
                opens=format_time(hours[day]["otvaranje"]),
                closes=format_time(hours[day]["zatvaranje"]),
            )
            for day in WEEKDAYS
        ],
    )


async def update_location_hours(
    session: AsyncSession,
    location_id: int,
    body: LocationHoursUpdate,
) -> Optional[Location]:
    repo = LocationRepository(session)
    location = await repo.get_by_id(location_id)
    if location is None:
        return None
    hours = effective_hours(location.radno_vrijeme)
    if body.radno_vrijeme is not None:
        hours.update({day: value.model_dump() for day, value in body.radno_vrijeme.items()})
    if body.apply_to_all_from is not None:
        hours = apply_to_all_days(hours, body.apply_to_all_from)
    location.radno_vrijeme = hours
    if body.aktivna is not None:
        location.aktivna = body.aktivna
    await session.flush()
    return location
