"""
Unit tests: working hours defaults, formatting and edits.
"""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import ValidationError

from jelovnik.models.location import DEFAULT_HOURS, WEEKDAYS, Location
from jelovnik.schemas.location import DayHours, LocationHoursUpdate
from jelovnik.services.location_service import (
    apply_to_all_days,
    effective_hours,
    format_time,
    to_schema,
    update_location_hours,
)


def test_format_time():
    assert format_time("09:00") == "09h"
    assert format_time("24:00") == "24h"
    assert format_time("09:30") == "09:30"


def test_effective_hours_fills_missing_days():
    hours = effective_hours({"petak": {"otvaranje": "08:00", "zatvaranje": "02:00"}})
    assert hours["petak"] == {"otvaranje": "08:00", "zatvaranje": "02:00"}
    assert hours["subota"] == DEFAULT_HOURS["subota"]
    assert effective_hours(None) == DEFAULT_HOURS


def test_apply_to_all_days():
    hours = apply_to_all_days(effective_hours(None), "subota")
    assert all(hours[d] == {"otvaranje": "10:00", "zatvaranje": "24:00"} for d in WEEKDAYS)


def test_to_schema_localised():
    location = Location(id=1, lokacija="Centar", adresa="Ilica 1", aktivna=True, radno_vrijeme=None)
    schema = to_schema(location, "en")
    assert [h.label for h in schema.hours][:2] == ["Monday", "Tuesday"]
    assert (schema.hours[0].opens, schema.hours[0].closes) == ("09h", "24h")


def test_update_rejects_unknown_day():
    with pytest.raises(ValidationError):
        LocationHoursUpdate(radno_vrijeme={"funday": {"otvaranje": "09:00", "zatvaranje": "17:00"}})
    with pytest.raises(ValidationError):
        DayHours(otvaranje="9", zatvaranje="17:00")


@pytest.mark.asyncio
async def test_update_location_hours():
    location = Location(id=1, lokacija="Centar", adresa="Ilica 1", aktivna=False, radno_vrijeme=None)
    session = MagicMock()
    session.flush = AsyncMock()
    body = LocationHoursUpdate(
        radno_vrijeme={"ponedjeljak": {"otvaranje": "08:00", "zatvaranje": "22:00"}},
        apply_to_all_from="ponedjeljak",
        aktivna=True,
    )
    with patch("jelovnik.services.location_service.LocationRepository") as MockRepo:
        MockRepo.return_value.get_by_id = AsyncMock(return_value=location)
        updated = await update_location_hours(session, 1, body)

    assert updated is location
    assert location.aktivna is True
    assert location.radno_vrijeme["nedjelja"] == {"otvaranje": "08:00", "zatvaranje": "22:00"}
    session.flush.assert_awaited_once()
