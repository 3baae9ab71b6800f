"""
GET /api/v1/locations — active restaurant locations with working hours (public footer).
PATCH /api/v1/admin/locations/{id} — edit hours / active flag (admin only).
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from jelovnik.core.auth import require_admin
from jelovnik.db import get_db
from jelovnik.i18n import SOURCE_LANGUAGE, normalize_language
from jelovnik.models.user import User
from jelovnik.repositories.location_repo import LocationRepository
from jelovnik.schemas.location import LocationHoursUpdate, LocationSchema
from jelovnik.services.location_service import to_schema, update_location_hours

router = APIRouter(tags=["locations"])


@router.get("/locations", response_model=list[LocationSchema])
async def list_locations(
    lang: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_db),
) -> list[LocationSchema]:
    language = normalize_language(lang)
    locations = await LocationRepository(session).get_active()
    return [to_schema(loc, language) for loc in locations]


@router.get("/admin/locations", response_model=list[LocationSchema])
async def list_all_locations(
    current_user: User = require_admin(),
    session: AsyncSession = Depends(get_db),
) -> list[LocationSchema]:
    locations = await LocationRepository(session).get_all()
    return [to_schema(loc, SOURCE_LANGUAGE) for loc in locations]


@router.patch("/admin/locations/{location_id}", response_model=LocationSchema)
async def update_location(
    location_id: int,
    body: LocationHoursUpdate,
    current_user: User = require_admin(),
    session: AsyncSession = Depends(get_db),
) -> LocationSchema:
    location = await update_location_hours(session, location_id, body)
    if location is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    return to_schema(location, SOURCE_LANGUAGE)
