from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jelovnik.models.location import Location


class LocationRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_active(self) -> list[Location]:
        r = await self.session.execute(
            select(Location).where(Location.aktivna.is_(True)).order_by(Location.id.desc())
        )
        return list(r.scalars().all())

    async def get_all(self) -> list[Location]:
        r = await self.session.execute(select(Location).order_by(Location.id))
        return list(r.scalars().all())

    async def get_by_id(self, location_id: int) -> Location | None:
        r = await self.session.execute(select(Location).where(Location.id == location_id))
        return r.scalar_one_or_none()
