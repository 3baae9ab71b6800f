from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jelovnik.models.menu_item import MenuItem
from jelovnik.schemas.menu import MenuField, MenuItemSchema


class StoreError(Exception):
    """Transport/database failure of the record store, carried as a user-visible message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def _column(field: MenuField):
    return getattr(MenuItem, field.value)


def _where(match: dict[MenuField, Any]) -> list:
    return [_column(field) == value for field, value in match.items()]


def _values(patch: dict[MenuField, Any]) -> dict[str, Any]:
    return {field.value: value for field, value in patch.items() if field is not MenuField.EXTERNAL_ID}


class MenuItemRepository:
    """select / insert / update / delete over the jelovnik table, keyed by external_id."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def select(
        self,
        filters: Optional[dict[MenuField, Any]] = None,
        order_by: Optional[MenuField] = MenuField.COLLECTION_ORDER,
        descending: bool = False,
    ) -> list[MenuItemSchema]:
        stmt = select(MenuItem).where(*_where(filters or {}))
        if order_by is not None:
            column = _column(order_by)
            stmt = stmt.order_by(column.desc() if descending else column.asc(), MenuItem.id)
        try:
            r = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise StoreError(f"Greška pri dohvaćanju: {e}") from e
        return [MenuItemSchema.model_validate(row) for row in r.scalars().all()]

    async def get(self, external_id: str) -> MenuItemSchema | None:
        rows = await self.select({MenuField.EXTERNAL_ID: external_id}, order_by=None)
        return rows[0] if rows else None

    async def insert(self, rows: list[MenuItemSchema]) -> list[MenuItemSchema]:
        models = [MenuItem(**row.model_dump()) for row in rows]
        try:
            self.session.add_all(models)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise StoreError(f"Greška pri spremanju: {e}") from e
        return [MenuItemSchema.model_validate(m) for m in models]

    async def update(self, patch: dict[MenuField, Any], match: dict[MenuField, Any]) -> list[MenuItemSchema]:
        values = _values(patch)
        try:
            if values:
                await self.session.execute(
                    update(MenuItem).where(*_where(match)).values(**values).execution_options(synchronize_session="fetch")
                )
                await self.session.flush()
            r = await self.session.execute(select(MenuItem).where(*_where(match)))
            models = list(r.scalars().all())
            for model in models:
                await self.session.refresh(model)
        except SQLAlchemyError as e:
            raise StoreError(f"Greška pri spremanju: {e}") from e
        return [MenuItemSchema.model_validate(m) for m in models]

    async def update_batch(self, items: list[MenuItemSchema]) -> list[MenuItemSchema]:
        """Write every item by external_id; one logical operation for the caller."""
        updated: list[MenuItemSchema] = []
        for item in items:
            patch = {field: getattr(item, field.value) for field in MenuField}
            updated.extend(await self.update(patch, {MenuField.EXTERNAL_ID: item.external_id}))
        return updated

    async def delete(self, match: dict[MenuField, Any]) -> list[MenuItemSchema]:
        """Delete matching rows; returns the removed rows (for DELETE change events)."""
        removed = await self.select(match, order_by=None)
        try:
            await self.session.execute(delete(MenuItem).where(*_where(match)))
            await self.session.flush()
        except SQLAlchemyError as e:
            raise StoreError(f"Greška pri brisanju: {e}") from e
        return removed
