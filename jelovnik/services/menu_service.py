"""
Menu use cases: public tabs, admin listing/stats, and store mutations.
Every mutation is committed before its change event is published, so subscribers
never see a row that was rolled back.
"""
from __future__ import annotations

import logging
import uuid
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from jelovnik.i18n import t
from jelovnik.repositories.menu_repo import MenuItemRepository
from jelovnik.schemas.menu import (
    AdminStats,
    ConsolidatedItemSchema,
    MenuField,
    MenuItemCreate,
    MenuItemSchema,
    MenuItemUpdate,
    MenuTabResponse,
    SizeOptionSchema,
    TabSchema,
    TypeGroupSchema,
)
from jelovnik.services.consolidation import ConsolidatedItem, consolidate_tab, display_description
from jelovnik.services.realtime import ChangeEvent, ChangeFeed

logger = logging.getLogger(__name__)

# Public tab id -> label key (translated through i18n.t)
TABS: list[tuple[str, str]] = [
    ("steak", "STEAK"),
    ("classic", "CLASSIC"),
    ("chicken", "CHICKEN"),
    ("mix", "MIX"),
    ("nuggets", "NUGGETS"),
    ("vege", "VEGE"),
    ("prilozi", "PRILOZI"),
    ("desert", "DESERT"),
    ("napitci", "NAPITCI"),
]
TAB_IDS = {tab_id for tab_id, _ in TABS}

# Collection prefix -> tab; "X MENU" collections land on the same tab as "X".
COLLECTION_TABS: list[tuple[str, str]] = [
    ("STEAK KEBAB", "steak"),
    ("CLASSIC KEBAB", "classic"),
    ("CHICKEN KEBAB", "chicken"),
    ("MIX KEBAB", "mix"),
    ("NUGGETS", "nuggets"),
    ("FALAFEL", "vege"),
    ("MOZZARELLA", "vege"),
    ("PRILOZI", "prilozi"),
    ("NAPITCI", "napitci"),
    ("SLASTICE", "desert"),
    ("DESERT", "desert"),
]

KNOWN_COLLECTIONS = [
    "CLASSIC KEBAB",
    "CLASSIC KEBAB MENU",
    "CHICKEN KEBAB",
    "CHICKEN KEBAB MENU",
    "STEAK KEBAB",
    "STEAK KEBAB MENU",
    "MIX KEBAB",
    "MIX KEBAB MENU",
    "NUGGETS",
    "NUGGETS MENU",
    "FALAFEL",
    "MOZZARELLA",
    "PRILOZI",
    "NAPITCI",
    "DESERT",
]

NOT_NULL_FIELDS = frozenset(
    {MenuField.COLLECTION, MenuField.PRODUCT_NAME, MenuField.PRICE, MenuField.COLLECTION_ORDER}
)

SEARCH_FIELDS = (
    MenuField.PRODUCT_NAME,
    MenuField.DESCRIPTION_HR,
    MenuField.DESCRIPTION_EN,
    MenuField.DESCRIPTION_DE,
    MenuField.COLLECTION,
)


def tab_for_collection(collection: str) -> Optional[str]:
    for prefix, tab in COLLECTION_TABS:
        if collection.startswith(prefix):
            return tab
    return None


def group_by_tab(items: Iterable[MenuItemSchema]) -> dict[str, list[MenuItemSchema]]:
    """Rows whose collection maps to no tab are not shown on the public menu."""
    grouped: dict[str, list[MenuItemSchema]] = {}
    for item in items:
        tab = tab_for_collection(item.collection)
        if tab is not None:
            grouped.setdefault(tab, []).append(item)
    return grouped


def list_tabs(lang: str) -> list[TabSchema]:
    return [TabSchema(id=tab_id, label=t(key, lang)) for tab_id, key in TABS]


def _card(item: ConsolidatedItem, lang: str) -> ConsolidatedItemSchema:
    return ConsolidatedItemSchema(
        external_id=item.base_item.external_id,
        name=item.name,
        description=display_description(item.base_item, lang),
        image=item.base_item.image,
        show_size_labels=item.show_size_labels,
        sizes=[
            SizeOptionSchema(size=s.size.value, label=t(s.size.value, lang), price=s.price, external_id=s.external_id)
            for s in item.sizes
        ],
    )


def build_tab(items: Iterable[MenuItemSchema], tab: str, lang: str) -> MenuTabResponse:
    rows = group_by_tab(items).get(tab, [])
    grouped = consolidate_tab(rows, lang)
    label_key = dict(TABS)[tab]
    return MenuTabResponse(
        tab=tab,
        title=t(label_key, lang),
        language=lang,
        standard=[
            TypeGroupSchema(type=label, items=[_card(c, lang) for c in cards])
            for label, cards in grouped.standard.items()
        ],
        combo=[
            TypeGroupSchema(type=label, items=[_card(c, lang) for c in cards])
            for label, cards in grouped.combo.items()
        ],
    )


def _sort_key(value):
    # None sorts before any value so optional columns stay comparable
    return (value is not None, value if value is not None else "")


def filter_items(
    items: Iterable[MenuItemSchema],
    search: Optional[str] = None,
    category: Optional[str] = None,
    sort_by: Optional[MenuField] = None,
    descending: bool = False,
) -> list[MenuItemSchema]:
    result = list(items)
    if search:
        term = search.lower()
        result = [
            item for item in result
            if any(term in (getattr(item, f.value) or "").lower() for f in SEARCH_FIELDS)
        ]
    if category:
        result = [item for item in result if item.collection == category]
    if sort_by is not None:
        result.sort(key=lambda item: _sort_key(getattr(item, sort_by.value)), reverse=descending)
    return result


def compute_stats(items: list[MenuItemSchema]) -> AdminStats:
    total = len(items)
    categories = len({item.collection for item in items})
    avg = sum((item.price for item in items), Decimal(0)) / total if total else Decimal(0)
    return AdminStats(
        total_items=total,
        categories_count=categories,
        avg_price=avg.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP),
    )


class MenuService:
    def __init__(self, session: AsyncSession, feed: ChangeFeed) -> None:
        self.session = session
        self.feed = feed
        self.repo = MenuItemRepository(session)

    async def list_items(self) -> list[MenuItemSchema]:
        return await self.repo.select()

    async def get_item(self, external_id: str) -> MenuItemSchema | None:
        return await self.repo.get(external_id)

    async def create_item(self, body: MenuItemCreate) -> tuple[Optional[MenuItemSchema], Optional[str]]:
        """Returns (item, error_message); error when the external_id is already taken."""
        data = body.model_dump()
        data["external_id"] = body.external_id or str(uuid.uuid4())
        if await self.repo.get(data["external_id"]) is not None:
            return None, f'Artikl s ID-om "{data["external_id"]}" već postoji'
        (created,) = await self.repo.insert([MenuItemSchema(**data)])
        await self.session.commit()
        self.feed.publish(ChangeEvent.inserted(created))
        logger.info("menu_item_created", extra={"external_id": created.external_id})
        return created, None

    async def update_item(self, external_id: str, body: MenuItemUpdate) -> MenuItemSchema | None:
        old = await self.repo.get(external_id)
        if old is None:
            return None
        patch = {
            MenuField(key): value
            for key, value in body.model_dump(exclude_unset=True).items()
            if value is not None or MenuField(key) not in NOT_NULL_FIELDS
        }
        (updated,) = await self.repo.update(patch, {MenuField.EXTERNAL_ID: external_id})
        await self.session.commit()
        self.feed.publish(ChangeEvent.updated(updated, old))
        logger.info("menu_item_updated", extra={"external_id": external_id, "changed_count": len(patch)})
        return updated

    async def delete_item(self, external_id: str) -> bool:
        removed = await self.repo.delete({MenuField.EXTERNAL_ID: external_id})
        if not removed:
            return False
        await self.session.commit()
        self.feed.publish_all(ChangeEvent.deleted(item) for item in removed)
        logger.info("menu_item_deleted", extra={"external_id": external_id})
        return True

    async def update_batch(
        self,
        items: list[MenuItemSchema],
        previous: Optional[Iterable[MenuItemSchema]] = None,
    ) -> list[MenuItemSchema]:
        """Spreadsheet commit: one transaction, then one UPDATE event per row.

        previous holds the rows as they were before the import; they become the events' old payload.
        """
        old_by_id = {item.external_id: item for item in previous or ()}
        try:
            updated = await self.repo.update_batch(items)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        self.feed.publish_all(ChangeEvent.updated(item, old_by_id.get(item.external_id)) for item in updated)
        return updated
