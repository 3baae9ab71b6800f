"""
Admin: list/search, create, update, delete menu items; stats; auto-translation (admin only).
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from jelovnik.core.auth import require_admin
from jelovnik.db import get_db
from jelovnik.models.user import User
from jelovnik.repositories.menu_repo import StoreError
from jelovnik.schemas.menu import AdminStats, MenuField, MenuItemCreate, MenuItemSchema, MenuItemUpdate
from jelovnik.services.menu_service import KNOWN_COLLECTIONS, MenuService, compute_stats, filter_items
from jelovnik.services.realtime import ChangeFeed, get_change_feed
from jelovnik.services.translation import is_translation_available, translate_menu_item

router = APIRouter(prefix="/admin", tags=["admin"])


def _store_failed(e: StoreError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)


@router.get("/items", response_model=list[MenuItemSchema])
async def list_items(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    sort_by: Optional[MenuField] = Query(None),
    descending: bool = Query(False),
    current_user: User = require_admin(),
    session: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
) -> list[MenuItemSchema]:
    try:
        items = await MenuService(session, feed).list_items()
    except StoreError as e:
        raise _store_failed(e)
    return filter_items(items, search=search, category=category, sort_by=sort_by, descending=descending)


@router.get("/stats", response_model=AdminStats)
async def get_stats(
    current_user: User = require_admin(),
    session: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
) -> AdminStats:
    try:
        items = await MenuService(session, feed).list_items()
    except StoreError as e:
        raise _store_failed(e)
    return compute_stats(items)


@router.get("/collections", response_model=list[str])
async def get_collections(current_user: User = require_admin()) -> list[str]:
    return KNOWN_COLLECTIONS


@router.post("/items", response_model=MenuItemSchema, status_code=status.HTTP_201_CREATED)
async def create_item(
    body: MenuItemCreate,
    current_user: User = require_admin(),
    session: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
) -> MenuItemSchema:
    try:
        item, err = await MenuService(session, feed).create_item(body)
    except StoreError as e:
        raise _store_failed(e)
    if err is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=err)
    return item


@router.patch("/items/{external_id}", response_model=MenuItemSchema)
async def update_item(
    external_id: str,
    body: MenuItemUpdate,
    current_user: User = require_admin(),
    session: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
) -> MenuItemSchema:
    try:
        item = await MenuService(session, feed).update_item(external_id, body)
    except StoreError as e:
        raise _store_failed(e)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    return item


@router.delete("/items/{external_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    external_id: str,
    current_user: User = require_admin(),
    session: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
) -> None:
    try:
        deleted = await MenuService(session, feed).delete_item(external_id)
    except StoreError as e:
        raise _store_failed(e)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")


@router.get("/translate/status")
async def translation_status(current_user: User = require_admin()) -> dict:
    return {"available": await is_translation_available()}


@router.post(
    "/translate",
    response_model=MenuItemSchema,
    summary="Auto-translate an item",
    description="Fills en/de/tr names and descriptions from the Croatian text. Nothing is saved.",
)
async def translate_item(
    body: MenuItemSchema,
    current_user: User = require_admin(),
) -> MenuItemSchema:
    return await translate_menu_item(body)
