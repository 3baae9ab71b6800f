"""
GET /api/v1/menu/tabs and GET /api/v1/menu/{tab} — public menu, consolidated per tab.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from jelovnik.db import get_db
from jelovnik.i18n import normalize_language
from jelovnik.repositories.menu_repo import MenuItemRepository, StoreError
from jelovnik.schemas.menu import MenuTabResponse, TabSchema
from jelovnik.services.menu_service import TAB_IDS, build_tab, list_tabs

router = APIRouter(prefix="/menu", tags=["menu"])


@router.get(
    "/tabs",
    response_model=list[TabSchema],
    summary="List menu tabs",
)
async def get_tabs(lang: Optional[str] = Query(None)) -> list[TabSchema]:
    return list_tabs(normalize_language(lang))


@router.get(
    "/{tab}",
    response_model=MenuTabResponse,
    summary="Get one menu tab",
    description="Rows of the tab ordered by collection_order, split into standard and MENU groups; "
    "size variants of one product are merged into one card (Large first).",
)
async def get_tab(
    tab: str,
    lang: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_db),
) -> MenuTabResponse:
    if tab not in TAB_IDS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tab not found")
    try:
        items = await MenuItemRepository(session).select()
    except StoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    return build_tab(items, tab, normalize_language(lang))
