"""
Admin spreadsheet round trip: export the menu as XLSX, preview an edited file, commit it.
Preview and commit both re-read the current rows, so the diff is always against the store.
"""
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from jelovnik.core.auth import require_admin
from jelovnik.db import get_db
from jelovnik.models.user import User
from jelovnik.repositories.menu_repo import StoreError
from jelovnik.schemas.spreadsheet import CommitResponse, ImportPreviewResponse, RowErrorSchema
from jelovnik.services.menu_service import MenuService
from jelovnik.services.realtime import ChangeFeed, get_change_feed
from jelovnik.services.spreadsheet import (
    XLSX_MEDIA_TYPE,
    CommitRejected,
    SpreadsheetExportError,
    commit_import,
    compute_differences,
    export_filename,
    export_workbook,
    parse_workbook,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/spreadsheet", tags=["spreadsheet"])


@router.get(
    "/export",
    summary="Download the menu as XLSX",
    response_class=Response,
    responses={200: {"content": {XLSX_MEDIA_TYPE: {}}}},
)
async def export_menu(
    current_user: User = require_admin(),
    session: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
) -> Response:
    try:
        items = await MenuService(session, feed).list_items()
        content = export_workbook(items)
    except StoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    except SpreadsheetExportError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    filename = export_filename()
    logger.info("spreadsheet_export", extra={"changed_count": len(items)})
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "/preview",
    response_model=ImportPreviewResponse,
    summary="Validate an edited XLSX",
    description="Row errors (1-based data rows, row 0 for file-level problems) and per-item field "
    "differences against the current menu. Nothing is written.",
)
async def preview_import(
    file: UploadFile = File(...),
    current_user: User = require_admin(),
    session: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
) -> ImportPreviewResponse:
    content = await file.read()
    try:
        baseline = await MenuService(session, feed).list_items()
    except StoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    result = parse_workbook(content, baseline)
    differences = compute_differences(baseline, result.items)
    return ImportPreviewResponse.build(result, differences)


@router.post(
    "/commit",
    response_model=CommitResponse,
    summary="Write an edited XLSX",
    description="Only items with at least one changed field are written, in one batch. "
    "Rejected with 422 while the file has row errors.",
)
async def commit_spreadsheet(
    file: UploadFile = File(...),
    current_user: User = require_admin(),
    session: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
) -> CommitResponse:
    content = await file.read()
    service = MenuService(session, feed)
    try:
        baseline = await service.list_items()
    except StoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    result = parse_workbook(content, baseline)
    differences = compute_differences(baseline, result.items)
    try:
        committed = await commit_import(
            result, differences, lambda items: service.update_batch(items, previous=baseline)
        )
    except CommitRejected as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "message": e.message,
                "errors": [RowErrorSchema.from_error(err).model_dump() for err in e.errors],
            },
        )
    except StoreError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    return CommitResponse.from_result(committed)
