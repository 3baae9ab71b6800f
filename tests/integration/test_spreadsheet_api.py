"""
Integration tests for the XLSX round trip: export, preview, commit.
"""
import io
from decimal import Decimal

import pytest
from openpyxl import load_workbook
from sqlalchemy.ext.asyncio import AsyncSession

from jelovnik.repositories.menu_repo import MenuItemRepository
from jelovnik.services.realtime import ChangeType
from jelovnik.services.spreadsheet import NO_CHANGES_MESSAGE, SHEET_NAME, XLSX_MEDIA_TYPE

pytestmark = pytest.mark.asyncio


async def _export(client, auth_headers) -> bytes:
    r = await client.get("/api/v1/admin/spreadsheet/export", headers=auth_headers)
    assert r.status_code == 200
    return r.content


def _edit(content: bytes, external_id: str, column: int, value) -> bytes:
    """Set one cell (1-based column) in the row of external_id."""
    wb = load_workbook(io.BytesIO(content))
    ws = wb[SHEET_NAME]
    for row in ws.iter_rows(min_row=2):
        if row[0].value == external_id:
            row[column - 1].value = value
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def _upload(content: bytes) -> dict:
    return {"file": ("menu.xlsx", content, XLSX_MEDIA_TYPE)}


async def test_export_requires_admin(client):
    r = await client.get("/api/v1/admin/spreadsheet/export")
    assert r.status_code == 401


async def test_export(client, auth_headers, menu_items):
    r = await client.get("/api/v1/admin/spreadsheet/export", headers=auth_headers)
    assert r.status_code == 200
    assert r.headers["content-type"] == XLSX_MEDIA_TYPE
    assert 'filename="Ali-Kebaba-Menu-' in r.headers["content-disposition"]
    ws = load_workbook(io.BytesIO(r.content))[SHEET_NAME]
    assert ws.max_row == len(menu_items) + 1


async def test_preview_unchanged_export(client, auth_headers, menu_items):
    content = await _export(client, auth_headers)
    r = await client.post("/api/v1/admin/spreadsheet/preview", files=_upload(content), headers=auth_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["errors"] == []
    assert len(body["items"]) == len(menu_items)
    assert body["differences"] == []


async def test_preview_reports_difference(client, auth_headers, menu_items):
    content = _edit(await _export(client, auth_headers), "ayran", 4, "2,20 €")
    r = await client.post("/api/v1/admin/spreadsheet/preview", files=_upload(content), headers=auth_headers)
    (diff,) = r.json()["differences"]
    assert diff == {"external_id": "ayran", "changes": {"price": {"old": 2.0, "new": 2.2}}}


async def test_preview_reports_errors(client, auth_headers, menu_items):
    content = _edit(await _export(client, auth_headers), "ayran", 4, "-3")
    r = await client.post("/api/v1/admin/spreadsheet/preview", files=_upload(content), headers=auth_headers)
    body = r.json()
    assert body["differences"] == []
    (error,) = body["errors"]
    assert error["field"] == "Cijena (€)"
    assert error["row"] == 5


async def test_preview_shows_valid_changes_alongside_errors(client, auth_headers, menu_items):
    content = _edit(await _export(client, auth_headers), "ayran", 4, "2,20 €")
    content = _edit(content, "baklava", 4, "-3")
    r = await client.post("/api/v1/admin/spreadsheet/preview", files=_upload(content), headers=auth_headers)
    body = r.json()
    assert [e["row"] for e in body["errors"]] == [6]
    assert "baklava" not in [i["external_id"] for i in body["items"]]
    assert body["differences"] == [{"external_id": "ayran", "changes": {"price": {"old": 2.0, "new": 2.2}}}]


async def test_preview_bad_file(client, auth_headers, menu_items):
    r = await client.post(
        "/api/v1/admin/spreadsheet/preview", files=_upload(b"plain text"), headers=auth_headers
    )
    assert r.status_code == 200
    assert r.json()["errors"][0]["row"] == 0


async def test_commit_writes_changed_rows(client, auth_headers, menu_items, session: AsyncSession, feed):
    sub = feed.subscribe()
    content = _edit(await _export(client, auth_headers), "baklava", 5, "Baklava")
    r = await client.post("/api/v1/admin/spreadsheet/commit", files=_upload(content), headers=auth_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["committed"] is True
    assert [i["external_id"] for i in body["updated"]] == ["baklava"]

    stored = await MenuItemRepository(session).get("baklava")
    assert stored.product_name_en == "Baklava"
    assert stored.price == Decimal("3.00")
    event = await sub.get(timeout=1)
    assert event.event_type is ChangeType.UPDATE
    assert event.new["external_id"] == "baklava"
    assert event.new["product_name_en"] == "Baklava"
    assert event.old["external_id"] == "baklava"
    assert event.old["product_name_en"] is None
    assert sub.queue.empty()


async def test_commit_without_changes(client, auth_headers, menu_items):
    content = await _export(client, auth_headers)
    r = await client.post("/api/v1/admin/spreadsheet/commit", files=_upload(content), headers=auth_headers)
    assert r.status_code == 200
    assert r.json() == {"committed": False, "message": NO_CHANGES_MESSAGE, "updated": []}


async def test_commit_rejected_with_errors(client, auth_headers, menu_items, session: AsyncSession):
    content = _edit(await _export(client, auth_headers), "ayran", 4, "abc")
    content = _edit(content, "baklava", 4, 4.5)
    r = await client.post("/api/v1/admin/spreadsheet/commit", files=_upload(content), headers=auth_headers)
    assert r.status_code == 422
    detail = r.json()["detail"]
    assert detail["errors"][0]["field"] == "Cijena (€)"
    assert (await MenuItemRepository(session).get("baklava")).price == Decimal("3.00")
