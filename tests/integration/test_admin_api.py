"""
Integration tests for admin endpoints: auth guard, CRUD, search, stats, locations, translation.
Mutations are checked both in the store and on the change feed.
"""
import httpx
import pytest
import respx
from sqlalchemy.ext.asyncio import AsyncSession

from jelovnik.models.location import Location
from jelovnik.repositories.menu_repo import MenuItemRepository
from jelovnik.services.realtime import ChangeType

pytestmark = pytest.mark.asyncio


async def test_admin_requires_token(client):
    r = await client.get("/api/v1/admin/items")
    assert r.status_code == 401


async def test_admin_rejects_bad_token(client):
    r = await client.get("/api/v1/admin/items", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


async def test_list_items_ordered(client, auth_headers, menu_items):
    r = await client.get("/api/v1/admin/items", headers=auth_headers)
    assert r.status_code == 200
    assert [i["external_id"] for i in r.json()] == [i.external_id for i in menu_items]


async def test_list_items_search_and_sort(client, auth_headers, menu_items):
    r = await client.get("/api/v1/admin/items", params={"search": "kebab"}, headers=auth_headers)
    assert {i["external_id"] for i in r.json()} == {"classic-velika", "classic-mala", "classic-menu", "chicken"}

    r = await client.get(
        "/api/v1/admin/items",
        params={"sort_by": "price", "descending": "true"},
        headers=auth_headers,
    )
    assert [i["price"] for i in r.json()][:2] == [9.5, 7.5]


async def test_stats(client, auth_headers, menu_items):
    r = await client.get("/api/v1/admin/stats", headers=auth_headers)
    assert r.json() == {"total_items": 6, "categories_count": 5, "avg_price": 5.58}


async def test_collections(client, auth_headers):
    r = await client.get("/api/v1/admin/collections", headers=auth_headers)
    assert "CLASSIC KEBAB MENU" in r.json()


async def test_create_update_delete(client, auth_headers, session: AsyncSession, feed):
    sub = feed.subscribe()

    r = await client.post(
        "/api/v1/admin/items",
        json={"external_id": "new-1", "collection": "PRILOZI", "product_name": "Pomfrit", "price": 2.5},
        headers=auth_headers,
    )
    assert r.status_code == 201
    assert r.json()["price"] == 2.5
    assert (await sub.get(timeout=1)).event_type is ChangeType.INSERT

    r = await client.patch(
        "/api/v1/admin/items/new-1",
        json={"price": 3.0, "product_name_en": "Fries"},
        headers=auth_headers,
    )
    assert r.status_code == 200
    assert r.json()["product_name_en"] == "Fries"
    event = await sub.get(timeout=1)
    assert event.event_type is ChangeType.UPDATE
    assert event.old["price"] == 2.5
    assert event.new["price"] == 3.0

    r = await client.delete("/api/v1/admin/items/new-1", headers=auth_headers)
    assert r.status_code == 204
    assert (await sub.get(timeout=1)).event_type is ChangeType.DELETE
    assert await MenuItemRepository(session).get("new-1") is None


async def test_create_generates_id(client, auth_headers):
    r = await client.post(
        "/api/v1/admin/items",
        json={"collection": "NAPITCI", "product_name": "Sok"},
        headers=auth_headers,
    )
    assert r.status_code == 201
    assert r.json()["external_id"]


async def test_create_and_update_trim_text(client, auth_headers):
    r = await client.post(
        "/api/v1/admin/items",
        json={"external_id": "trim-1", "collection": " NAPITCI ", "product_name": "  Sok "},
        headers=auth_headers,
    )
    assert r.status_code == 201
    assert (r.json()["collection"], r.json()["product_name"]) == ("NAPITCI", "Sok")

    r = await client.patch("/api/v1/admin/items/trim-1", json={"product_name_en": " Juice "}, headers=auth_headers)
    assert r.json()["product_name_en"] == "Juice"


async def test_create_duplicate_id(client, auth_headers, menu_items):
    r = await client.post(
        "/api/v1/admin/items",
        json={"external_id": "ayran", "collection": "NAPITCI", "product_name": "Ayran"},
        headers=auth_headers,
    )
    assert r.status_code == 409


async def test_create_negative_price_rejected(client, auth_headers):
    r = await client.post(
        "/api/v1/admin/items",
        json={"collection": "NAPITCI", "product_name": "Sok", "price": -1},
        headers=auth_headers,
    )
    assert r.status_code == 422


async def test_update_and_delete_missing(client, auth_headers):
    r = await client.patch("/api/v1/admin/items/nope", json={"price": 1}, headers=auth_headers)
    assert r.status_code == 404
    r = await client.delete("/api/v1/admin/items/nope", headers=auth_headers)
    assert r.status_code == 404


async def test_update_location(client, auth_headers, session: AsyncSession):
    location = Location(lokacija="Centar", adresa="Ilica 1", aktivna=False, radno_vrijeme=None)
    session.add(location)
    await session.commit()

    r = await client.patch(
        f"/api/v1/admin/locations/{location.id}",
        json={"aktivna": True, "radno_vrijeme": {"nedjelja": {"otvaranje": "12:00", "zatvaranje": "22:00"}}},
        headers=auth_headers,
    )
    assert r.status_code == 200
    body = r.json()
    assert body["aktivna"] is True
    assert body["hours"][-1] == {"day": "nedjelja", "label": "Nedjelja", "opens": "12h", "closes": "22h"}

    r = await client.get("/api/v1/locations")
    assert [loc["lokacija"] for loc in r.json()] == ["Centar"]


async def test_update_missing_location(client, auth_headers):
    r = await client.patch("/api/v1/admin/locations/999", json={"aktivna": True}, headers=auth_headers)
    assert r.status_code == 404


@respx.mock
async def test_translate_item(client, auth_headers, make_item):
    respx.post("https://api.cognitive.microsofttranslator.com/translate").mock(
        return_value=httpx.Response(200, json=[{"translations": [{"text": "Fries", "to": "en"}]}])
    )
    item = make_item("x", product_name="Pomfrit", collection="PRILOZI")
    r = await client.post("/api/v1/admin/translate", json=item.model_dump(mode="json"), headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["product_name_en"] == "Fries"
