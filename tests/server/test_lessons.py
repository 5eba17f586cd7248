"""Tests for lesson listing, search and spaces-update endpoints."""

from __future__ import annotations

from typing import List

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

from afterschool.exceptions import DocumentStoreError
from afterschool.server.app import create_app
from afterschool.store.memory import MemoryStore

# ── Fixtures ───────────────────────────────────────────────────────

LESSONS = [
    {"subject": "Math", "location": "London", "price": 100, "spaces": 5, "icon": "fa-calculator"},
    {"subject": "English", "location": "York", "price": 100, "spaces": 55, "icon": "fa-book"},
    {"subject": "Science", "location": "Oxford", "price": 150, "spaces": 55, "icon": "fa-flask"},
    {"subject": "Art", "location": "Manchester", "price": 75, "spaces": 0, "icon": "fa-palette"},
]


class BrokenStore(MemoryStore):
    async def find_all(self, collection, where=None):
        raise DocumentStoreError("socket closed")

    async def update_one(self, collection, document_id, changes):
        raise DocumentStoreError("socket closed")


@pytest_asyncio.fixture
async def store() -> MemoryStore:
    s = MemoryStore()
    await s.insert_many("lessons", LESSONS)
    return s


@pytest_asyncio.fixture
async def client(store):
    transport = ASGITransport(app=create_app(store=store))
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def broken_client():
    transport = ASGITransport(app=create_app(store=BrokenStore()))
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def _ids(store: MemoryStore) -> List[str]:
    return [str(d["_id"]) for d in await store.find_all("lessons")]


def _subjects(resp) -> List[str]:
    return sorted(l["subject"] for l in resp.json())


# ── List ───────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_list_lessons_returns_all(client, store):
    resp = await client.get("/lessons")
    assert resp.status_code == 200
    data = resp.json()
    assert len(data) == len(LESSONS)
    assert {l["_id"] for l in data} == set(await _ids(store))


@pytest.mark.asyncio
async def test_list_lessons_shape(client):
    resp = await client.get("/lessons")
    lesson = resp.json()[0]
    assert set(lesson) == {"_id", "subject", "location", "price", "spaces", "icon"}
    assert lesson["price"] == 100
    assert isinstance(lesson["price"], int)


@pytest.mark.asyncio
async def test_list_lessons_empty():
    transport = ASGITransport(app=create_app(store=MemoryStore()))
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        resp = await c.get("/lessons")
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.asyncio
async def test_list_lessons_store_failure(broken_client):
    resp = await broken_client.get("/lessons")
    assert resp.status_code == 500
    body = resp.json()
    assert body["error"] == "Failed to fetch lessons"
    assert "socket closed" not in body["message"]


# ── Search ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_search_without_query_lists_all(client):
    resp = await client.get("/search")
    assert resp.status_code == 200
    assert len(resp.json()) == len(LESSONS)


@pytest.mark.asyncio
async def test_search_empty_query_lists_all(client):
    resp = await client.get("/search", params={"q": ""})
    assert len(resp.json()) == len(LESSONS)


@pytest.mark.asyncio
async def test_search_subject_case_insensitive(client):
    resp = await client.get("/search", params={"q": "math"})
    assert resp.status_code == 200
    assert _subjects(resp) == ["Math"]


@pytest.mark.asyncio
async def test_search_location(client):
    resp = await client.get("/search", params={"q": "YORK"})
    assert _subjects(resp) == ["English"]


@pytest.mark.asyncio
async def test_search_spaces_exact_and_price_text(client):
    # Math has 5 spaces; Art and Science match through their prices.
    # English (55 spaces, price 100) is not a match.
    resp = await client.get("/search", params={"q": "5"})
    assert _subjects(resp) == ["Art", "Math", "Science"]


@pytest.mark.asyncio
@pytest.mark.parametrize("q", ["5abc", "5.0"])
async def test_search_spaces_uses_leading_integer(client, q):
    resp = await client.get("/search", params={"q": q})
    assert resp.status_code == 200
    assert _subjects(resp) == ["Math"]


@pytest.mark.asyncio
async def test_search_zero_spaces(client):
    resp = await client.get("/search", params={"q": "0"})
    # "0" also appears in the prices 100 and 150.
    assert _subjects(resp) == ["Art", "English", "Math", "Science"]


@pytest.mark.asyncio
async def test_search_no_match(client):
    resp = await client.get("/search", params={"q": "piano"})
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.asyncio
async def test_search_regex_characters_are_literal(client):
    resp = await client.get("/search", params={"q": "("})
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.asyncio
async def test_search_store_failure(broken_client):
    resp = await broken_client.get("/search", params={"q": "math"})
    assert resp.status_code == 500
    assert resp.json()["error"] == "Search failed"


# ── Update ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_update_spaces(client, store):
    lesson_id = (await _ids(store))[0]
    resp = await client.put(f"/lessons/{lesson_id}", json={"spaces": 3})
    assert resp.status_code == 200
    assert resp.json() == {"message": "Lesson updated successfully", "modifiedCount": 1}
    assert store.get("lessons", lesson_id)["spaces"] == 3


@pytest.mark.asyncio
async def test_update_spaces_to_zero(client, store):
    lesson_id = (await _ids(store))[0]
    resp = await client.put(f"/lessons/{lesson_id}", json={"spaces": 0})
    assert resp.status_code == 200
    assert store.get("lessons", lesson_id)["spaces"] == 0


@pytest.mark.asyncio
async def test_update_spaces_unchanged_value(client, store):
    lesson_id = (await _ids(store))[0]
    resp = await client.put(f"/lessons/{lesson_id}", json={"spaces": 5})
    assert resp.status_code == 200
    assert resp.json()["modifiedCount"] == 0


@pytest.mark.asyncio
async def test_update_spaces_negative(client, store):
    lesson_id = (await _ids(store))[0]
    resp = await client.put(f"/lessons/{lesson_id}", json={"spaces": -1})
    assert resp.status_code == 400
    assert resp.json() == {
        "error": "Invalid spaces value",
        "message": "Spaces must be a non-negative number",
    }
    assert store.get("lessons", lesson_id)["spaces"] == 5


@pytest.mark.asyncio
async def test_update_spaces_beyond_int64(client, store):
    lesson_id = (await _ids(store))[0]
    resp = await client.put(f"/lessons/{lesson_id}", json={"spaces": 10 ** 20})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid spaces value"
    assert store.get("lessons", lesson_id)["spaces"] == 5


@pytest.mark.asyncio
async def test_update_spaces_missing(client, store):
    lesson_id = (await _ids(store))[0]
    resp = await client.put(f"/lessons/{lesson_id}", json={})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid spaces value"


@pytest.mark.asyncio
async def test_update_spaces_no_body(client, store):
    lesson_id = (await _ids(store))[0]
    resp = await client.put(f"/lessons/{lesson_id}")
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_update_spaces_null(client, store):
    lesson_id = (await _ids(store))[0]
    resp = await client.put(f"/lessons/{lesson_id}", json={"spaces": None})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_update_spaces_not_found(client):
    resp = await client.put(f"/lessons/{ObjectId()}", json={"spaces": 1})
    assert resp.status_code == 404
    assert resp.json()["error"] == "Lesson not found"


@pytest.mark.asyncio
async def test_update_spaces_malformed_id(client):
    resp = await client.put("/lessons/not-an-id", json={"spaces": 1})
    assert resp.status_code == 500
    assert resp.json()["error"] == "Failed to update lesson"


@pytest.mark.asyncio
async def test_update_spaces_store_failure(broken_client):
    resp = await broken_client.put(f"/lessons/{ObjectId()}", json={"spaces": 1})
    assert resp.status_code == 500
    assert resp.json()["error"] == "Failed to update lesson"


@pytest.mark.asyncio
async def test_update_spaces_malformed_json(client, store):
    lesson_id = (await _ids(store))[0]
    resp = await client.put(
        f"/lessons/{lesson_id}",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "malformed_json"
