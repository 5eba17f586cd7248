"""Tests for app construction and the store lifecycle."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from afterschool.exceptions import StartupError
from afterschool.server.app import create_app, lifespan
from afterschool.server.config import Settings
from afterschool.service import BookingService
from afterschool.store.memory import MemoryStore


def test_injected_store_is_bound_immediately():
    store = MemoryStore()
    app = create_app(store=store)
    assert app.state.store is store
    assert isinstance(app.state.service, BookingService)


@pytest.mark.asyncio
async def test_lifespan_connects_and_closes_store():
    store = MemoryStore()
    store.close = AsyncMock()
    app = create_app(settings=Settings(mongodb_uri="mongodb://db:27017", db_name="t"))

    with patch(
        "afterschool.store.mongo.MongoStore.connect", new=AsyncMock(return_value=store)
    ) as connect:
        async with lifespan(app):
            assert app.state.store is store
            assert app.state.service is not None

    connect.assert_awaited_once_with("mongodb://db:27017", "t", 5000)
    store.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_lifespan_fails_when_store_unreachable():
    app = create_app()
    with patch(
        "afterschool.store.mongo.MongoStore.connect",
        new=AsyncMock(side_effect=StartupError("Cannot connect to MongoDB")),
    ):
        with pytest.raises(StartupError):
            async with lifespan(app):
                pass
    assert app.state.store is None


@pytest.mark.asyncio
async def test_lifespan_keeps_injected_store():
    store = MemoryStore()
    app = create_app(store=store)
    with patch("afterschool.store.mongo.MongoStore.connect", new=AsyncMock()) as connect:
        async with lifespan(app):
            pass
    connect.assert_not_awaited()
    assert app.state.store is store
