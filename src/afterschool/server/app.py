"""FastAPI application for the after-school lessons API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from afterschool import __version__
from afterschool.server.config import Settings, settings as default_settings
from afterschool.server.logging_config import setup_logging
from afterschool.server.middleware import install_middleware
from afterschool.server.routes.images import router as images_router
from afterschool.server.routes.lessons import router as lessons_router
from afterschool.server.routes.meta import router as meta_router
from afterschool.server.routes.orders import router as orders_router
from afterschool.service import BookingService
from afterschool.store.base import DocumentStore

setup_logging()
logger = logging.getLogger(__name__)


def _bind_store(app: FastAPI, store: DocumentStore) -> None:
    app.state.store = store
    app.state.service = BookingService(store)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Connect the document store once; a failure aborts startup."""
    if app.state.store is not None:
        yield
        return

    from afterschool.store.mongo import MongoStore

    cfg: Settings = app.state.settings
    store = await MongoStore.connect(cfg.mongodb_uri, cfg.db_name, cfg.mongo_timeout_ms)
    _bind_store(app, store)
    try:
        yield
    finally:
        await store.close()


def create_app(
    store: Optional[DocumentStore] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the app. Without ``store``, MongoDB is connected at startup."""
    app = FastAPI(
        title="After-School Lessons API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings or default_settings
    app.state.store = None
    app.state.service = None
    if store is not None:
        _bind_store(app, store)

    app.include_router(meta_router)
    app.include_router(lessons_router)
    app.include_router(orders_router)
    app.include_router(images_router)

    install_middleware(app, app.state.settings.cors_origins)
    return app


app = create_app()
