"""API description, health and readiness endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from afterschool.server.models import HealthResponse
from afterschool.store.base import LESSONS, ORDERS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["meta"])

ENDPOINTS = {
    "GET /lessons": "Retrieve all lessons from database",
    "GET /search?q={query}": "Search lessons by subject, location, price, or spaces",
    "POST /orders": "Create new order (requires: name, phone, lessonIds, spaces)",
    "PUT /lessons/:id": "Update lesson spaces to specific value",
    "GET /images/*": "Serve lesson images from static directory",
}


@router.get("/")
async def describe_api(request: Request) -> dict:
    """Describe the API and its endpoints."""
    return {
        "message": "After-School Lessons API",
        "version": request.app.version,
        "endpoints": ENDPOINTS,
        "database": {
            "name": request.app.state.settings.db_name,
            "collections": [LESSONS, ORDERS],
        },
    }


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok")


@router.get("/ready")
async def ready(request: Request) -> JSONResponse:
    """Readiness probe: pings the document store."""
    ok = await request.app.state.store.ping()
    if not ok:
        logger.warning("Readiness check failed: store unreachable")
    return JSONResponse(
        status_code=200 if ok else 503,
        content={"status": "ok" if ok else "not_ready"},
    )
