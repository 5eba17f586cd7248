"""Request-scoped dependencies shared by the routers."""

from __future__ import annotations

from fastapi import Request

from afterschool.service import BookingService


def get_service(request: Request) -> BookingService:
    """Return the BookingService built around the app's single store."""
    return request.app.state.service
