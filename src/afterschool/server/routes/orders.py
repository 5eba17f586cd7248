"""Order placement endpoint."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from afterschool.server.models import (
    ErrorResponse,
    OrderCreateRequest,
    OrderCreateResponse,
    OrderResponse,
)
from afterschool.server.routes.deps import get_service
from afterschool.service import BookingService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post(
    "",
    response_model=OrderCreateResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_order(
    body: Optional[OrderCreateRequest] = None,
    service: BookingService = Depends(get_service),
) -> OrderCreateResponse:
    """Create a new order.

    Lesson ids and spaces are not checked against the lessons collection.
    """
    payload = body.payload() if body is not None else {}
    order = await service.create_order(payload)
    return OrderCreateResponse(
        order_id=order.id,
        order=OrderResponse.from_order(order),
    )
