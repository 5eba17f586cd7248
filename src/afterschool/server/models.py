"""Pydantic request/response models for the lessons API."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from afterschool.types import Lesson, Order


# ── Lessons ────────────────────────────────────────────────────────


class LessonResponse(BaseModel):
    """Single lesson as stored."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    subject: str
    location: str
    price: Union[int, float]
    spaces: int
    icon: Optional[str] = None

    @classmethod
    def from_lesson(cls, lesson: Lesson) -> "LessonResponse":
        return cls(
            id=lesson.id,
            subject=lesson.subject,
            location=lesson.location,
            price=lesson.price,
            spaces=lesson.spaces,
            icon=lesson.icon,
        )


class LessonSpacesUpdateRequest(BaseModel):
    """Request body for PUT /lessons/{id}.

    ``spaces`` is loosely typed here; the service applies the real rule so
    that a missing field and an explicit 0 stay distinguishable.
    """

    spaces: Any = None


class LessonSpacesUpdateResponse(BaseModel):
    """Response for PUT /lessons/{id}."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = "Lesson updated successfully"
    modified_count: int = Field(..., alias="modifiedCount")


# ── Orders ─────────────────────────────────────────────────────────


class OrderCreateRequest(BaseModel):
    """Request body for POST /orders. Presence rules are enforced by the service."""

    model_config = ConfigDict(populate_by_name=True)

    name: Any = None
    phone: Any = None
    lesson_ids: Any = Field(default=None, alias="lessonIds")
    spaces: Any = None

    def payload(self) -> Dict[str, Any]:
        """Fields the caller actually sent, keyed by their wire names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class OrderResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, alias="_id")
    name: Any
    phone: Any
    lesson_ids: Any = Field(..., alias="lessonIds")
    spaces: Any
    created_at: datetime = Field(..., alias="createdAt")

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            name=order.name,
            phone=order.phone,
            lesson_ids=order.lesson_ids,
            spaces=order.spaces,
            created_at=order.created_at,
        )


class OrderCreateResponse(BaseModel):
    """Response for POST /orders."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = "Order created successfully"
    order_id: str = Field(..., alias="orderId")
    order: OrderResponse


# ── Errors / meta ──────────────────────────────────────────────────


class ErrorResponse(BaseModel):
    error: str
    message: str
    required: Optional[List[str]] = None


class HealthResponse(BaseModel):
    status: str
