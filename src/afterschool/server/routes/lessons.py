"""Lesson listing, search and spaces-update endpoints."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from afterschool.server.models import (
    ErrorResponse,
    LessonResponse,
    LessonSpacesUpdateRequest,
    LessonSpacesUpdateResponse,
)
from afterschool.server.routes.deps import get_service
from afterschool.service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["lessons"])

_ERRORS = {500: {"model": ErrorResponse}}


# ── List ───────────────────────────────────────────────────────────


@router.get("/lessons", response_model=List[LessonResponse], responses=_ERRORS)
async def list_lessons(
    service: BookingService = Depends(get_service),
) -> List[LessonResponse]:
    """Return every lesson."""
    lessons = await service.list_lessons()
    return [LessonResponse.from_lesson(l) for l in lessons]


# ── Search ─────────────────────────────────────────────────────────


@router.get("/search", response_model=List[LessonResponse], responses=_ERRORS)
async def search_lessons(
    q: Optional[str] = Query(""),
    service: BookingService = Depends(get_service),
) -> List[LessonResponse]:
    """Search lessons by subject, location, price or spaces."""
    lessons = await service.search_lessons(q or "")
    return [LessonResponse.from_lesson(l) for l in lessons]


# ── Update ─────────────────────────────────────────────────────────


@router.put(
    "/lessons/{lesson_id}",
    response_model=LessonSpacesUpdateResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, **_ERRORS},
)
async def update_lesson_spaces(
    lesson_id: str,
    body: Optional[LessonSpacesUpdateRequest] = None,
    service: BookingService = Depends(get_service),
) -> LessonSpacesUpdateResponse:
    """Set a lesson's available spaces to an exact value."""
    payload = body.model_dump(exclude_unset=True) if body is not None else {}
    result = await service.update_lesson_spaces(lesson_id, payload)
    return LessonSpacesUpdateResponse(modified_count=result.modified_count)
