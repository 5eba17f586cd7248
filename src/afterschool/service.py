"""Booking service: the four lesson/order operations.

The service depends only on the DocumentStore interface. Validation runs
before any store call; store failures are logged and re-raised as
StoreError tagged with the failing operation.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional

from afterschool.exceptions import (
    DocumentStoreError,
    InvalidDocumentIdError,
    LessonNotFoundError,
    StoreError,
)
from afterschool.search import build_search_filter
from afterschool.store.base import LESSONS, ORDERS, DocumentStore
from afterschool.types import Lesson, Order, UpdateResult
from afterschool.validation import validate_lesson_spaces, validate_order

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BookingService:
    """Lesson listing, search, order placement and spaces updates."""

    def __init__(
        self,
        store: DocumentStore,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._clock = clock

    async def list_lessons(self) -> List[Lesson]:
        """Return every lesson, unfiltered, in store order."""
        try:
            docs = await self._store.find_all(LESSONS)
        except DocumentStoreError as exc:
            logger.exception("Listing lessons failed")
            raise _store_error(exc, "Failed to fetch lessons") from exc
        return [Lesson.from_document(d) for d in docs]

    async def search_lessons(self, q: Optional[str] = "") -> List[Lesson]:
        """Return lessons matching ``q``; an empty ``q`` returns everything."""
        where = build_search_filter(q)
        try:
            docs = await self._store.find_all(LESSONS, where)
        except DocumentStoreError as exc:
            logger.exception("Lesson search failed for q=%r", q)
            raise _store_error(exc, "Search failed") from exc
        return [Lesson.from_document(d) for d in docs]

    async def create_order(self, payload: Mapping[str, Any]) -> Order:
        """Validate, timestamp and persist an order.

        Raises:
            MissingFieldsError: If name, phone, lessonIds or spaces is missing
                or empty. Nothing is written.
            StoreError: If the insert fails.
        """
        validate_order(payload)
        order = Order(
            name=payload["name"],
            phone=payload["phone"],
            lesson_ids=payload["lessonIds"],
            spaces=payload["spaces"],
            created_at=self._clock(),
        )
        try:
            order.id = await self._store.insert_one(ORDERS, order.to_document())
        except DocumentStoreError as exc:
            logger.exception("Creating order failed")
            raise _store_error(exc, "Failed to create order") from exc
        logger.info("Order %s created for %d lesson(s)", order.id, _count(order.lesson_ids))
        return order

    async def update_lesson_spaces(
        self, lesson_id: str, payload: Mapping[str, Any]
    ) -> UpdateResult:
        """Overwrite a lesson's spaces with the caller's value.

        Raises:
            InvalidSpacesError: If spaces is absent or not a non-negative number.
            StoreError: If ``lesson_id`` is malformed or the update fails.
            LessonNotFoundError: If no lesson has ``lesson_id``.
        """
        spaces = validate_lesson_spaces(payload)
        try:
            document_id = self._store.parse_id(lesson_id)
            result = await self._store.update_one(
                LESSONS, document_id, {"spaces": spaces}
            )
        except DocumentStoreError as exc:
            logger.exception("Updating lesson %s failed", lesson_id)
            raise _store_error(exc, "Failed to update lesson") from exc
        if result.matched_count == 0:
            raise LessonNotFoundError(lesson_id)
        logger.info("Lesson %s spaces set to %d", lesson_id, spaces)
        return result


def _store_error(exc: DocumentStoreError, tag: str) -> StoreError:
    # Driver messages stay in the log, not in responses.
    if isinstance(exc, InvalidDocumentIdError):
        return StoreError(str(exc), error=tag)
    return StoreError("The document store could not complete the request", error=tag)


def _count(value: Any) -> int:
    try:
        return len(value)
    except TypeError:
        return 1
