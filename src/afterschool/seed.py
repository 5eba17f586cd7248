"""Seed catalogue of lessons."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from afterschool.store.base import LESSONS, DocumentStore
from afterschool.types import SeedReport

logger = logging.getLogger(__name__)


def _lesson(subject: str, location: str, price: int, icon: str) -> Dict[str, Any]:
    return {
        "subject": subject,
        "location": location,
        "price": price,
        "spaces": 5,
        "icon": icon,
    }


SEED_LESSONS: List[Dict[str, Any]] = [
    _lesson("Math", "London", 100, "fa-calculator"),
    _lesson("Math", "Oxford", 100, "fa-calculator"),
    _lesson("Math", "York", 80, "fa-calculator"),
    _lesson("English", "London", 90, "fa-book"),
    _lesson("English", "York", 85, "fa-book"),
    _lesson("English", "Bristol", 95, "fa-book"),
    _lesson("Music", "Bristol", 90, "fa-music"),
    _lesson("Music", "Manchester", 85, "fa-music"),
    _lesson("Science", "London", 110, "fa-flask"),
    _lesson("Science", "Oxford", 120, "fa-flask"),
    _lesson("Art", "Manchester", 75, "fa-palette"),
    _lesson("Art", "Bristol", 80, "fa-palette"),
]


async def seed_lessons(store: DocumentStore) -> SeedReport:
    """Replace the lessons collection with the seed catalogue."""
    deleted = await store.delete_all(LESSONS)
    logger.info("Cleared %d existing lessons", deleted)
    ids = await store.insert_many(LESSONS, [dict(l) for l in SEED_LESSONS])
    logger.info("Inserted %d lessons", len(ids))
    return SeedReport(deleted=deleted, inserted_ids=ids)
