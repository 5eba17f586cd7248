"""After-school lessons API: lesson catalogue and order booking."""

from afterschool.exceptions import (
    AfterschoolError,
    LessonNotFoundError,
    StoreError,
    ValidationError,
)
from afterschool.service import BookingService
from afterschool.types import Lesson, Order

__version__ = "1.0.0"


# Lazy import to avoid a hard httpx dependency for server-only users
def __getattr__(name: str):
    if name == "AfterschoolClient":
        from afterschool.client import AfterschoolClient
        return AfterschoolClient
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "AfterschoolClient",
    "AfterschoolError",
    "BookingService",
    "Lesson",
    "LessonNotFoundError",
    "Order",
    "StoreError",
    "ValidationError",
]
