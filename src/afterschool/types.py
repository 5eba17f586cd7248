"""Core data types for the after-school lessons API."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

Number = Union[int, float]


@dataclass
class Lesson:
    """A bookable course offering."""

    id: str
    subject: str
    location: str
    price: Number
    spaces: int
    icon: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Lesson":
        return cls(
            id=str(doc["_id"]),
            subject=doc.get("subject", ""),
            location=doc.get("location", ""),
            price=doc.get("price", 0),
            spaces=doc.get("spaces", 0),
            icon=doc.get("icon"),
        )


@dataclass
class Order:
    """A customer's booking request against one or more lessons.

    ``lesson_ids`` are weak references: nothing checks they name real lessons.
    """

    name: Any
    phone: Any
    lesson_ids: Any
    spaces: Any
    created_at: datetime
    id: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "phone": self.phone,
            "lessonIds": self.lesson_ids,
            "spaces": self.spaces,
            "createdAt": self.created_at,
        }


@dataclass
class UpdateResult:
    """Outcome of a single-document update."""

    matched_count: int
    modified_count: int


@dataclass
class SeedReport:
    deleted: int = 0
    inserted_ids: List[str] = field(default_factory=list)
