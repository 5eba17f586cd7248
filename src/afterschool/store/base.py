"""Abstract document-store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId

from afterschool.exceptions import InvalidDocumentIdError
from afterschool.search import SearchFilter
from afterschool.types import UpdateResult

LESSONS = "lessons"
ORDERS = "orders"


class DocumentStore(ABC):
    """Abstract base class for schemaless document persistence.

    Implementations wrap driver failures in DocumentStoreError.
    """

    def parse_id(self, raw: str) -> ObjectId:
        """Parse ``raw`` into the store's identity format."""
        try:
            return ObjectId(raw)
        except (InvalidId, TypeError) as exc:
            raise InvalidDocumentIdError(raw) from exc

    @abstractmethod
    async def find_all(
        self, collection: str, where: Optional[SearchFilter] = None
    ) -> List[Dict[str, Any]]:
        """Return every document in ``collection`` matching ``where``, in store order."""

    @abstractmethod
    async def insert_one(self, collection: str, document: Dict[str, Any]) -> str:
        """Insert a document and return its generated id."""

    @abstractmethod
    async def insert_many(
        self, collection: str, documents: List[Dict[str, Any]]
    ) -> List[str]:
        """Insert documents and return their generated ids in order."""

    @abstractmethod
    async def update_one(
        self, collection: str, document_id: ObjectId, changes: Dict[str, Any]
    ) -> UpdateResult:
        """Set ``changes`` on the document with ``document_id``."""

    @abstractmethod
    async def delete_all(self, collection: str) -> int:
        """Delete every document in ``collection``. Returns the count."""

    @abstractmethod
    async def ping(self) -> bool:
        """Return True if the store is reachable."""

    async def close(self) -> None:
        """Release connections held by the store."""
