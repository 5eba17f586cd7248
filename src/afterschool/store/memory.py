"""In-memory store implementation for testing."""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

import bson
from bson import ObjectId
from bson.errors import BSONError

from afterschool.exceptions import DocumentStoreError
from afterschool.search import SearchFilter
from afterschool.store.base import DocumentStore
from afterschool.types import UpdateResult


class MemoryStore(DocumentStore):
    """In-memory store backed by dicts. Useful for testing.

    Documents keep insertion order and are copied on the way in and out.
    """

    def __init__(self) -> None:
        self._collections: Dict[str, Dict[ObjectId, Dict[str, Any]]] = {}

    def _collection(self, name: str) -> Dict[ObjectId, Dict[str, Any]]:
        return self._collections.setdefault(name, {})

    async def find_all(
        self, collection: str, where: Optional[SearchFilter] = None
    ) -> List[Dict[str, Any]]:
        docs = self._collection(collection).values()
        return [
            copy.deepcopy(doc) for doc in docs
            if where is None or where.matches(doc)
        ]

    async def insert_one(self, collection: str, document: Dict[str, Any]) -> str:
        doc = copy.deepcopy(document)
        _check_encodable(doc)
        doc_id = doc.setdefault("_id", ObjectId())
        self._collection(collection)[doc_id] = doc
        return str(doc_id)

    async def insert_many(
        self, collection: str, documents: List[Dict[str, Any]]
    ) -> List[str]:
        return [await self.insert_one(collection, d) for d in documents]

    async def update_one(
        self, collection: str, document_id: ObjectId, changes: Dict[str, Any]
    ) -> UpdateResult:
        _check_encodable({"$set": changes})
        doc = self._collection(collection).get(document_id)
        if doc is None:
            return UpdateResult(matched_count=0, modified_count=0)
        modified = any(doc.get(k, _MISSING) != v for k, v in changes.items())
        doc.update(copy.deepcopy(changes))
        return UpdateResult(matched_count=1, modified_count=int(modified))

    async def delete_all(self, collection: str) -> int:
        docs = self._collection(collection)
        count = len(docs)
        docs.clear()
        return count

    async def ping(self) -> bool:
        return True

    def get(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        """Return a copy of one document by id, or None. For inspection in tests."""
        doc = self._collection(collection).get(ObjectId(document_id))
        return copy.deepcopy(doc) if doc is not None else None


_MISSING = object()


def _check_encodable(doc: Dict[str, Any]) -> None:
    """Reject documents the BSON encoder would refuse, as the real store does."""
    try:
        bson.encode(doc)
    except (BSONError, OverflowError) as exc:
        raise DocumentStoreError(str(exc)) from exc
