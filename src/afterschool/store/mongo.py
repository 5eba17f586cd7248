"""MongoDB store implementation on pymongo's asyncio client."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import BSONError
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from afterschool.exceptions import DocumentStoreError, StartupError
from afterschool.search import SearchFilter
from afterschool.store.base import DocumentStore
from afterschool.types import UpdateResult

logger = logging.getLogger(__name__)

# Encoding failures (oversized ints, invalid keys) raise before any server call.
_DRIVER_ERRORS = (PyMongoError, BSONError, OverflowError)


class MongoStore(DocumentStore):
    """MongoDB-backed document store.

    One client is created at startup and shared by every request; it is
    never reassigned afterwards.
    """

    def __init__(self, client: AsyncMongoClient, db_name: str) -> None:
        self._client = client
        self._db = client[db_name]
        self.db_name = db_name

    @classmethod
    async def connect(
        cls, uri: str, db_name: str, timeout_ms: int = 5000
    ) -> "MongoStore":
        """Connect and verify with a ping. Raises StartupError on failure."""
        client: AsyncMongoClient = AsyncMongoClient(
            uri, serverSelectionTimeoutMS=timeout_ms
        )
        try:
            await client.admin.command("ping")
        except PyMongoError as exc:
            await client.close()
            # Never log credentials; the scheme and host prefix is enough.
            logger.error("MongoDB connection failed (uri starts with %s)", uri[:20])
            raise StartupError(f"Cannot connect to MongoDB: {exc}") from exc
        logger.info("Connected to MongoDB database %s", db_name)
        return cls(client, db_name)

    async def find_all(
        self, collection: str, where: Optional[SearchFilter] = None
    ) -> List[Dict[str, Any]]:
        query = where.to_mongo() if where is not None else {}
        try:
            cursor = self._db[collection].find(query)
            return await cursor.to_list(None)
        except _DRIVER_ERRORS as exc:
            raise DocumentStoreError(str(exc)) from exc

    async def insert_one(self, collection: str, document: Dict[str, Any]) -> str:
        # insert_one mutates its argument by adding _id.
        doc = dict(document)
        try:
            result = await self._db[collection].insert_one(doc)
        except _DRIVER_ERRORS as exc:
            raise DocumentStoreError(str(exc)) from exc
        return str(result.inserted_id)

    async def insert_many(
        self, collection: str, documents: List[Dict[str, Any]]
    ) -> List[str]:
        if not documents:
            return []
        try:
            result = await self._db[collection].insert_many(
                [dict(d) for d in documents]
            )
        except _DRIVER_ERRORS as exc:
            raise DocumentStoreError(str(exc)) from exc
        return [str(i) for i in result.inserted_ids]

    async def update_one(
        self, collection: str, document_id: ObjectId, changes: Dict[str, Any]
    ) -> UpdateResult:
        try:
            result = await self._db[collection].update_one(
                {"_id": document_id}, {"$set": changes}
            )
        except _DRIVER_ERRORS as exc:
            raise DocumentStoreError(str(exc)) from exc
        return UpdateResult(
            matched_count=result.matched_count,
            modified_count=result.modified_count,
        )

    async def delete_all(self, collection: str) -> int:
        try:
            result = await self._db[collection].delete_many({})
        except _DRIVER_ERRORS as exc:
            raise DocumentStoreError(str(exc)) from exc
        return result.deleted_count

    async def ping(self) -> bool:
        try:
            await self._client.admin.command("ping")
        except PyMongoError:
            logger.warning("MongoDB ping failed", exc_info=True)
            return False
        return True

    async def close(self) -> None:
        await self._client.close()
        logger.info("MongoDB connection closed")
