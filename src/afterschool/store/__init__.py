"""Storage backends for the lessons API."""

from afterschool.store.base import LESSONS, ORDERS, DocumentStore
from afterschool.store.memory import MemoryStore

__all__ = ["DocumentStore", "MemoryStore", "LESSONS", "ORDERS"]

# MongoStore is imported from afterschool.store.mongo to keep pymongo's
# client out of the import path of code that only needs the fake.
