import os
from datetime import timezone
from types import SimpleNamespace
from typing import Any, Optional, Protocol

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, IndexModel, MongoClient

from config import config
from observability import emit_event


class CollectionLike(Protocol):
    def insert_one(self, *args: Any, **kwargs: Any) -> Any: ...
    def update_one(self, *args: Any, **kwargs: Any) -> Any: ...
    def delete_one(self, *args: Any, **kwargs: Any) -> Any: ...
    def find_one(self, *args: Any, **kwargs: Any) -> Any: ...
    def find(self, *args: Any, **kwargs: Any) -> Any: ...
    def create_indexes(self, *args: Any, **kwargs: Any) -> Any: ...


class NoOpCollection:
    """Minimal PyMongo-compatible collection used when the database is disabled.

    Writes are accepted and discarded. Inserts still mint an id so callers see
    a successful create; the next read comes back empty.
    """

    def insert_one(self, *args: Any, **kwargs: Any) -> Any:
        return SimpleNamespace(inserted_id=ObjectId())

    def update_one(self, *args: Any, **kwargs: Any) -> Any:
        return SimpleNamespace(acknowledged=True, matched_count=0, modified_count=0)

    def delete_one(self, *args: Any, **kwargs: Any) -> Any:
        return SimpleNamespace(deleted_count=0)

    def find_one(self, *args: Any, **kwargs: Any) -> Any:
        return None

    def find(self, *args: Any, **kwargs: Any) -> Any:
        return []

    def create_indexes(self, *args: Any, **kwargs: Any) -> Any:
        return None


def _db_disabled() -> bool:
    return str(os.getenv("DISABLE_DB", "")).lower() in {"1", "true", "yes"}


class DatabaseManager:
    """Owns the MongoDB connection and the snippets/users collections."""

    client: Optional[MongoClient]
    snippets_collection: CollectionLike
    users_collection: CollectionLike

    def __init__(self, settings: Any = None) -> None:
        self._settings = settings or config
        self.client = None
        self.db = None
        self.snippets_collection = NoOpCollection()
        self.users_collection = NoOpCollection()
        self.connect()

    @property
    def is_noop(self) -> bool:
        return self.client is None

    def connect(self) -> None:
        if _db_disabled():
            emit_event("db_disabled", reason="DISABLE_DB")
            return

        s = self._settings
        try:
            self.client = MongoClient(
                s.MONGODB_URL,
                maxPoolSize=s.MONGODB_MAX_POOL_SIZE,
                minPoolSize=s.MONGODB_MIN_POOL_SIZE,
                serverSelectionTimeoutMS=s.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
                socketTimeoutMS=s.MONGODB_SOCKET_TIMEOUT_MS,
                connectTimeoutMS=s.MONGODB_CONNECT_TIMEOUT_MS,
                appname=s.MONGODB_APPNAME,
                retryWrites=True,
                retryReads=True,
                tz_aware=True,
                tzinfo=timezone.utc,
            )
            self.db = self.client[s.DATABASE_NAME]
            self.snippets_collection = self.db[s.SNIPPETS_COLLECTION]
            self.users_collection = self.db[s.USERS_COLLECTION]
            self.client.admin.command("ping")
            self._create_indexes()
            emit_event("db_connected", database=s.DATABASE_NAME)
        except Exception as e:
            emit_event("db_connection_failed", severity="error", error=str(e))
            raise

    def _create_indexes(self) -> None:
        owner = self._settings.OWNER_FIELD
        snippet_indexes = [
            IndexModel([(owner, ASCENDING)], name="owner_idx"),
            IndexModel([(owner, ASCENDING), ("createdAt", DESCENDING)], name="owner_created_idx"),
        ]
        users_indexes = [
            IndexModel([("uid", ASCENDING)], name="uid_unique", unique=True),
            IndexModel([("email", ASCENDING)], name="email_idx"),
        ]
        try:
            self.snippets_collection.create_indexes(snippet_indexes)
            self.users_collection.create_indexes(users_indexes)
        except Exception as e:
            emit_event("db_create_indexes_error", severity="warn", error=str(e))

    def close(self) -> None:
        if self.client is not None:
            try:
                self.client.close()
            finally:
                self.client = None


_db_singleton: Optional[DatabaseManager] = None


def get_db() -> DatabaseManager:
    """Lazily build the process-wide DatabaseManager."""
    global _db_singleton
    if _db_singleton is None:
        _db_singleton = DatabaseManager()
    return _db_singleton


def reset_db_for_tests(manager: Optional[DatabaseManager] = None) -> None:
    global _db_singleton
    _db_singleton = manager


__all__ = ["CollectionLike", "DatabaseManager", "NoOpCollection", "get_db", "reset_db_for_tests"]
