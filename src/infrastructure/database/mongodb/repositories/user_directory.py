from __future__ import annotations

from typing import Any, Dict, List, Optional

from pymongo.errors import PyMongoError

from src.domain.entities.user_profile import UserProfile
from src.domain.errors import StoreError
from src.domain.interfaces.identity_interface import IUserDirectory

from database.manager import DatabaseManager  # type: ignore
from observability import emit_event


class MongoUserDirectory(IUserDirectory):
    """Profile records in the ``users`` collection, keyed by ``uid``."""

    def __init__(self, db_manager: DatabaseManager) -> None:
        self._db = db_manager

    @property
    def _collection(self):
        return self._db.users_collection

    async def get(self, uid: str) -> Optional[UserProfile]:
        try:
            doc = self._collection.find_one({"uid": uid})
        except PyMongoError as e:
            emit_event("user_directory_get_error", severity="error", error=str(e))
            raise StoreError(f"Failed to load profile: {e}") from e
        if not isinstance(doc, dict):
            return None
        return UserProfile.from_document(doc)

    async def create(self, profile: UserProfile) -> None:
        try:
            self._collection.update_one(
                {"uid": profile.uid},
                {"$set": profile.to_document()},
                upsert=True,
            )
        except PyMongoError as e:
            emit_event("user_directory_create_error", severity="error", error=str(e))
            raise StoreError(f"Failed to create profile: {e}") from e

    async def update(self, uid: str, fields: Dict[str, Any]) -> None:
        if not fields:
            return
        try:
            self._collection.update_one({"uid": uid}, {"$set": dict(fields)})
        except PyMongoError as e:
            emit_event("user_directory_update_error", severity="error", error=str(e))
            raise StoreError(f"Failed to update profile: {e}") from e

    async def list_all(self) -> List[UserProfile]:
        try:
            docs = list(self._collection.find({}) or [])
        except PyMongoError as e:
            emit_event("user_directory_list_error", severity="error", error=str(e))
            raise StoreError(f"Failed to list users: {e}") from e
        return [UserProfile.from_document(d) for d in docs if isinstance(d, dict)]
