from __future__ import annotations

from typing import Any, Dict, List, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError

from src.domain.errors import StoreError
from src.domain.interfaces.snippet_store_interface import ISnippetStore

from database.manager import DatabaseManager  # type: ignore
from observability import emit_event


def _doc_key(doc_id: str) -> Any:
    """Ids minted by MongoDB are ObjectIds; anything else is matched as-is."""
    try:
        return ObjectId(str(doc_id))
    except (InvalidId, TypeError):
        return str(doc_id)


class MongoSnippetStore(ISnippetStore):
    """MongoDB-backed snippet store implementing the domain interface.

    Documents are stored in the camelCase wire shape; the owner field name
    comes from configuration (``userId`` by default).
    """

    def __init__(self, db_manager: DatabaseManager, owner_field: str = "userId") -> None:
        self._db = db_manager
        self._owner_field = owner_field

    @property
    def _collection(self):
        return self._db.snippets_collection

    async def find_by_owner(self, owner_id: str) -> List[Tuple[str, Dict[str, Any]]]:
        try:
            cursor = self._collection.find({self._owner_field: owner_id})
            rows: List[Tuple[str, Dict[str, Any]]] = []
            for doc in cursor or []:
                if not isinstance(doc, dict):
                    continue
                body = dict(doc)
                raw_id = body.pop("_id", None)
                if raw_id is None:
                    continue
                rows.append((str(raw_id), body))
            return rows
        except PyMongoError as e:
            emit_event("snippet_store_find_error", severity="error", error=str(e))
            raise StoreError(f"Failed to fetch snippets: {e}") from e

    async def insert(self, document: Dict[str, Any]) -> str:
        try:
            result = self._collection.insert_one(dict(document))
        except PyMongoError as e:
            emit_event("snippet_store_insert_error", severity="error", error=str(e))
            raise StoreError(f"Failed to create snippet: {e}") from e
        inserted = getattr(result, "inserted_id", None)
        if inserted is None:
            raise StoreError("Failed to create snippet: store returned no id")
        return str(inserted)

    async def update(self, doc_id: str, document: Dict[str, Any]) -> None:
        try:
            self._collection.update_one({"_id": _doc_key(doc_id)}, {"$set": dict(document)})
        except PyMongoError as e:
            emit_event("snippet_store_update_error", severity="error", error=str(e))
            raise StoreError(f"Failed to update snippet: {e}") from e

    async def delete(self, doc_id: str) -> None:
        try:
            self._collection.delete_one({"_id": _doc_key(doc_id)})
        except PyMongoError as e:
            emit_event("snippet_store_delete_error", severity="error", error=str(e))
            raise StoreError(f"Failed to delete snippet: {e}") from e
