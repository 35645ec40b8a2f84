from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

from src.domain.entities.batch_result import BatchResult
from src.domain.entities.snippet import Snippet
from src.domain.errors import NotAuthenticatedError, SnippetVaultError, StoreError
from src.domain.interfaces.snippet_store_interface import ISnippetStore
from src.domain.services.clock import utc_now_iso
from src.domain.services.snippet_normalizer import SnippetNormalizer, migrate_document
from src.domain.services.storage_sanitizer import sanitize_for_storage

from observability import emit_event

logger = logging.getLogger(__name__)


def _require_owner(user_id: Optional[str]) -> str:
    if not user_id or not str(user_id).strip():
        raise NotAuthenticatedError("User not authenticated")
    return str(user_id)


class SnippetGateway:
    """Remote snippet operations for one owner at a time.

    Every call is a single store round trip. Nothing is retried; store
    failures are logged and re-raised as `StoreError`.
    """

    def __init__(
        self,
        store: ISnippetStore,
        normalizer: Optional[SnippetNormalizer] = None,
        clock: Callable[[], str] = utc_now_iso,
        owner_field: str = "userId",
    ) -> None:
        self._store = store
        self._normalizer = normalizer or SnippetNormalizer()
        self._clock = clock
        self._owner_field = owner_field

    async def list_by_owner(self, user_id: Optional[str]) -> List[Snippet]:
        owner = _require_owner(user_id)
        rows = await self._round_trip("snippets_fetch_failed", owner, lambda: self._store.find_by_owner(owner))
        snippets = [migrate_document(doc, doc_id) for doc_id, doc in rows]
        emit_event("snippets_fetched", user_id=owner, count=len(snippets))
        return snippets

    async def create(self, snippet: Any, user_id: Optional[str]) -> str:
        owner = _require_owner(user_id)
        payload = self._payload(snippet)
        now = self._clock()
        if not payload.get("createdAt"):
            payload["createdAt"] = now
        payload["updatedAt"] = now
        payload[self._owner_field] = owner
        new_id = await self._round_trip("snippet_create_failed", owner, lambda: self._store.insert(payload))
        emit_event("snippet_created", user_id=owner, snippet_id=new_id)
        return new_id

    async def update(self, snippet_id: str, snippet: Any, user_id: Optional[str]) -> None:
        owner = _require_owner(user_id)
        if not snippet_id:
            raise StoreError("Snippet id is required for update")
        payload = self._payload(snippet)
        # createdAt is write-once
        payload.pop("createdAt", None)
        payload["updatedAt"] = self._clock()
        payload[self._owner_field] = owner
        await self._round_trip(
            "snippet_update_failed",
            owner,
            lambda: self._store.update(str(snippet_id), payload),
            snippet_id=snippet_id,
        )
        emit_event("snippet_updated", user_id=owner, snippet_id=snippet_id)

    async def remove(self, snippet_id: str, user_id: Optional[str]) -> None:
        owner = _require_owner(user_id)
        await self._round_trip(
            "snippet_delete_failed",
            owner,
            lambda: self._store.delete(str(snippet_id)),
            snippet_id=snippet_id,
        )
        emit_event("snippet_deleted", user_id=owner, snippet_id=snippet_id)

    async def import_many(self, items: Iterable[Any], user_id: Optional[str]) -> BatchResult:
        """Create every item independently; one failure never stops the rest."""
        owner = _require_owner(user_id)
        result = BatchResult()
        for index, item in enumerate(items):
            label = f"#{index}"
            try:
                new_id = await self.create(item, owner)
            except SnippetVaultError as e:
                logger.warning("import item %s failed: %s", label, e)
                result.record_failure(label, e)
                continue
            result.record_success(new_id)
        emit_event(
            "snippets_imported",
            user_id=owner,
            imported=len(result.succeeded),
            failed=len(result.failed),
        )
        return result

    def _payload(self, snippet: Any) -> Dict[str, Any]:
        record = self._normalizer.normalize(snippet)
        document = record.to_document()
        document.pop("userId", None)
        return sanitize_for_storage(document)

    async def _round_trip(
        self,
        event: str,
        owner: str,
        call: Callable[[], Awaitable[Any]],
        **fields: Any,
    ) -> Any:
        try:
            return await call()
        except StoreError as e:
            emit_event(event, severity="error", user_id=owner, error=str(e), **fields)
            raise
        except Exception as e:
            emit_event(event, severity="error", user_id=owner, error=str(e), **fields)
            raise StoreError(str(e) or e.__class__.__name__) from e
