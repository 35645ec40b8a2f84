from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from src.application.state import AppState
from src.domain.entities.batch_result import BatchResult
from src.domain.entities.category import ALL, UNCATEGORIZED, is_protected
from src.domain.errors import CategoryExistsError, ProtectedCategoryError, SnippetVaultError
from src.domain.interfaces.preferences_store_interface import IPreferencesStore
from src.application.services.snippet_gateway import SnippetGateway

from observability import emit_event

logger = logging.getLogger(__name__)


class CategoryManager:
    """Ordered category list of the signed-in user, persisted locally.

    Deleting a category cascades to the snippets that carry it; each of those
    writes is independent and best-effort.
    """

    def __init__(self, gateway: SnippetGateway, preferences: Optional[IPreferencesStore] = None) -> None:
        self._gateway = gateway
        self._preferences = preferences

    def add(self, state: AppState, name: str, strict: bool = False) -> bool:
        name = (name or "").strip()
        if not name:
            return False
        if name in state.categories:
            if strict:
                raise CategoryExistsError(name)
            logger.info("category already exists: %s", name)
            return False
        state.categories = [*state.categories, name]
        self._persist(state)
        emit_event("category_added", user_id=state.user_id, category=name)
        return True

    def reorder(self, state: AppState, new_order: Iterable[str]) -> None:
        # Order comes from the caller verbatim; protected names are not re-checked.
        state.categories = list(new_order)
        self._persist(state)

    def register_missing(self, state: AppState, names: Iterable[str]) -> List[str]:
        """Append any category a saved snippet references that the list lacks."""
        added: List[str] = []
        for name in names:
            if name and name not in state.categories and name not in added:
                added.append(name)
        if added:
            state.categories = [*state.categories, *added]
            self._persist(state)
        return added

    async def delete(self, state: AppState, name: str) -> BatchResult:
        if is_protected(name):
            raise ProtectedCategoryError(name)

        state.categories = [c for c in state.categories if c != name]
        self._persist(state)
        if state.active_category == name:
            state.active_category = ALL

        result = BatchResult()
        for snippet in [s for s in state.snippets if name in s.categories]:
            remaining = [c for c in snippet.categories if c != name] or [UNCATEGORIZED]
            updated = snippet.copy_with(categories=remaining)
            try:
                await self._gateway.update(str(snippet.id), updated, state.user_id)
            except SnippetVaultError as e:
                logger.error("category cascade update failed for %s: %s", snippet.id, e)
                result.record_failure(str(snippet.id), e)
                continue
            snippet.categories = remaining
            result.record_success(str(snippet.id))

        emit_event(
            "category_deleted",
            severity="info" if result.all_succeeded else "warn",
            user_id=state.user_id,
            category=name,
            updated=len(result.succeeded),
            failed=len(result.failed),
        )
        return result

    def _persist(self, state: AppState) -> None:
        if self._preferences is None or not state.user_id:
            return
        self._preferences.save_categories(state.user_id, list(state.categories))
