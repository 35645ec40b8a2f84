from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from src.application.dto.save_snippet_dto import SaveSnippetDTO
from src.application.services.backup_service import export_snippets, parse_import
from src.application.services.category_manager import CategoryManager
from src.application.services.session_manager import SessionManager
from src.application.services.snippet_gateway import SnippetGateway
from src.application.state import AppState
from src.domain.entities.batch_result import BatchResult
from src.domain.entities.category import ALL, DEFAULT_CATEGORIES, user_category_count
from src.domain.entities.snippet import Snippet
from src.domain.errors import SnippetNotFoundError, SnippetVaultError
from src.domain.interfaces.preferences_store_interface import IPreferencesStore
from src.domain.services.language_detector import LanguageDetector
from src.domain.services.snippet_normalizer import SnippetNormalizer
from src.domain.services.view_engine import ViewFilters, favorite_count

from observability import bind_user_context, emit_event

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load snippets"


def _overlay_edit(existing: Snippet, data: Mapping[str, Any]) -> Any:
    """Apply submitted fields on top of the stored record.

    Fields the form leaves out keep their stored value. The favorite flag is
    only ever changed by `toggle_favorite`.
    """
    if not isinstance(data, Mapping):
        return data
    merged = existing.to_document()
    if "category" in data and "categories" not in data:
        merged.pop("categories", None)
    if "content" in data and "code" not in data:
        merged.pop("code", None)
    if ("code" in data or "content" in data) and "snippets" not in data:
        merged.pop("snippets", None)
    merged.update(data)
    merged.pop("is_favorite", None)
    merged["isFavorite"] = bool(existing.is_favorite)
    return merged


@dataclass
class VaultStats:
    total: int
    categories: int
    favorites: int
    showing: int


class VaultService:
    """Application service holding the signed-in user's vault.

    Mutations go to the store first and are followed by a full re-fetch; the
    last re-fetch to complete defines the local collection. Favorite toggles
    are applied locally before the write and reverted if it fails.
    """

    def __init__(
        self,
        gateway: SnippetGateway,
        categories: CategoryManager,
        session: SessionManager,
        preferences: Optional[IPreferencesStore] = None,
        normalizer: Optional[SnippetNormalizer] = None,
        detector: Optional[LanguageDetector] = None,
        default_categories: Optional[Iterable[str]] = None,
    ) -> None:
        self._gateway = gateway
        self._categories = categories
        self._session = session
        self._preferences = preferences
        self._normalizer = normalizer or SnippetNormalizer()
        self._detector = detector or LanguageDetector()
        self._default_categories = list(default_categories or DEFAULT_CATEGORIES)
        self._generation = 0
        self.state = AppState(categories=list(self._default_categories))

    @property
    def session(self) -> SessionManager:
        return self._session

    # ---------- lifecycle ----------
    def mount(self) -> AppState:
        """Start a session view for the current user; local preferences are restored."""
        self._generation += 1
        user_id = self._session.current_user_id
        categories = list(self._default_categories)
        filters = ViewFilters()
        if user_id and self._preferences is not None:
            categories = self._preferences.load_categories(user_id) or categories
            filters = ViewFilters.from_dict(self._preferences.load_filters(user_id))
        self.state = AppState(user_id=user_id, categories=categories, filters=filters, mounted=True)
        if user_id:
            bind_user_context(user_id=user_id)
        return self.state

    async def start(self) -> AppState:
        """Restore a persisted login, then mount and load for that user."""
        await self._session.restore()
        self.mount()
        await self.load()
        return self.state

    def unmount(self) -> None:
        # Fetches still in flight compare against the generation and drop their result.
        self._generation += 1
        self.state.mounted = False

    def _is_live(self, generation: int) -> bool:
        return self.state.mounted and generation == self._generation

    async def load(self) -> List[Snippet]:
        """Fetch the whole collection; on failure the banner is set and the collection cleared."""
        state = self.state
        generation = self._generation
        if not state.user_id:
            state.snippets = []
            state.loading = False
            state.initial_load_complete = True
            return []

        state.loading = True
        state.error = None
        try:
            snippets = await self._gateway.list_by_owner(state.user_id)
        except SnippetVaultError as e:
            if self._is_live(generation):
                state.error = str(e) or LOAD_FAILED_MESSAGE
                state.snippets = []
                state.loading = False
                state.initial_load_complete = True
            emit_event("vault_load_failed", severity="error", user_id=state.user_id, error=str(e))
            return []

        if not self._is_live(generation):
            logger.info("discarding fetch result for a stale session")
            return []
        state.snippets = snippets
        state.loading = False
        state.initial_load_complete = True
        return snippets

    refresh = load

    # ---------- mutations ----------
    async def save(self, data: Mapping[str, Any], snippet_id: Optional[str] = None) -> str:
        """Create (no id) or update a snippet, then re-fetch. Returns the snippet id."""
        user_id = self._session.require_user()
        if snippet_id:
            existing = self.state.find(str(snippet_id))
            if existing is not None:
                data = _overlay_edit(existing, data)
        dto = SaveSnippetDTO.from_mapping(data)
        record = self._normalizer.normalize(dto.to_mapping())
        if not record.language:
            sample = record.code or (record.snippets[0].code if record.snippets else "")
            record.language = self._detector.detect(sample)

        if snippet_id:
            await self._gateway.update(str(snippet_id), record, user_id)
            saved_id = str(snippet_id)
        else:
            saved_id = await self._gateway.create(record, user_id)

        self._categories.register_missing(self.state, record.categories)
        await self.load()
        return saved_id

    async def delete(self, snippet_id: str) -> None:
        user_id = self._session.require_user()
        await self._gateway.remove(str(snippet_id), user_id)
        await self.load()

    async def toggle_favorite(self, snippet_id: str) -> bool:
        user_id = self._session.require_user()
        snippet = self.state.find(snippet_id)
        if snippet is None:
            raise SnippetNotFoundError(snippet_id)

        previous = bool(snippet.is_favorite)
        desired = not previous
        outgoing = snippet.copy_with(is_favorite=desired)
        snippet.is_favorite = desired
        try:
            await self._gateway.update(str(snippet_id), outgoing, user_id)
        except SnippetVaultError:
            snippet.is_favorite = previous
            raise

        await self.load()
        return desired

    # ---------- categories ----------
    def add_category(self, name: str, strict: bool = False) -> bool:
        return self._categories.add(self.state, name, strict=strict)

    def reorder_categories(self, new_order: Iterable[str]) -> None:
        self._categories.reorder(self.state, new_order)

    async def delete_category(self, name: str) -> BatchResult:
        self._session.require_user()
        result = await self._categories.delete(self.state, name)
        await self.load()
        return result

    # ---------- view state ----------
    def view(self) -> List[Snippet]:
        return self.state.view()

    def set_search(self, term: str) -> None:
        self.state.search_term = term or ""

    def set_filters(self, filters: ViewFilters | Mapping[str, Any]) -> ViewFilters:
        if not isinstance(filters, ViewFilters):
            filters = ViewFilters.from_dict(dict(filters))
        self.state.filters = filters
        if self._preferences is not None and self.state.user_id:
            self._preferences.save_filters(self.state.user_id, filters.to_dict())
        return filters

    def set_active_category(self, name: str) -> None:
        self.state.active_category = name or ALL

    def dismiss_error(self) -> None:
        self.state.error = None

    def stats(self) -> VaultStats:
        return VaultStats(
            total=len(self.state.snippets),
            categories=user_category_count(self.state.categories),
            favorites=favorite_count(self.state.snippets),
            showing=len(self.view()),
        )

    # ---------- backup ----------
    def export(self, today: Optional[date] = None) -> Tuple[str, str]:
        return export_snippets(self.state.snippets, today=today)

    async def import_json(self, text: str | bytes) -> BatchResult:
        user_id = self._session.require_user()
        items = parse_import(text)
        result = await self._gateway.import_many(items, user_id)
        await self.load()
        self._categories.register_missing(
            self.state, [c for s in self.state.snippets for c in s.categories]
        )
        return result
