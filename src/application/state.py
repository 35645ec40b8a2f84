from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from src.domain.entities.category import ALL, DEFAULT_CATEGORIES
from src.domain.entities.snippet import Snippet
from src.domain.services.view_engine import ViewFilters, derive_view


@dataclass
class AppState:
    """Everything the vault holds for the signed-in user.

    `snippets` is the last collection fetched from the store (plus any
    optimistic edits); the list the user sees is always derived from it.
    """

    user_id: Optional[str] = None
    snippets: List[Snippet] = field(default_factory=list)
    categories: List[str] = field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    active_category: str = ALL
    search_term: str = ""
    filters: ViewFilters = field(default_factory=ViewFilters)
    loading: bool = False
    error: Optional[str] = None
    initial_load_complete: bool = False
    mounted: bool = False

    def find(self, snippet_id: str) -> Optional[Snippet]:
        for s in self.snippets:
            if s.id == snippet_id:
                return s
        return None

    def view(self) -> List[Snippet]:
        return derive_view(self.snippets, self.active_category, self.search_term, self.filters)
