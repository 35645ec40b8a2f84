"""
Domain service: derive the list shown to the user.

`derive_view` is a pure function of (collection, active category, search
term, filters): it never mutates its inputs and returns a new list, so it is
safe to memoize on them.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from src.domain.entities.category import ALL, FAVOURITE
from src.domain.entities.snippet import Snippet

SORT_NEWEST = "newest"
SORT_OLDEST = "oldest"
SORT_ALPHABETICAL = "alphabetical"
SORT_UPDATED = "updated"
SORT_KEYS = (SORT_NEWEST, SORT_OLDEST, SORT_ALPHABETICAL, SORT_UPDATED)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class ViewFilters:
    language: str = ""
    has_description: bool = False
    has_multiple_snippets: bool = False
    sort_by: str = SORT_NEWEST

    def to_dict(self) -> dict:
        return {
            "language": self.language,
            "hasDescription": self.has_description,
            "hasMultipleSnippets": self.has_multiple_snippets,
            "sortBy": self.sort_by,
        }

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> "ViewFilters":
        d = d or {}
        sort_by = str(d.get("sortBy", SORT_NEWEST) or SORT_NEWEST)
        return cls(
            language=str(d.get("language", "") or ""),
            has_description=bool(d.get("hasDescription", False)),
            has_multiple_snippets=bool(d.get("hasMultipleSnippets", False)),
            sort_by=sort_by if sort_by in SORT_KEYS else SORT_NEWEST,
        )


def parse_timestamp(value: Optional[str]) -> datetime:
    """ISO-8601 to an aware datetime; anything unparseable sorts as the epoch."""
    if not value or not isinstance(value, str):
        return EPOCH
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def matches_category(snippet: Snippet, active_category: str) -> bool:
    if not active_category or active_category == ALL:
        return True
    if active_category == FAVOURITE:
        return bool(snippet.is_favorite)
    return active_category in snippet.categories


def matches_search(snippet: Snippet, search_term: str) -> bool:
    term = (search_term or "").lower()
    if not term:
        return True
    if term in (snippet.title or "").lower():
        return True
    if term in (snippet.description or "").lower():
        return True
    return any(term in (tag or "").lower() for tag in snippet.tags)


def matches_filters(snippet: Snippet, filters: ViewFilters) -> bool:
    if filters.language and snippet.language != filters.language:
        return False
    if filters.has_description and not (snippet.description or "").strip():
        return False
    if filters.has_multiple_snippets and not snippet.snippets:
        return False
    return True


def sort_snippets(snippets: Iterable[Snippet], sort_by: str) -> List[Snippet]:
    items = list(snippets)
    if sort_by == SORT_OLDEST:
        return sorted(items, key=lambda s: parse_timestamp(s.created_at))
    if sort_by == SORT_ALPHABETICAL:
        return sorted(items, key=lambda s: ((s.title or "").casefold(), s.title or ""))
    if sort_by == SORT_UPDATED:
        return sorted(items, key=lambda s: parse_timestamp(s.updated_at), reverse=True)
    return sorted(items, key=lambda s: parse_timestamp(s.created_at), reverse=True)


def derive_view(
    collection: Sequence[Snippet],
    active_category: str,
    search_term: str,
    filters: Optional[ViewFilters] = None,
) -> List[Snippet]:
    filters = filters or ViewFilters()
    visible = [
        s
        for s in collection
        if matches_category(s, active_category)
        and matches_search(s, search_term)
        and matches_filters(s, filters)
    ]
    return sort_snippets(visible, filters.sort_by)


def favorite_count(collection: Iterable[Snippet]) -> int:
    return sum(1 for s in collection if s.is_favorite)
