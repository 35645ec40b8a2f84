"""
Domain service: coerce loosely-typed snippet input into the canonical record.

Accepts save-form data, import-file entries and stored documents (including
the legacy shape with a singular ``category`` and a ``content`` body). This
is the single place where the legacy shape is migrated; everything past the
normalizer sees a `Snippet` whose ``categories`` is never empty.

Pure Python only; never raises on bad input.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional

from src.domain.entities.category import UNCATEGORIZED
from src.domain.entities.snippet import CodeBlock, Snippet


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _as_optional_str(value: Any) -> Optional[str]:
    text = _as_str(value).strip()
    return text or None


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _as_timestamp(value: Any) -> Optional[str]:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _split_raw(value: Any) -> List[str]:
    """Accept a list of strings or a single comma-separated string."""
    if isinstance(value, str):
        return [p.strip() for p in value.split(",")]
    if isinstance(value, (list, tuple)):
        return [_as_str(v).strip() for v in value]
    return []


def dedupe_tags(tags: Any) -> List[str]:
    """Drop empty tags and case-insensitive duplicates, keeping first-seen casing and order."""
    seen: set[str] = set()
    out: List[str] = []
    for tag in _split_raw(tags):
        if not tag:
            continue
        key = tag.casefold()
        if key in seen:
            continue
        seen.add(key)
        out.append(tag)
    return out


def clean_categories(categories: Any, legacy_category: Any = None) -> List[str]:
    """Non-empty, duplicate-free category list; falls back to the legacy field, then Uncategorized."""
    out: List[str] = []
    if isinstance(categories, (list, tuple)):
        for c in categories:
            name = _as_str(c).strip()
            if name and name not in out:
                out.append(name)
    if not out:
        legacy = _as_str(legacy_category).strip()
        out = [legacy] if legacy else [UNCATEGORIZED]
    return out


def _clean_blocks(blocks: Any) -> List[CodeBlock]:
    if not isinstance(blocks, (list, tuple)):
        return []
    out: List[CodeBlock] = []
    for b in blocks:
        if isinstance(b, CodeBlock):
            out.append(CodeBlock(code=b.code, description=b.description, language=b.language))
        elif isinstance(b, Mapping):
            out.append(
                CodeBlock(
                    code=_as_str(b.get("code")),
                    description=_as_str(b.get("description")),
                    language=_as_str(b.get("language")),
                )
            )
    return out


class SnippetNormalizer:
    """Normalize arbitrary snippet input into a fully-populated `Snippet`."""

    def normalize(self, data: Any) -> Snippet:
        if isinstance(data, Snippet):
            data = data.to_document()
        if not isinstance(data, Mapping):
            return Snippet()

        blocks = _clean_blocks(data.get("snippets"))
        code = _as_str(data.get("code")) or _as_str(data.get("content"))
        if blocks:
            # Multi-snippet form takes precedence for persistence
            code = ""

        return Snippet(
            title=_as_str(data.get("title")),
            description=_as_str(data.get("description")),
            code=code,
            language=_as_str(data.get("language")),
            categories=clean_categories(data.get("categories"), data.get("category")),
            tags=dedupe_tags(data.get("tags")),
            snippets=blocks,
            is_favorite=_as_bool(data.get("isFavorite", data.get("is_favorite", False))),
            created_at=_as_timestamp(data.get("createdAt", data.get("created_at"))),
            updated_at=_as_timestamp(data.get("updatedAt", data.get("updated_at"))),
            id=_as_optional_str(data.get("id")),
            user_id=_as_optional_str(data.get("userId", data.get("user_id"))),
        )

    def normalize_many(self, items: Iterable[Any]) -> List[Snippet]:
        return [self.normalize(item) for item in items]


_default_normalizer = SnippetNormalizer()


def migrate_document(doc: Mapping[str, Any], doc_id: Optional[str] = None) -> Snippet:
    """Read-time migration of a stored document into the canonical record.

    The store's identifier wins over any ``id`` field left inside the document.
    """
    snippet = _default_normalizer.normalize(doc)
    if doc_id is not None:
        snippet.id = str(doc_id)
    return snippet
