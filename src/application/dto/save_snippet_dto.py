from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from src.domain.errors import SnippetValidationError


@dataclass
class SaveSnippetDTO:
    """Form data for creating or editing a snippet.

    Only the checks that block a save live here; shape coercion is the
    normalizer's job.
    """

    title: str
    code: str = ""
    description: str = ""
    language: str = ""
    categories: List[str] = field(default_factory=list)
    tags: Any = None
    snippets: List[Dict[str, Any]] = field(default_factory=list)
    is_favorite: bool = False
    created_at: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.title, str) or not self.title.strip():
            raise SnippetValidationError("Title is required")
        has_code = isinstance(self.code, str) and bool(self.code.strip())
        has_block = any(
            isinstance(b, Mapping) and str(b.get("code") or "").strip() for b in (self.snippets or [])
        )
        if not has_code and not has_block:
            raise SnippetValidationError("Code is required")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SaveSnippetDTO":
        if not isinstance(data, Mapping):
            raise SnippetValidationError("Snippet data must be a mapping")
        blocks = data.get("snippets")
        categories = data.get("categories")
        if not isinstance(categories, (list, tuple)):
            legacy = data.get("category")
            categories = [legacy] if legacy else []
        return cls(
            title=str(data.get("title") or ""),
            code=str(data.get("code") or data.get("content") or ""),
            description=str(data.get("description") or ""),
            language=str(data.get("language") or ""),
            categories=[str(c) for c in categories if c],
            tags=data.get("tags"),
            snippets=[dict(b) for b in blocks if isinstance(b, Mapping)] if isinstance(blocks, (list, tuple)) else [],
            is_favorite=bool(data.get("isFavorite", data.get("is_favorite", False))),
            created_at=data.get("createdAt") or data.get("created_at"),
        )

    def to_mapping(self) -> Dict[str, Any]:
        return {
            "title": self.title.strip(),
            "code": self.code,
            "description": self.description,
            "language": self.language,
            "categories": list(self.categories),
            "tags": self.tags,
            "snippets": [dict(b) for b in self.snippets],
            "isFavorite": bool(self.is_favorite),
            "createdAt": self.created_at,
        }
