from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from src.domain.entities.category import UNCATEGORIZED


@dataclass
class CodeBlock:
    """One code body inside a multi-snippet record (e.g. setup + usage)."""

    code: str = ""
    description: str = ""
    language: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "description": self.description, "language": self.language}


@dataclass
class Snippet:
    """Domain entity: a user-authored code record.

    Kept framework-free to allow use across layers. Field names are snake_case
    here; `to_document` produces the camelCase shape stored remotely and used
    by backup files.
    """

    title: str = ""
    description: str = ""
    code: str = ""
    language: str = ""
    categories: List[str] = field(default_factory=lambda: [UNCATEGORIZED])
    tags: List[str] = field(default_factory=list)
    snippets: List[CodeBlock] = field(default_factory=list)
    is_favorite: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    id: Optional[str] = None
    user_id: Optional[str] = None

    @property
    def category(self) -> str:
        """Legacy single-category field, kept for older readers."""
        return self.categories[0] if self.categories else UNCATEGORIZED

    @property
    def has_multiple_snippets(self) -> bool:
        return len(self.snippets) > 0

    def copy_with(self, **changes: Any) -> "Snippet":
        """Return a deep copy with `changes` applied; the original is left untouched."""
        return replace(copy.deepcopy(self), **changes)

    def to_document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "code": self.code,
            "language": self.language,
            "category": self.category,
            "categories": list(self.categories),
            "tags": list(self.tags),
            "snippets": [b.to_dict() for b in self.snippets],
            "isFavorite": bool(self.is_favorite),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.id is not None:
            doc["id"] = self.id
        if self.user_id is not None:
            doc["userId"] = self.user_id
        return doc
