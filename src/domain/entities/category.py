from __future__ import annotations

from typing import FrozenSet, Iterable, List

ALL = "All"
FAVOURITE = "Favourite"
UNCATEGORIZED = "Uncategorized"

# Virtual tabs are never stored on a snippet.
VIRTUAL_CATEGORIES: FrozenSet[str] = frozenset({ALL, FAVOURITE})
PROTECTED_CATEGORIES: FrozenSet[str] = frozenset({ALL, FAVOURITE, UNCATEGORIZED})

DEFAULT_CATEGORIES: List[str] = [
    ALL,
    FAVOURITE,
    "General",
    "Markdown",
    "GitHub",
    "GPT for Study",
    "ADB",
    "CMD",
    "LaTeX",
    UNCATEGORIZED,
]


def is_protected(name: str) -> bool:
    return name in PROTECTED_CATEGORIES


def is_virtual(name: str) -> bool:
    return name in VIRTUAL_CATEGORIES


def user_category_count(categories: Iterable[str]) -> int:
    """Number of categories shown to the user, virtual tabs excluded."""
    return sum(1 for c in categories if not is_virtual(c))
