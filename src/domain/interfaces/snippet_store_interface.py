from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Tuple


class ISnippetStore(ABC):
    """Remote per-user document store for snippets.

    Domain defines the contract; infrastructure implements it. Every method is
    one independent round trip; nothing is atomic across calls. Failures are
    raised as `StoreError`.
    """

    @abstractmethod
    async def find_by_owner(self, owner_id: str) -> List[Tuple[str, Dict[str, Any]]]:  # (id, document) pairs
        raise NotImplementedError

    @abstractmethod
    async def insert(self, document: Dict[str, Any]) -> str:  # returns the store-assigned id
        raise NotImplementedError

    @abstractmethod
    async def update(self, doc_id: str, document: Dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, doc_id: str) -> None:  # absent ids are not an error
        raise NotImplementedError
