from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class IPreferencesStore(ABC):
    """Local, per-user persistence of category order and filter defaults.

    Survives restarts on this machine only; nothing here is synced remotely.
    """

    @abstractmethod
    def load_categories(self, user_id: str) -> Optional[List[str]]:
        raise NotImplementedError

    @abstractmethod
    def save_categories(self, user_id: str, categories: List[str]) -> None:
        raise NotImplementedError

    @abstractmethod
    def load_filters(self, user_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def save_filters(self, user_id: str, filters: Dict[str, Any]) -> None:
        raise NotImplementedError
