from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from src.domain.entities.user_profile import UserProfile


class IIdentityProvider(ABC):
    """Authentication capability. Failures raise `AuthenticationError` carrying the provider code."""

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> str:  # returns the new opaque user id
        raise NotImplementedError

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> str:
        raise NotImplementedError

    @abstractmethod
    async def sign_out(self) -> None:
        raise NotImplementedError

    @abstractmethod
    async def send_password_reset(self, email: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def current_user_id(self) -> Optional[str]:
        raise NotImplementedError


class IUserDirectory(ABC):
    """Profile records, one per account."""

    @abstractmethod
    async def get(self, uid: str) -> Optional[UserProfile]:
        raise NotImplementedError

    @abstractmethod
    async def create(self, profile: UserProfile) -> None:
        raise NotImplementedError

    @abstractmethod
    async def update(self, uid: str, fields: Dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    async def list_all(self) -> List[UserProfile]:
        raise NotImplementedError
