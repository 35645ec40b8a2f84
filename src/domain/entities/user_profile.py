from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

ROLE_ADMIN = "admin"
ROLE_USER = "user"


@dataclass
class UserProfile:
    """Profile record kept in the user directory, one per account."""

    uid: str
    email: str
    display_name: str = ""
    role: str = ROLE_USER
    is_active: bool = True
    created_at: Optional[str] = None
    last_login_at: Optional[str] = None
    suspended_at: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def to_document(self) -> Dict[str, Any]:
        return {
            "uid": self.uid,
            "email": self.email,
            "displayName": self.display_name,
            "role": self.role,
            "isActive": bool(self.is_active),
            "createdAt": self.created_at,
            "lastLoginAt": self.last_login_at,
            "suspendedAt": self.suspended_at,
        }

    @classmethod
    def from_document(cls, d: Dict[str, Any]) -> "UserProfile":
        return cls(
            uid=str(d.get("uid", "") or ""),
            email=str(d.get("email", "") or ""),
            display_name=str(d.get("displayName", "") or ""),
            role=str(d.get("role", ROLE_USER) or ROLE_USER),
            is_active=bool(d.get("isActive", True)),
            created_at=d.get("createdAt"),
            last_login_at=d.get("lastLoginAt"),
            suspended_at=d.get("suspendedAt"),
        )


@dataclass
class UserStats:
    total_users: int = 0
    active_users: int = 0
    suspended_users: int = 0
    admin_users: int = 0
    regular_users: int = 0
