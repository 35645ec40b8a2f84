from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, List, Optional

from src.domain.entities.user_profile import ROLE_ADMIN, ROLE_USER, UserProfile, UserStats
from src.domain.errors import (
    AccountSuspendedError,
    AdminRequiredError,
    AuthenticationError,
    NotAuthenticatedError,
    SnippetValidationError,
    SnippetVaultError,
)
from src.domain.interfaces.identity_interface import IIdentityProvider, IUserDirectory
from src.domain.services.clock import utc_now_iso

from observability import bind_user_context, clear_user_context, emit_event

logger = logging.getLogger(__name__)

CONTEXT_SIGN_IN = "sign_in"
CONTEXT_SIGN_UP = "sign_up"
CONTEXT_RESET = "reset"

_NETWORK_MESSAGE = "Network error. Please check your internet connection and try again."
_INTERNAL_MESSAGE = "An internal error occurred. Please try again."
_INVALID_EMAIL_MESSAGE = "Please enter a valid email address."

_AUTH_MESSAGES: Dict[str, Dict[str, str]] = {
    CONTEXT_SIGN_IN: {
        "invalid-credential": "Invalid email or password. Please check your credentials and try again.",
        "invalid-login-credentials": "Invalid email or password. Please check your credentials and try again.",
        "user-not-found": "No account found with this email address.",
        "wrong-password": "Incorrect password. Please try again.",
        "invalid-email": _INVALID_EMAIL_MESSAGE,
        "user-disabled": "This account has been disabled. Please contact support.",
        "too-many-requests": "Too many failed attempts. Please try again later or reset your password.",
        "network-request-failed": _NETWORK_MESSAGE,
        "internal-error": _INTERNAL_MESSAGE,
    },
    CONTEXT_SIGN_UP: {
        "email-already-in-use": "This email is already registered. Please use a different email or try signing in.",
        "invalid-email": _INVALID_EMAIL_MESSAGE,
        "weak-password": "Password is too weak. Please use at least 6 characters with a mix of letters and numbers.",
        "operation-not-allowed": "Email/password accounts are not enabled. Please contact support.",
        "network-request-failed": _NETWORK_MESSAGE,
        "internal-error": _INTERNAL_MESSAGE,
    },
    CONTEXT_RESET: {
        "user-not-found": "No account found with this email",
        "invalid-email": "Invalid email address",
    },
}

_FALLBACK_MESSAGES: Dict[str, str] = {
    CONTEXT_SIGN_IN: "Sign in failed. Please try again.",
    CONTEXT_SIGN_UP: "Failed to create account. Please try again.",
    CONTEXT_RESET: "Failed to send reset email",
}

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def auth_error_message(code: Optional[str], context: str = CONTEXT_SIGN_IN) -> str:
    """User-facing text for a provider error code (``auth/`` prefix optional)."""
    key = (code or "").strip()
    if key.startswith("auth/"):
        key = key[len("auth/"):]
    table = _AUTH_MESSAGES.get(context, {})
    return table.get(key) or _FALLBACK_MESSAGES.get(context, _FALLBACK_MESSAGES[CONTEXT_SIGN_IN])


def _clean_email(email: Optional[str]) -> str:
    value = (email or "").strip()
    if not value:
        raise SnippetValidationError("Email is required")
    if not _EMAIL_RE.match(value):
        raise SnippetValidationError(_INVALID_EMAIL_MESSAGE)
    return value


class SessionManager:
    """Signed-in identity plus the matching profile record.

    The profile's role is the only authorization signal; admin operations
    check it before touching the directory.
    """

    def __init__(
        self,
        identity_provider: IIdentityProvider,
        user_directory: IUserDirectory,
        admin_email: Optional[str] = None,
        min_password_length: int = 6,
        clock: Callable[[], str] = utc_now_iso,
    ) -> None:
        self._identity = identity_provider
        self._directory = user_directory
        self._admin_email = (admin_email or "").strip().lower()
        self._min_password_length = int(min_password_length)
        self._clock = clock
        self._profile: Optional[UserProfile] = None

    # ---------- identity ----------
    @property
    def current_user_id(self) -> Optional[str]:
        return self._identity.current_user_id()

    @property
    def profile(self) -> Optional[UserProfile]:
        return self._profile

    @property
    def is_admin(self) -> bool:
        return bool(self._profile and self._profile.role == ROLE_ADMIN)

    def require_user(self) -> str:
        uid = self.current_user_id
        if not uid:
            raise NotAuthenticatedError("User not authenticated")
        return uid

    async def sign_up(self, email: str, password: str, display_name: str) -> UserProfile:
        email = _clean_email(email)
        if not password:
            raise SnippetValidationError("Password is required")
        if len(password) < self._min_password_length:
            raise SnippetValidationError(
                f"Password must be at least {self._min_password_length} characters"
            )
        name = (display_name or "").strip()
        if not name:
            raise SnippetValidationError("Display name is required")

        uid = await self._call_provider(CONTEXT_SIGN_UP, self._identity.sign_up, email, password)
        now = self._clock()
        role = ROLE_ADMIN if self._admin_email and email.lower() == self._admin_email else ROLE_USER
        profile = UserProfile(
            uid=uid,
            email=email,
            display_name=name,
            role=role,
            is_active=True,
            created_at=now,
            last_login_at=now,
        )
        try:
            await self._directory.create(profile)
        except SnippetVaultError as e:
            # The account exists at the provider even when the profile write fails.
            emit_event("profile_create_failed", severity="warn", user_id=uid, error=str(e))
        self._profile = profile
        bind_user_context(user_id=uid)
        emit_event("user_signed_up", user_id=uid, role=role)
        return profile

    async def sign_in(self, email: str, password: str) -> Optional[UserProfile]:
        email = _clean_email(email)
        if not password:
            raise SnippetValidationError("Password is required")

        uid = await self._call_provider(CONTEXT_SIGN_IN, self._identity.sign_in, email, password)
        try:
            await self._directory.update(uid, {"lastLoginAt": self._clock()})
        except SnippetVaultError as e:
            logger.warning("failed to record last login: %s", e)

        try:
            profile = await self._directory.get(uid)
        except SnippetVaultError as e:
            logger.warning("failed to load profile: %s", e)
            profile = None

        if profile is not None and not profile.is_active:
            await self._reject_suspended(uid, "suspended_sign_in_rejected")

        self._profile = profile
        bind_user_context(user_id=uid)
        emit_event("user_signed_in", user_id=uid)
        return profile

    async def restore(self) -> Optional[UserProfile]:
        """Pick up a session the identity provider already holds.

        Run once at startup, before the vault mounts, so the role and
        suspension checks apply to a persisted login the same way they do
        to `sign_in`.
        """
        uid = self.current_user_id
        if not uid:
            self._profile = None
            clear_user_context()
            return None

        try:
            profile = await self._directory.get(uid)
        except SnippetVaultError as e:
            logger.warning("failed to load profile: %s", e)
            profile = None

        if profile is not None and not profile.is_active:
            await self._reject_suspended(uid, "suspended_session_rejected")

        self._profile = profile
        bind_user_context(user_id=uid)
        emit_event("session_restored", user_id=uid, is_admin=self.is_admin)
        return profile

    async def _reject_suspended(self, uid: str, event: str) -> None:
        await self._identity.sign_out()
        self._profile = None
        clear_user_context()
        emit_event(event, severity="warn", user_id=uid)
        raise AccountSuspendedError()

    async def sign_out(self) -> None:
        uid = self.current_user_id
        await self._identity.sign_out()
        self._profile = None
        clear_user_context()
        emit_event("user_signed_out", user_id=uid)

    async def reset_password(self, email: str) -> None:
        email = _clean_email(email)
        await self._call_provider(CONTEXT_RESET, self._identity.send_password_reset, email)
        emit_event("password_reset_requested")

    async def update_profile(self, fields: Dict[str, Any]) -> UserProfile:
        uid = self.require_user()
        await self._directory.update(uid, dict(fields))
        current = self._profile.to_document() if self._profile else {"uid": uid}
        current.update(fields)
        self._profile = UserProfile.from_document(current)
        return self._profile

    # ---------- admin ----------
    def _require_admin(self) -> None:
        if not self.is_admin:
            raise AdminRequiredError()

    async def list_users(self) -> List[UserProfile]:
        self._require_admin()
        return await self._directory.list_all()

    async def suspend_user(self, uid: str) -> None:
        self._require_admin()
        await self._directory.update(uid, {"isActive": False, "suspendedAt": self._clock()})
        emit_event("user_suspended", severity="warn", target_user_id=uid)

    async def activate_user(self, uid: str) -> None:
        self._require_admin()
        await self._directory.update(uid, {"isActive": True, "suspendedAt": None})
        emit_event("user_activated", target_user_id=uid)

    async def user_stats(self) -> UserStats:
        self._require_admin()
        users = await self._directory.list_all()
        total = len(users)
        active = sum(1 for u in users if u.is_active)
        admins = sum(1 for u in users if u.role == ROLE_ADMIN)
        return UserStats(
            total_users=total,
            active_users=active,
            suspended_users=total - active,
            admin_users=admins,
            regular_users=total - admins,
        )

    async def _call_provider(self, context: str, fn, *args: Any) -> Any:
        try:
            return await fn(*args)
        except AuthenticationError as e:
            message = auth_error_message(e.code, context)
            emit_event("auth_failed", severity="warn", context=context, code=e.code)
            raise AuthenticationError(e.code, message) from e
