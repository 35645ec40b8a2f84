from __future__ import annotations

from typing import Optional


class SnippetVaultError(Exception):
    """Base class for all errors raised by the snippet engine."""


class SnippetValidationError(SnippetVaultError, ValueError):
    """Input rejected before any state change (missing title, empty code, ...)."""


class NotAuthenticatedError(SnippetVaultError):
    """An operation needs a signed-in owner and none is present."""


class AuthenticationError(SnippetVaultError):
    """Sign in/up/reset failed at the identity provider.

    `code` is the provider's error code (e.g. ``auth/wrong-password``);
    `message` is the user-facing text resolved from it.
    """

    def __init__(self, code: str, message: Optional[str] = None) -> None:
        self.code = str(code or "")
        self.message = message or self.code or "Authentication failed"
        super().__init__(self.message)


class AccountSuspendedError(AuthenticationError):
    def __init__(self, message: str = "Account suspended. Please contact administrator.") -> None:
        super().__init__("auth/account-suspended", message)


class AdminRequiredError(SnippetVaultError):
    def __init__(self, message: str = "Unauthorized: Admin access required") -> None:
        super().__init__(message)


class StoreError(SnippetVaultError):
    """The remote document store failed a read or write."""


class SnippetNotFoundError(SnippetVaultError, KeyError):
    def __init__(self, snippet_id: str) -> None:
        self.snippet_id = snippet_id
        super().__init__(f"Snippet not found: {snippet_id}")

    def __str__(self) -> str:
        return str(self.args[0])


class ProtectedCategoryError(SnippetVaultError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Cannot delete "{name}" category')


class CategoryExistsError(SnippetVaultError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__("Category already exists!")


class ImportFormatError(SnippetVaultError, ValueError):
    """An import file is not a JSON array of snippet objects."""
