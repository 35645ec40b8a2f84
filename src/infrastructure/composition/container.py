from __future__ import annotations

import threading
from typing import Any, Optional

_vault_service_singleton = None  # type: Optional["VaultService"]
_singleton_lock = threading.Lock()


def build_vault_service(identity_provider: Any, db_manager: Any = None, settings: Any = None):
    """
    Composition Root: wire a VaultService over MongoDB and local preferences.
    The identity provider is supplied by the host; only its interface lives here.
    """
    # Lazy imports to avoid hard coupling at import time and ease tests/mocks
    from src.application.services.category_manager import CategoryManager
    from src.application.services.session_manager import SessionManager
    from src.application.services.snippet_gateway import SnippetGateway
    from src.application.services.vault_service import VaultService
    from src.infrastructure.database.mongodb.repositories.snippet_store import MongoSnippetStore
    from src.infrastructure.database.mongodb.repositories.user_directory import MongoUserDirectory
    from src.infrastructure.preferences.json_preferences_store import JsonPreferencesStore

    if settings is None:
        from config import config as settings  # type: ignore
    if db_manager is None:
        from database import get_db  # type: ignore

        db_manager = get_db()

    store = MongoSnippetStore(db_manager, owner_field=settings.OWNER_FIELD)
    gateway = SnippetGateway(store, owner_field=settings.OWNER_FIELD)
    preferences = JsonPreferencesStore(settings.PREFERENCES_DIR)
    session = SessionManager(
        identity_provider,
        MongoUserDirectory(db_manager),
        admin_email=settings.ADMIN_EMAIL,
        min_password_length=settings.MIN_PASSWORD_LENGTH,
    )
    return VaultService(
        gateway=gateway,
        categories=CategoryManager(gateway, preferences),
        session=session,
        preferences=preferences,
        default_categories=settings.DEFAULT_CATEGORIES or None,
    )


def get_vault_service(identity_provider: Any = None):
    """Build once, then return the same VaultService (thread-safe first call)."""
    global _vault_service_singleton
    if _vault_service_singleton is not None:
        return _vault_service_singleton

    with _singleton_lock:
        if _vault_service_singleton is not None:
            return _vault_service_singleton
        if identity_provider is None:
            raise RuntimeError("an identity provider is required on first use")
        from config import config  # type: ignore
        from observability import setup_structlog_logging

        setup_structlog_logging(config.LOG_LEVEL, config.LOG_FORMAT)
        _vault_service_singleton = build_vault_service(identity_provider, settings=config)
        return _vault_service_singleton


def get_highlight_service():
    from src.application.services.highlight_service import HighlightService
    from config import config  # type: ignore

    return HighlightService(theme=config.HIGHLIGHT_THEME)


def reset_container_for_tests() -> None:
    global _vault_service_singleton
    _vault_service_singleton = None
