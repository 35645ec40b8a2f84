from __future__ import annotations

from typing import List, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    DotEnvSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class VaultConfig(BaseSettings):
    """
    Main SnippetVault configuration, based on Pydantic Settings.

    - Reads environment variables and `.env` / `.env.local` automatically.
    - Performs type coercion and clear validation.
    """

    # Required
    MONGODB_URL: str = Field(..., description="MongoDB connection string")

    # Database basics
    DATABASE_NAME: str = Field(default="snippetvault", description="MongoDB database name")
    SNIPPETS_COLLECTION: str = Field(
        default="snippets", description="Collection holding per-user snippet documents"
    )
    USERS_COLLECTION: str = Field(
        default="users", description="Collection holding user profile documents"
    )
    OWNER_FIELD: str = Field(
        default="userId", description="Owner field used as the sole listing predicate"
    )

    # MongoDB pooling/timeouts
    MONGODB_MAX_POOL_SIZE: int = Field(
        default=50,
        ge=1,
        le=100_000,
        description="MongoDB connection pool max size (maxPoolSize)",
    )
    MONGODB_MIN_POOL_SIZE: int = Field(
        default=5,
        ge=0,
        le=100_000,
        description="MongoDB connection pool min size (minPoolSize)",
    )
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = Field(
        default=3_000,
        ge=100,
        le=600_000,
        description="MongoDB server selection timeout in ms (serverSelectionTimeoutMS)",
    )
    MONGODB_SOCKET_TIMEOUT_MS: int = Field(
        default=20_000,
        ge=0,
        le=3_600_000,
        description="MongoDB socket timeout in ms (socketTimeoutMS)",
    )
    MONGODB_CONNECT_TIMEOUT_MS: int = Field(
        default=10_000,
        ge=0,
        le=3_600_000,
        description="MongoDB connect timeout in ms (connectTimeoutMS)",
    )
    MONGODB_APPNAME: Optional[str] = Field(
        default="snippetvault", description="MongoDB appName client metadata"
    )

    # Accounts
    ADMIN_EMAIL: Optional[str] = Field(
        default=None,
        description="Sign-ups with this email receive the admin role",
    )
    MIN_PASSWORD_LENGTH: int = Field(
        default=6, ge=1, le=128, description="Minimum password length on sign-up"
    )

    # Local per-user preferences (category order, filter defaults)
    PREFERENCES_DIR: str = Field(
        default=".snippetvault",
        description="Directory for per-user local preference files",
    )
    DEFAULT_CATEGORIES: List[str] = Field(
        default_factory=lambda: [
            "All",
            "Favourite",
            "General",
            "Markdown",
            "GitHub",
            "GPT for Study",
            "ADB",
            "CMD",
            "LaTeX",
            "Uncategorized",
        ],
        description="Category tabs for a user without saved preferences",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Minimum log level")
    LOG_FORMAT: str = Field(default="json", description="json or console")

    # Styling
    HIGHLIGHT_THEME: str = Field(default="github-dark", description="Pygments theme")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Allow a chain of .env files: .env.local first, then .env, on top of the environment."""
        return (
            init_settings,
            env_settings,
            DotEnvSettingsSource(settings_cls, env_file=".env.local", case_sensitive=True),
            DotEnvSettingsSource(settings_cls, env_file=".env", case_sensitive=True),
            file_secret_settings,
        )

    @field_validator("MONGODB_URL")
    @classmethod
    def _validate_mongodb_url(cls, v: str) -> str:
        if not v or not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError(
                "MONGODB_URL must start with mongodb:// or mongodb+srv://"
            )
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def _validate_log_format(cls, v: str) -> str:
        value = (v or "").strip().lower()
        if value not in {"json", "console"}:
            raise ValueError("LOG_FORMAT must be 'json' or 'console'")
        return value

    @field_validator("DEFAULT_CATEGORIES", mode="before")
    @classmethod
    def _parse_default_categories(cls, v):
        """Accept a CSV string as well as a list; empty tokens are dropped."""
        if v is None or v == "":
            return []
        if isinstance(v, str):
            return [p.strip() for p in v.split(",") if p.strip()]
        return v


def load_config() -> VaultConfig:
    """Load configuration and return a VaultConfig instance."""
    return VaultConfig()


# Global instance built at import time
try:
    config = load_config()
except ValidationError as exc:
    raise ValueError(str(exc)) from exc
