import pytest
from pydantic import ValidationError

from config import VaultConfig


def test_defaults(monkeypatch):
    monkeypatch.setenv("MONGODB_URL", "mongodb://localhost:27017/x")
    cfg = VaultConfig()
    assert cfg.DATABASE_NAME == "snippetvault"
    assert cfg.SNIPPETS_COLLECTION == "snippets"
    assert cfg.USERS_COLLECTION == "users"
    assert cfg.OWNER_FIELD == "userId"
    assert cfg.MIN_PASSWORD_LENGTH == 6
    assert cfg.DEFAULT_CATEGORIES[0] == "All"


def test_rejects_non_mongo_url(monkeypatch):
    monkeypatch.setenv("MONGODB_URL", "postgres://nope")
    with pytest.raises(ValidationError):
        VaultConfig()


def test_log_format_is_normalized(monkeypatch):
    monkeypatch.setenv("MONGODB_URL", "mongodb+srv://cluster.example.net")
    monkeypatch.setenv("LOG_FORMAT", " Console ")
    assert VaultConfig().LOG_FORMAT == "console"
    monkeypatch.setenv("LOG_FORMAT", "xml")
    with pytest.raises(ValidationError):
        VaultConfig()


def test_default_categories_from_csv_string(monkeypatch):
    monkeypatch.setenv("MONGODB_URL", "mongodb://localhost")
    cfg = VaultConfig(DEFAULT_CATEGORIES="All, Work ,, Uncategorized")
    assert cfg.DEFAULT_CATEGORIES == ["All", "Work", "Uncategorized"]


def test_default_categories_from_list(monkeypatch):
    monkeypatch.setenv("MONGODB_URL", "mongodb://localhost")
    cfg = VaultConfig(DEFAULT_CATEGORIES=["All", "Work", "Uncategorized"])
    assert cfg.DEFAULT_CATEGORIES == ["All", "Work", "Uncategorized"]
