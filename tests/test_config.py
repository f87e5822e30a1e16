from pathlib import Path

import pytest

from deck_server.config import DEFAULT_ORACLE_CARDS_SOURCE, DEFAULT_STATIC_DIR, Settings, load_settings

ENV_VARS = [
    "ENV", "HOST", "PORT", "DECK_STORE", "DECK_DATA_DIR", "DECK_DB_PATH",
    "ORACLE_CARDS_SOURCE", "FEATURED_DECKS_SOURCE", "REFERENCE_TIMEOUT",
    "STATIC_DIR", "CORS_ORIGINS", "LOG_DIR",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


def test_defaults():
    settings = load_settings()
    assert settings.env == "dev"
    assert settings.port == 3000
    assert settings.deck_store == "json"
    assert settings.deck_data_dir == Path("data/decks")
    assert settings.oracle_cards_source == DEFAULT_ORACLE_CARDS_SOURCE
    assert settings.static_dir == DEFAULT_STATIC_DIR
    assert settings.cors_origins == ["*"]


def test_from_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("DECK_STORE", "SQLite")
    monkeypatch.setenv("DECK_DB_PATH", "/tmp/decks.db")
    monkeypatch.setenv("FEATURED_DECKS_SOURCE", "/srv/featured.json")
    monkeypatch.setenv("REFERENCE_TIMEOUT", "2.5")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
    settings = load_settings()
    assert settings.port == 8080
    assert settings.deck_store == "sqlite"
    assert settings.deck_db_path == Path("/tmp/decks.db")
    assert settings.featured_decks_source == "/srv/featured.json"
    assert settings.reference_timeout == 2.5
    assert settings.cors_origins == ["https://a.example", "https://b.example"]


def test_unknown_backend(monkeypatch):
    monkeypatch.setenv("DECK_STORE", "mongo")
    with pytest.raises(ValueError):
        load_settings()


def test_unknown_backend_direct():
    with pytest.raises(ValueError):
        Settings(deck_store="postgres")
