import json

import pytest
from fastapi.testclient import TestClient

from deck_server.config import Settings
from deck_server.server import create_app

ORACLE_CARDS = [
    {"name": "Lightning Bolt", "type_line": "Instant", "mana_cost": "{R}"},
    {"name": "Llanowar Elves", "type_line": "Creature - Elf Druid", "mana_cost": "{G}"},
]

FEATURED_DECKS = [
    {"name": "Mono Red Aggro", "cards": [{"name": "Lightning Bolt", "count": 4}]},
]


@pytest.fixture
def reference_files(tmp_path):
    oracle = tmp_path / "oracle-cards.json"
    featured = tmp_path / "featured-decks.json"
    oracle.write_text(json.dumps(ORACLE_CARDS), encoding="utf-8")
    featured.write_text(json.dumps(FEATURED_DECKS), encoding="utf-8")
    return oracle, featured


@pytest.fixture
def static_dir(tmp_path):
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<html><body>deck builder</body></html>", encoding="utf-8")
    (public / "app.js").write_text("console.log('deck builder');", encoding="utf-8")
    return public


@pytest.fixture
def settings(tmp_path, reference_files, static_dir):
    oracle, featured = reference_files
    return Settings(
        deck_store="memory",
        deck_data_dir=tmp_path / "decks",
        deck_db_path=tmp_path / "decks.db",
        oracle_cards_source=str(oracle),
        featured_decks_source=str(featured),
        static_dir=static_dir,
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings=settings)) as c:
        yield c
