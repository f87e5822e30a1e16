import json
import sqlite3
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from deck_server.errors import StorageError
from deck_server.utils.deck_store import DeckStore, check_cards


def get_db_connection(db_path: Path):
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row  # Allows accessing columns by name
    return conn


def init_db(db_path: Path):
    """
    Create the Decks table if it does not exist yet.
    Each row is one deck: its id and the card list as a JSON document.
    """
    db_path = Path(db_path)
    try:
        if not db_path.parent.exists():
            db_path.parent.mkdir(parents=True)

        conn = get_db_connection(db_path)
        try:
            conn.execute("""
            CREATE TABLE IF NOT EXISTS Decks (
                deck_id TEXT NOT NULL PRIMARY KEY,
                cards TEXT NOT NULL DEFAULT '[]',
                updated_at TEXT DEFAULT CURRENT_TIMESTAMP
            );
            """)
            conn.commit()
        finally:
            conn.close()
    except (OSError, sqlite3.Error) as e:
        raise StorageError(f"Failed to initialise deck database: {e}") from e


def get_deck_document(db_path: Path, deck_id: str) -> Optional[List[Dict[str, Any]]]:
    """Return the stored card list for deck_id, or None if the deck has no row."""
    try:
        conn = get_db_connection(db_path)
        try:
            row = conn.execute("SELECT cards FROM Decks WHERE deck_id = ?", (deck_id,)).fetchone()
        finally:
            conn.close()
    except sqlite3.Error as e:
        raise StorageError(f"Failed to read deck '{deck_id}': {e}") from e

    if row is None:
        return None
    try:
        cards = json.loads(row["cards"])
    except ValueError as e:
        raise StorageError(f"Deck '{deck_id}' holds invalid JSON: {e}") from e
    if not isinstance(cards, list):
        raise StorageError(f"Deck '{deck_id}' does not hold a list of cards")
    return cards


def put_deck_document(db_path: Path, deck_id: str, cards: List[Dict[str, Any]]) -> None:
    """Insert or overwrite the whole card list of a deck in one transaction."""
    try:
        document = json.dumps(list(cards))
    except (TypeError, ValueError) as e:
        raise StorageError(f"Deck '{deck_id}' is not serialisable: {e}") from e

    try:
        conn = get_db_connection(db_path)
        try:
            with conn:
                conn.execute("""
                    INSERT OR REPLACE INTO Decks (deck_id, cards, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                """, (deck_id, document))
        finally:
            conn.close()
    except sqlite3.Error as e:
        raise StorageError(f"Failed to write deck '{deck_id}': {e}") from e


class SqliteDeckStore(DeckStore):
    """Deck documents kept in a single SQLite file."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._lock = threading.Lock()
        init_db(self.db_path)

    def load(self, deck_id):
        with self._lock:
            cards = get_deck_document(self.db_path, deck_id)
            if cards is None:
                put_deck_document(self.db_path, deck_id, [])
                cards = []
        return check_cards(deck_id, cards)

    def save(self, deck_id, cards):
        with self._lock:
            put_deck_document(self.db_path, deck_id, cards)
