import copy
import json
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

from deck_server.errors import StorageError, ValidationError


class DeckStore(ABC):
    """Persistence for decks, keyed by deck id.

    A deck is a JSON-compatible list of card dicts. Loading a deck that has
    never been seen stores an empty one and returns it, so a second load gives
    the same result.
    """

    @abstractmethod
    def load(self, deck_id: str) -> List[Dict[str, Any]]: ...

    @abstractmethod
    def save(self, deck_id: str, cards: List[Dict[str, Any]]) -> None: ...


def check_cards(deck_id: str, cards) -> List[Dict[str, Any]]:
    """Make sure a loaded deck is a list of card dicts that each carry a name."""
    if not isinstance(cards, list):
        raise StorageError(f"Deck '{deck_id}' does not hold a list of cards")
    for card in cards:
        if not isinstance(card, dict) or not isinstance(card.get("name"), str):
            raise StorageError(f"Deck '{deck_id}' holds a malformed card")
    return cards


class MemoryDeckStore(DeckStore):
    def __init__(self):
        self._decks: Dict[str, List[Dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def load(self, deck_id):
        with self._lock:
            if deck_id not in self._decks:
                self._decks[deck_id] = []
            return check_cards(deck_id, copy.deepcopy(self._decks[deck_id]))

    def save(self, deck_id, cards):
        with self._lock:
            self._decks[deck_id] = copy.deepcopy(list(cards))


def check_file_deck_id(deck_id: str) -> str:
    """Reject deck ids that cannot be used as a plain file name."""
    if not deck_id or deck_id in (".", ".."):
        raise ValidationError("Invalid deck id")
    if "/" in deck_id or "\\" in deck_id or "\x00" in deck_id:
        raise ValidationError(f"Invalid deck id '{deck_id}'")
    return deck_id


class JsonFileDeckStore(DeckStore):
    """One `<deck_id>.json` file per deck, each holding a JSON array of cards."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _path(self, deck_id: str) -> Path:
        return self.data_dir / f"{check_file_deck_id(deck_id)}.json"

    def load(self, deck_id):
        path = self._path(deck_id)
        if not path.exists():
            self.save(deck_id, [])
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                cards = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read deck '{deck_id}': {e}") from e
        return check_cards(deck_id, cards)

    def save(self, deck_id, cards):
        path = self._path(deck_id)
        tmp_name = None
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            # write beside the target then swap, readers never see half a file
            fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{deck_id}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(list(cards), f, indent=2)
            os.replace(tmp_name, path)
            tmp_name = None
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to write deck '{deck_id}': {e}") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.remove(tmp_name)


def create_deck_store(settings) -> DeckStore:
    """Pick the deck backend named by `settings.deck_store`."""
    if settings.deck_store == "memory":
        return MemoryDeckStore()
    if settings.deck_store == "sqlite":
        from deck_server.utils.db_access import SqliteDeckStore
        return SqliteDeckStore(settings.deck_db_path)
    return JsonFileDeckStore(settings.deck_data_dir)
