import threading
import weakref
from typing import Any, Dict, List

from deck_server.card_utils.deck_mutator import DeckOperation, apply_operation
from deck_server.errors import NotFound
from deck_server.utils.deck_store import DeckStore
from server_logs.loggers import deck_logger

EVENT_NAMES = {
    DeckOperation.ADD: "deck_card_added",
    DeckOperation.REMOVE: "deck_card_removed",
    DeckOperation.UPDATE: "deck_card_updated",
    DeckOperation.DELETE: "deck_card_deleted",
}


class DeckService:
    """Runs the load -> edit -> save cycle for one deck at a time.

    Edits on the same deck id are serialised with a per-deck lock so two
    requests cannot both read the old list and overwrite each other. Separate
    processes sharing a backend still race; the last save wins there.
    """

    def __init__(self, store: DeckStore):
        self.store = store
        # a deck's lock lives only while some request holds it
        self._locks = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()

    def _lock_for(self, deck_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(deck_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[deck_id] = lock
            return lock

    def get_deck(self, deck_id: str) -> List[Dict[str, Any]]:
        with self._lock_for(deck_id):
            return self.store.load(deck_id)

    def apply(self, deck_id: str, operation: DeckOperation, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        operation = DeckOperation(operation)
        log = deck_logger.bind(deck_id=deck_id, name=payload.get("name"), type=payload.get("type"))

        with self._lock_for(deck_id):
            cards = self.store.load(deck_id)
            try:
                updated = apply_operation(cards, operation, payload)
            except NotFound:
                log.warning("deck_card_not_found", operation=operation.value)
                raise
            self.store.save(deck_id, updated)

        log.info(EVENT_NAMES[operation], deck_size=len(updated))
        return updated
