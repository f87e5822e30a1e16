# Card-level edits on a deck.
# Every function here takes the deck's current card list and returns a new
# list; the input list and the dicts inside it are never modified, so a failed
# edit leaves nothing half-applied for the caller to persist.
from enum import Enum
from typing import Any, Dict, List, Optional

from deck_server.errors import NotFound
from deck_server.card_utils.card import Card, card_key


class DeckOperation(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    UPDATE = "update"
    # "delete" is the same edit as "remove", exposed under a second route
    DELETE = "delete"


def _find_card(cards: List[Card], name: str, card_type: Optional[str]) -> Optional[int]:
    wanted = card_key(name, card_type)
    for i, card in enumerate(cards):
        if card.key == wanted:
            return i
    return None


def _not_found(name: str, card_type: Optional[str]) -> NotFound:
    if card_type:
        return NotFound(f"Card '{name}' ({card_type}) not found in deck")
    return NotFound(f"Card '{name}' not found in deck")


def add_card(cards: List[Dict[str, Any]], name: str, card_type: Optional[str] = None,
             image_uris: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """Add one copy of a card.

    A card already in the deck under the same (name, type) has its count bumped
    by one; otherwise a new entry with count 1 is appended.
    """
    deck = [Card.from_dict(c) for c in cards]
    idx = _find_card(deck, name, card_type)
    if idx is None:
        deck.append(Card(name, card_type, 1, image_uris))
    else:
        deck[idx].count += 1
    return [c.to_dict() for c in deck]


def remove_card(cards: List[Dict[str, Any]], name: str,
                card_type: Optional[str] = None) -> List[Dict[str, Any]]:
    """Drop the whole stack for (name, type), whatever its count."""
    deck = [Card.from_dict(c) for c in cards]
    idx = _find_card(deck, name, card_type)
    if idx is None:
        raise _not_found(name, card_type)
    del deck[idx]
    return [c.to_dict() for c in deck]


def update_card(cards: List[Dict[str, Any]], name: str, card_type: Optional[str] = None,
                **fields) -> List[Dict[str, Any]]:
    """Overwrite the supplied fields of an existing card in place.

    Fields not passed in keep their stored values; a field passed as None is
    removed from the card. The card keeps its position.
    """
    idx = _find_card([Card.from_dict(c) for c in cards], name, card_type)
    if idx is None:
        raise _not_found(name, card_type)
    updated = [dict(c) for c in cards]
    card = updated[idx]
    for key, value in fields.items():
        if value is None:
            card.pop(key, None)
        else:
            card[key] = value
    return updated


def apply_operation(cards: List[Dict[str, Any]], operation: DeckOperation,
                    payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Run one edit against a card list.

    :param cards: current cards of the deck (list of card dicts)
    :param operation: which edit to run
    :param payload: validated request fields; must contain "name", may contain
        "type", and for updates "count" and "image_uris"
    :return: the new card list
    :raises NotFound: remove/update/delete of a card the deck does not hold
    """
    payload = dict(payload)
    name = payload.pop("name")
    card_type = payload.pop("type", None)
    operation = DeckOperation(operation)

    if operation is DeckOperation.ADD:
        return add_card(cards, name, card_type, payload.get("image_uris"))
    if operation in (DeckOperation.REMOVE, DeckOperation.DELETE):
        return remove_card(cards, name, card_type)
    return update_card(cards, name, card_type, **payload)
