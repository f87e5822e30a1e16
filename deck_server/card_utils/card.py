# card data class.
# A card as it sits inside a deck. `name` and `type` together form the identity
# key used to find a card when mutating a deck; a missing type and an empty type
# are the same key. `image_uris` is opaque and passed through untouched.
from typing import Any, Dict, Optional, Tuple


def card_key(name: str, card_type: Optional[str]) -> Tuple[str, str]:
    return (name, card_type or "")


class Card:
    def __init__(self, name: str, type: Optional[str] = None, count: int = 1,
                 image_uris: Optional[Dict[str, Any]] = None, **extra):
        self.name = name
        self.type = type
        self.count = count
        self.image_uris = image_uris
        # anything else stored alongside the card survives a load/save cycle
        self.extra = extra

    @property
    def key(self) -> Tuple[str, str]:
        return card_key(self.name, self.type)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Card":
        data = dict(data)
        count = data.pop("count", None)
        # older stored cards may not carry a count at all
        if count is None:
            count = 1
        return cls(count=count, **data)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name}
        if self.type is not None:
            out["type"] = self.type
        out["count"] = self.count
        if self.image_uris is not None:
            out["image_uris"] = self.image_uris
        out.update(self.extra)
        return out
