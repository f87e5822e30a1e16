from pydantic import BaseModel, Field
from typing import Any, Dict, Optional


class CardKey(BaseModel):
    name: str = Field(min_length=1)
    type: Optional[str] = None  # "" and null both mean "no type"


class RemoveCardRequest(CardKey):
    pass


class AddCardRequest(CardKey):
    image_uris: Optional[Dict[str, Any]] = None


class UpdateCardRequest(CardKey):
    count: int = Field(ge=1, strict=True)
    image_uris: Optional[Dict[str, Any]] = None
