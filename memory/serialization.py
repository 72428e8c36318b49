"""JSON codecs for the three persisted roots: user, closet items and outfits."""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from models.outfit import Outfit, User, parse_join_date
from models.wardrobe_item import WardrobeItem, from_raw_metadata

USER_KEY = "user"
ITEMS_KEY = "wardrobeItems"
OUTFITS_KEY = "outfits"
STATE_KEYS = (USER_KEY, ITEMS_KEY, OUTFITS_KEY)


class SerializationError(ValueError):
    """Raised when a stored value cannot be decoded into its entity."""


def _loads(raw: str) -> Any:
    if not isinstance(raw, str):
        raise SerializationError(f"Expected a string payload, got {type(raw).__name__}")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SerializationError(f"Malformed JSON: {exc.msg}") from exc
    except (RecursionError, ValueError) as exc:
        raise SerializationError(f"Undecodable JSON: {type(exc).__name__}") from exc


def _expect_list(payload: Any, what: str) -> List[Any]:
    if not isinstance(payload, list):
        raise SerializationError(f"Expected a list of {what}, got {type(payload).__name__}")
    return payload


def _item_from_payload(payload: Any) -> WardrobeItem:
    if not isinstance(payload, dict):
        raise SerializationError("Wardrobe item entries must be objects")
    try:
        return from_raw_metadata(payload)
    except ValueError as exc:
        raise SerializationError(str(exc)) from exc


def encode_user(user: Optional[User]) -> str:
    return json.dumps(user.to_dict() if user else None)


def decode_user(raw: str) -> Optional[User]:
    payload = _loads(raw)
    if payload is None:
        return None
    if not isinstance(payload, dict):
        raise SerializationError("User payload must be an object")
    username = payload.get("username")
    join_date = payload.get("joinDate")
    if not isinstance(username, str) or not isinstance(join_date, str):
        raise SerializationError("User payload needs string 'username' and 'joinDate'")
    try:
        parse_join_date(join_date)
    except ValueError as exc:
        raise SerializationError(f"User joinDate is not an ISO-8601 timestamp: {join_date!r}") from exc
    return User(username=username, join_date=join_date)


def encode_items(items: List[WardrobeItem]) -> str:
    return json.dumps([item.to_dict() for item in items])


def decode_items(raw: str) -> List[WardrobeItem]:
    return [_item_from_payload(entry) for entry in _expect_list(_loads(raw), "items")]


def encode_outfits(outfits: List[Outfit]) -> str:
    return json.dumps([outfit.to_dict() for outfit in outfits])


def decode_outfits(raw: str) -> List[Outfit]:
    outfits = []
    for entry in _expect_list(_loads(raw), "outfits"):
        if not isinstance(entry, dict):
            raise SerializationError("Outfit entries must be objects")
        outfit_id = entry.get("id")
        name = entry.get("name")
        if isinstance(outfit_id, bool) or not isinstance(outfit_id, int):
            raise SerializationError(f"Outfit id must be an integer, got {outfit_id!r}")
        if not isinstance(name, str):
            raise SerializationError("Outfit name must be a string")
        items = [_item_from_payload(item) for item in _expect_list(entry.get("items", []), "items")]
        outfits.append(Outfit(id=outfit_id, name=name, items=items))
    return outfits


def encode_state(user: Optional[User], items: List[WardrobeItem], outfits: List[Outfit]) -> Dict[str, str]:
    """Encode a full snapshot as the mapping written to the store."""

    return {
        USER_KEY: encode_user(user),
        ITEMS_KEY: encode_items(items),
        OUTFITS_KEY: encode_outfits(outfits),
    }


__all__ = [
    "ITEMS_KEY",
    "OUTFITS_KEY",
    "STATE_KEYS",
    "USER_KEY",
    "SerializationError",
    "decode_items",
    "decode_outfits",
    "decode_user",
    "encode_items",
    "encode_outfits",
    "encode_state",
    "encode_user",
]
