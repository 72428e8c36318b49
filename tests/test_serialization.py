"""Encoding and decoding of the persisted roots."""

from datetime import datetime, timezone
from pathlib import Path
import json
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from memory.serialization import (
    ITEMS_KEY,
    OUTFITS_KEY,
    USER_KEY,
    SerializationError,
    decode_items,
    decode_outfits,
    decode_user,
    encode_items,
    encode_outfits,
    encode_state,
    encode_user,
)
from models.outfit import Outfit, User
from models.wardrobe_item import WardrobeItem

LARGE_IMAGE = "data:image/jpeg;base64," + "QUJD" * 50_000


@pytest.fixture()
def items() -> list:
    return [
        WardrobeItem(id=1700000000001, name="Blue Jeans", category="bottoms"),
        WardrobeItem(id=1700000000002, name="Silk Scarf", category="accessories", image=LARGE_IMAGE),
    ]


def test_user_round_trip_and_absence() -> None:
    user = User(username="alice", join_date="2024-03-01T09:30:00.000Z")

    assert decode_user(encode_user(user)) == user
    assert json.loads(encode_user(user)) == {"username": "alice", "joinDate": "2024-03-01T09:30:00.000Z"}
    assert encode_user(None) == "null"
    assert decode_user("null") is None


def test_items_round_trip_keeps_images(items: list) -> None:
    decoded = decode_items(encode_items(items))

    assert decoded == items
    assert decoded[1].image == LARGE_IMAGE
    assert decode_items(encode_items([])) == []


@pytest.mark.parametrize("embedded", [0, 1, 2])
def test_outfits_round_trip_with_embedded_copies(items: list, embedded: int) -> None:
    outfits = [Outfit(id=9, name="Casual", items=[item.snapshot() for item in items[:embedded]])]

    assert decode_outfits(encode_outfits(outfits)) == outfits


def test_decode_accepts_hand_written_payload() -> None:
    raw = '[{"id": 1, "name": "Tee", "category": "tops", "image": ""}]'

    assert decode_items(raw) == [WardrobeItem(id=1, name="Tee", category="tops")]


@pytest.mark.parametrize(
    "decoder, raw",
    [
        (decode_user, "{not json"),
        (decode_user, "[]"),
        (decode_user, '{"username": "alice"}'),
        (decode_user, '{"username": "alice", "joinDate": "not-a-date"}'),
        (decode_items, '{"id": 1}'),
        (decode_items, '[{"id": 1, "name": "Tee", "category": "hats"}]'),
        (decode_items, '[{"id": "1", "name": "Tee", "category": "tops"}]'),
        (decode_outfits, '[{"id": 1, "name": "Casual", "items": {}}]'),
        (decode_outfits, '[{"name": "Casual", "items": []}]'),
        (decode_outfits, "[42]"),
    ],
)
def test_malformed_payloads_raise_serialization_error(decoder, raw: str) -> None:
    with pytest.raises(SerializationError):
        decoder(raw)


def test_deeply_nested_payload_is_reported_as_corrupt() -> None:
    """Nesting deep enough to exhaust the recursion limit is corrupt data, not a crash."""

    bomb = "[" * 100_000 + "]" * 100_000

    for decoder in (decode_user, decode_items, decode_outfits):
        with pytest.raises(SerializationError):
            decoder(bomb)


def test_decode_user_accepts_browser_join_date() -> None:
    user = decode_user('{"username": "alice", "joinDate": "2024-03-01T09:30:00.000Z"}')

    assert user.member_since == datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


def test_encode_state_uses_the_three_store_keys(items: list) -> None:
    user = User(username="alice", join_date="2024-03-01T09:30:00.000Z")
    snapshot = encode_state(user, items, [])

    assert set(snapshot) == {USER_KEY, ITEMS_KEY, OUTFITS_KEY}
    assert snapshot[USER_KEY] == encode_user(user)
    assert decode_items(snapshot[ITEMS_KEY]) == items
    assert snapshot[OUTFITS_KEY] == "[]"
