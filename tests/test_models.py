"""Taxonomy, wardrobe item and user model tests."""

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone
from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models import taxonomy
from models.outfit import Outfit, User, parse_join_date
from models.wardrobe_item import WardrobeItem, from_raw_metadata


def test_taxonomy_contains_expected_categories() -> None:
    """The closet knows exactly five categories plus the ``all`` filter."""

    assert [c.value for c in taxonomy.Category] == ["tops", "bottoms", "dresses", "shoes", "accessories"]
    assert taxonomy.CATEGORY_FILTERS[0] == "all"
    assert taxonomy.DEFAULT_CATEGORY is taxonomy.Category.TOPS


def test_validate_category_normalises_and_rejects() -> None:
    assert taxonomy.validate_category(" Bottoms ") is taxonomy.Category.BOTTOMS
    assert taxonomy.validate_category_filter("ALL") == "all"
    assert taxonomy.validate_category_filter(taxonomy.Category.SHOES) == "shoes"

    with pytest.raises(ValueError):
        taxonomy.validate_category("hats")
    with pytest.raises(ValueError):
        taxonomy.validate_category("all")


def test_wardrobe_item_is_frozen_and_snapshots_are_equal_copies() -> None:
    item = WardrobeItem(id=1, name="Blue Jeans", category="bottoms")
    assert item.category is taxonomy.Category.BOTTOMS
    assert item.image == ""

    copy = item.snapshot()
    assert copy == item
    assert copy is not item
    with pytest.raises(AttributeError):
        item.name = "Black Jeans"  # type: ignore[misc]


def test_from_raw_metadata_requires_integer_id() -> None:
    item = from_raw_metadata({"id": 7, "name": "Tee", "category": "tops", "image": None})
    assert item == WardrobeItem(id=7, name="Tee", category=taxonomy.Category.TOPS, image="")

    with pytest.raises(ValueError):
        from_raw_metadata({"id": "7", "name": "Tee", "category": "tops"})
    with pytest.raises(ValueError):
        from_raw_metadata({"id": 7, "category": "tops"})


def test_user_create_uses_iso_timestamp() -> None:
    moment = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
    user = User.create("alice", now=moment)

    assert user.username == "alice"
    assert user.join_date == "2024-03-01T09:30:00.000+00:00"
    assert user.member_since == moment
    assert user.to_dict() == {"username": "alice", "joinDate": user.join_date}


def test_outfit_to_dict_embeds_items() -> None:
    item = WardrobeItem(id=1, name="Tee", category="tops", image="data:image/png;base64,AA==")
    outfit = Outfit(id=2, name="Casual", items=[item])

    assert outfit.to_dict() == {"id": 2, "name": "Casual", "items": [item.to_dict()]}


def test_outfit_is_frozen() -> None:
    outfit = Outfit(id=2, name="Casual", items=[])

    with pytest.raises(FrozenInstanceError):
        outfit.name = "Formal"  # type: ignore[misc]


def test_parse_join_date_accepts_z_suffix_and_rejects_garbage() -> None:
    assert parse_join_date("2024-03-01T09:30:00.000Z") == datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
    with pytest.raises(ValueError):
        parse_join_date("not-a-date")
