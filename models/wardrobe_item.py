"""Wardrobe item data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict

from models.taxonomy import Category, validate_category


@dataclass(frozen=True)
class WardrobeItem:
    """A piece of clothing in the user's closet.

    Items are never edited in place: the closet only adds and deletes them,
    and outfits hold their own copies.
    """

    id: int
    name: str
    category: Category
    image: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", validate_category(self.category))
        if self.image is None:
            object.__setattr__(self, "image", "")

    def snapshot(self) -> WardrobeItem:
        """Return an independent value-copy of this item."""

        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "image": self.image,
        }


def from_raw_metadata(metadata: Dict[str, Any]) -> WardrobeItem:
    """Factory to build a :class:`WardrobeItem` from a decoded mapping."""

    required_fields = ["id", "name", "category"]
    missing = [field for field in required_fields if metadata.get(field) in (None, "")]
    if missing:
        raise ValueError(f"Missing required fields for WardrobeItem: {missing}")

    raw_id = metadata["id"]
    if isinstance(raw_id, bool) or not isinstance(raw_id, int):
        raise ValueError(f"WardrobeItem id must be an integer, got {raw_id!r}")

    image = metadata.get("image") or ""
    if not isinstance(image, str):
        raise ValueError("WardrobeItem image must be a string")

    return WardrobeItem(
        id=raw_id,
        name=str(metadata["name"]),
        category=validate_category(str(metadata["category"])),
        image=image,
    )


__all__ = ["WardrobeItem", "from_raw_metadata"]
