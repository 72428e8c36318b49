"""Toggle-style item selection used while composing a new outfit."""
from __future__ import annotations

from typing import Iterable, List

from logic.validation import OutfitDraft
from models.wardrobe_item import WardrobeItem


class OutfitSelection:
    """Ordered set of closet items picked for an outfit, keyed by item id.

    Picking an item that is already selected removes it again. Selection
    order is kept, and it becomes the item order of the outfit.
    """

    def __init__(self, items: Iterable[WardrobeItem] = ()) -> None:
        self._items: List[WardrobeItem] = []
        for item in items:
            if not self.is_selected(item.id):
                self._items.append(item)

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> List[WardrobeItem]:
        return list(self._items)

    def is_selected(self, item_id: int) -> bool:
        return any(item.id == item_id for item in self._items)

    def toggle(self, item: WardrobeItem) -> bool:
        """Select or deselect ``item``; returns whether it is now selected."""

        if self.is_selected(item.id):
            self._items = [selected for selected in self._items if selected.id != item.id]
            return False
        self._items.append(item)
        return True

    def clear(self) -> None:
        self._items = []

    def can_submit(self, name: str) -> bool:
        """Mirror of the domain rule: a non-blank name and at least one item."""

        return bool(name.strip()) and bool(self._items)

    def to_draft(self, name: str) -> OutfitDraft:
        """Build the outfit draft; raises ``ValidationError`` when incomplete."""

        return OutfitDraft(name=name, items=self.items)


__all__ = ["OutfitSelection"]
