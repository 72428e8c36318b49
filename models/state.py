"""The explicitly owned in-memory state of one closet session."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from models.outfit import Outfit, User
from models.wardrobe_item import WardrobeItem


@dataclass
class WardrobeState:
    """Current user plus the closet and outfit collections.

    A fresh state is empty: no user, no items, no outfits.
    """

    user: Optional[User] = None
    items: List[WardrobeItem] = field(default_factory=list)
    outfits: List[Outfit] = field(default_factory=list)
