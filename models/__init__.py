"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.outfit import Outfit, User
from models.state import WardrobeState
from models.wardrobe_item import WardrobeItem, from_raw_metadata

__all__ = ["Outfit", "User", "WardrobeItem", "WardrobeState", "from_raw_metadata"]
