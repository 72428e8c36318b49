"""Domain state manager for the closet: login, items and outfits."""
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Mapping, Optional, TypeVar

from closet_app.logging_config import get_logger, log_event
from logic.persistence import PersistenceStrategy, SnapshotPersister
from logic.validation import ItemDraft, LoginRequest, OutfitDraft
from memory.kv_store import KeyValueStore
from memory.serialization import (
    ITEMS_KEY,
    OUTFITS_KEY,
    USER_KEY,
    SerializationError,
    decode_items,
    decode_outfits,
    decode_user,
)
from models.outfit import Outfit, User
from models.state import WardrobeState
from models.taxonomy import ALL_CATEGORIES, Category, validate_category_filter
from models.wardrobe_item import WardrobeItem
from tools.observability import instrument_operation

logger = get_logger(__name__)
T = TypeVar("T")


class IdGenerator:
    """Wall-clock millisecond ids, bumped so each one is larger than the last."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last = 0

    def observe(self, ids: Iterable[int]) -> None:
        """Never hand out an id at or below one that already exists."""

        self._last = max([self._last, *ids])

    def next_id(self) -> int:
        candidate = int(self._clock() * 1000)
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return candidate


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _rejected(exc: Exception) -> None:
    return None


class WardrobeManager:
    """Owns a :class:`WardrobeState` and every mutation applied to it.

    Each mutation updates the state in memory first and then hands the state
    to the persistence strategy. Invalid input (blank names, empty outfits) is
    rejected without touching the state and the operation returns ``None``.
    """

    def __init__(
        self,
        store: KeyValueStore,
        state: WardrobeState | None = None,
        persister: PersistenceStrategy | None = None,
        id_generator: IdGenerator | None = None,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.store = store
        self.state = state if state is not None else WardrobeState()
        self.persister = persister or SnapshotPersister(store)
        self.ids = id_generator or IdGenerator()
        self._now = now

    @property
    def user(self) -> Optional[User]:
        return self.state.user

    @property
    def items(self) -> List[WardrobeItem]:
        return list(self.state.items)

    @property
    def outfits(self) -> List[Outfit]:
        return list(self.state.outfits)

    def _commit(self) -> None:
        self.persister.persist(self.state)

    @instrument_operation("login", input_model=LoginRequest, argument="username", on_validation_error=_rejected)
    def login(self, username: str) -> Optional[User]:
        user = User.create(username, now=self._now())
        self.state.user = user
        self._commit()
        return user

    @instrument_operation("add_item", input_model=ItemDraft, argument="draft", on_validation_error=_rejected)
    def add_item(self, draft: ItemDraft | Mapping[str, Any]) -> Optional[WardrobeItem]:
        item = WardrobeItem(
            id=self.ids.next_id(),
            name=draft.name,
            category=draft.category,
            image=draft.image,
        )
        self.state.items.append(item)
        self._commit()
        return item

    @instrument_operation("delete_item")
    def delete_item(self, item_id: int) -> None:
        self.state.items = [item for item in self.state.items if item.id != item_id]
        self._commit()

    @instrument_operation("create_outfit", input_model=OutfitDraft, argument="draft", on_validation_error=_rejected)
    def create_outfit(self, draft: OutfitDraft | Mapping[str, Any]) -> Optional[Outfit]:
        outfit = Outfit(
            id=self.ids.next_id(),
            name=draft.name,
            items=[item.snapshot() for item in draft.items],
        )
        self.state.outfits.append(outfit)
        self._commit()
        return outfit

    @instrument_operation("delete_outfit")
    def delete_outfit(self, outfit_id: int) -> None:
        self.state.outfits = [outfit for outfit in self.state.outfits if outfit.id != outfit_id]
        self._commit()

    def get_item(self, item_id: int) -> Optional[WardrobeItem]:
        return next((item for item in self.state.items if item.id == item_id), None)

    def get_outfit(self, outfit_id: int) -> Optional[Outfit]:
        return next((outfit for outfit in self.state.outfits if outfit.id == outfit_id), None)

    def items_in_category(self, category: str | Category = ALL_CATEGORIES) -> List[WardrobeItem]:
        """Linear filter used by the closet screen; ``all`` returns everything."""

        key = validate_category_filter(category)
        if key == ALL_CATEGORIES:
            return list(self.state.items)
        return [item for item in self.state.items if item.category.value == key]

    async def _load_key(self, key: str, decoder: Callable[[str], T]) -> tuple[bool, Optional[T]]:
        try:
            raw = await self.store.get(key)
        except Exception:  # noqa: BLE001
            log_event(logger, logging.WARNING, "state_key_unreadable", key=key, exc_info=True)
            return False, None
        if raw is None:
            log_event(logger, logging.INFO, "state_key_missing", key=key)
            return False, None
        try:
            return True, decoder(raw)
        except SerializationError as exc:
            log_event(logger, logging.WARNING, "state_key_corrupt", key=key, error=str(exc))
            return False, None

    @instrument_operation("load", level=logging.INFO)
    async def load(self) -> None:
        """Restore user, items and outfits; unreadable keys keep their defaults."""

        found, user = await self._load_key(USER_KEY, decode_user)
        if found:
            self.state.user = user
        found, items = await self._load_key(ITEMS_KEY, decode_items)
        if found:
            self.state.items = items
        found, outfits = await self._load_key(OUTFITS_KEY, decode_outfits)
        if found:
            self.state.outfits = outfits
        self.ids.observe(item.id for item in self.state.items)
        self.ids.observe(outfit.id for outfit in self.state.outfits)

    @instrument_operation("save")
    async def save(self) -> bool:
        """Write the full state now. Returns ``False`` when nothing was stored."""

        return await self.persister.save(self.state)

    async def flush(self) -> None:
        """Wait for background writes scheduled by earlier mutations."""

        await self.persister.drain()


__all__ = ["IdGenerator", "WardrobeManager"]
