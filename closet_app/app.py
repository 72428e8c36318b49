"""Closet app bootstrap."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from closet_app.config import AppConfig
from closet_app.logging_config import configure_logging, get_logger, log_event, operation_context
from logic.navigation import Navigator, Screen, render_params
from logic.outfit_builder import OutfitSelection
from logic.wardrobe_state import WardrobeManager
from memory.kv_store import (
    InMemoryKeyValueStore,
    JSONFileKeyValueStore,
    KeyValueStore,
    SQLiteKeyValueStore,
)
from models.outfit import Outfit, User
from models.taxonomy import DEFAULT_CATEGORY, Category
from models.wardrobe_item import WardrobeItem
from tools.image_ingestion import encode_image_file

LOGGER = get_logger(__name__)


def build_store(config: AppConfig) -> KeyValueStore:
    """Pick the key-value backend named in the config."""

    if config.store_backend == "memory":
        return InMemoryKeyValueStore()
    if config.store_backend == "sqlite":
        return SQLiteKeyValueStore(config.store_path or "data/closet.db")
    return JSONFileKeyValueStore(config.store_path or "data/closet")


class ClosetApp:
    """Wires the store, the wardrobe manager and the navigator together.

    The app plays the part of the UI shell: it forwards user actions to the
    manager and moves the navigator, e.g. to home after a successful login.
    """

    def __init__(self, config: AppConfig | None = None, store: KeyValueStore | None = None) -> None:
        self.config = config or AppConfig.from_env()
        configure_logging(self.config.log_level)
        self.store = store or build_store(self.config)
        self.manager = WardrobeManager(store=self.store)
        self.navigator = Navigator()
        self.selection = OutfitSelection()

    @property
    def screen(self) -> Screen:
        return self.navigator.screen

    async def start(self) -> None:
        """Load saved state. Navigation always starts on the welcome screen."""

        with operation_context("app:start", backend=self.config.store_backend):
            await self.manager.load()
            log_event(
                LOGGER,
                logging.INFO,
                "app_started",
                has_user=self.manager.user is not None,
                item_count=len(self.manager.items),
                outfit_count=len(self.manager.outfits),
            )

    async def shutdown(self) -> None:
        await self.manager.flush()

    def proceed(self) -> Screen:
        return self.navigator.proceed()

    def back(self) -> Screen:
        if self.navigator.screen is Screen.OUTFITS:
            self.selection.clear()
        return self.navigator.back()

    def open(self, screen: Any) -> Screen:
        return self.navigator.select(screen)

    def login(self, username: str) -> Optional[User]:
        with operation_context("app:login"):
            user = self.manager.login(username)
            if user is not None:
                self.navigator.login_succeeded()
            return user

    def add_item(self, draft: Mapping[str, Any]) -> Optional[WardrobeItem]:
        return self.manager.add_item(draft)

    async def add_item_from_file(
        self, name: str, image_path: str | Path, category: str | Category = DEFAULT_CATEGORY
    ) -> Optional[WardrobeItem]:
        """Encode the picked image, then add the item exactly like :meth:`add_item`."""

        image = await encode_image_file(image_path)
        return self.manager.add_item({"name": name, "category": category, "image": image})

    def delete_item(self, item_id: int) -> None:
        self.manager.delete_item(item_id)

    def toggle_selection(self, item_id: int) -> bool:
        item = self.manager.get_item(item_id)
        if item is None:
            return False
        return self.selection.toggle(item)

    def create_outfit(self, name: str) -> Optional[Outfit]:
        """Create an outfit from the current selection and reset it on success."""

        outfit = self.manager.create_outfit({"name": name, "items": self.selection.items})
        if outfit is not None:
            self.selection.clear()
        return outfit

    def delete_outfit(self, outfit_id: int) -> None:
        self.manager.delete_outfit(outfit_id)

    def view(self, **options: Any) -> Dict[str, Any]:
        """Render parameters for the active screen."""

        params = render_params(self.navigator.screen, self.manager.state, **options)
        if self.navigator.screen is Screen.OUTFITS:
            params["selected_item_ids"] = [item.id for item in self.selection.items]
        return params


__all__ = ["ClosetApp", "build_store"]
