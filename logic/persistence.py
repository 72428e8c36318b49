"""Persistence strategies invoked after each committed state mutation."""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, Set

from closet_app.logging_config import get_logger, log_event
from memory.kv_store import KeyValueStore
from memory.serialization import encode_state
from models.state import WardrobeState

logger = get_logger(__name__)


class PersistenceStrategy:
    """Command run by the manager once a mutation has been applied in memory."""

    def persist(self, state: WardrobeState) -> None:
        raise NotImplementedError

    async def save(self, state: WardrobeState) -> bool:
        raise NotImplementedError

    async def drain(self) -> None:
        return None


class SnapshotPersister(PersistenceStrategy):
    """Writes the whole state (user, items, outfits) on every commit.

    ``persist`` encodes the snapshot synchronously, so the write reflects
    every mutation up to the one that triggered it, then schedules the store
    writes without waiting for them. Writes go through a FIFO lock, so the
    store ends up holding the latest snapshot even when backends are slow.
    Nothing is written while no user is logged in.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self.failures = 0
        self._lock = asyncio.Lock()
        self._pending: Set[asyncio.Task] = set()

    def _encode(self, state: WardrobeState) -> Dict[str, str] | None:
        if state.user is None:
            log_event(logger, logging.DEBUG, "state_save_skipped", reason="no_user")
            return None
        try:
            return encode_state(state.user, state.items, state.outfits)
        except (TypeError, ValueError):
            self.failures += 1
            log_event(logger, logging.ERROR, "state_save_failed", stage="encode", exc_info=True)
            return None

    async def _write(self, snapshot: Dict[str, str]) -> bool:
        async with self._lock:
            try:
                for key, value in snapshot.items():
                    await self.store.set(key, value)
            except Exception:  # noqa: BLE001
                self.failures += 1
                log_event(logger, logging.ERROR, "state_save_failed", stage="write", exc_info=True)
                return False
        log_event(logger, logging.DEBUG, "state_saved", keys=sorted(snapshot))
        return True

    def persist(self, state: WardrobeState) -> None:
        snapshot = self._encode(state)
        if snapshot is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._write(snapshot))
            return
        task = loop.create_task(self._write(snapshot))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def save(self, state: WardrobeState) -> bool:
        snapshot = self._encode(state)
        if snapshot is None:
            return False
        return await self._write(snapshot)

    async def drain(self) -> None:
        """Wait for every scheduled write, including ones queued while waiting."""

        while self._pending:
            await asyncio.gather(*list(self._pending))


__all__ = ["PersistenceStrategy", "SnapshotPersister"]
