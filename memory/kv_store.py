"""Asynchronous key-value store abstractions and local backends."""
from __future__ import annotations

import asyncio
import json
import sqlite3
import time
from pathlib import Path
from typing import Dict, Optional


class StoreError(RuntimeError):
    """Raised when a backend cannot read or write a key."""


class KeyValueStore:
    """Interface for string-keyed, string-valued persistence.

    ``get`` returns ``None`` for an absent key. Either call may raise; callers
    are expected to tolerate failures.
    """

    async def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    async def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store, handy for tests and throwaway sessions."""

    def __init__(self, initial: Dict[str, str] | None = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StoreError(f"Value for key '{key}' must be a string")
        self._values[key] = value

    def snapshot(self) -> Dict[str, str]:
        return dict(self._values)


class JSONFileKeyValueStore(KeyValueStore):
    """Keeps every key in a single JSON document on disk."""

    def __init__(self, base_dir: str | Path = "data/closet", filename: str = "store.json") -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.path = self.base_dir / filename

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"Unreadable store file {self.path}") from exc
        if not isinstance(data, dict):
            raise StoreError(f"Store file {self.path} does not hold an object")
        return data

    def _get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def _set(self, key: str, value: str) -> None:
        try:
            record = self._load()
        except StoreError:
            record = {}
        record[key] = value
        tmp_path = self.path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(record, indent=2))
        tmp_path.replace(self.path)

    async def get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._get, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set, key, value)


class SQLiteKeyValueStore(KeyValueStore):
    """SQLite-backed store for lightweight durability."""

    def __init__(self, db_path: str | Path = "data/closet.db") -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL
                );
                """
            )

    def _get(self, key: str) -> Optional[str]:
        try:
            with self._connect() as conn:
                row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to read key '{key}'") from exc
        return row["value"] if row else None

    def _set(self, key: str, value: str) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO kv_store(key, value, updated_at) VALUES (?, ?, ?)\n"
                    "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
                    (key, value, time.time()),
                )
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to write key '{key}'") from exc

    async def get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._get, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set, key, value)


__all__ = [
    "InMemoryKeyValueStore",
    "JSONFileKeyValueStore",
    "KeyValueStore",
    "SQLiteKeyValueStore",
    "StoreError",
]
