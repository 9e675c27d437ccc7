from __future__ import annotations

import asyncio
import os
import re
from typing import Any

from .interfaces import KeyValueStore


class AsyncJSONStore:
    """
    Async wrapper around a key/value store.
    Uses asyncio.to_thread to avoid blocking the event loop on locking and file I/O;
    the wrapped store does all the synchronization.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    @property
    def store(self) -> KeyValueStore:
        return self._store

    async def set(self, key: str, value: Any) -> None:
        await asyncio.to_thread(self._store.set, key, value)

    async def set_and_persist(self, key: str, value: Any) -> None:
        await asyncio.to_thread(self._store.set_and_persist, key, value)

    async def get(self, key: str, target: Any = None) -> Any:
        return await asyncio.to_thread(self._store.get, key, target)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._store.delete, key)

    async def keys(self) -> list[str]:
        return await asyncio.to_thread(self._store.keys)

    async def query(self, pattern: str, target: Any = None) -> dict[str, Any]:
        return await asyncio.to_thread(self._store.query, pattern, target)

    async def get_all(self, regex: str | re.Pattern[str]) -> dict[str, bytes]:
        return await asyncio.to_thread(self._store.get_all, regex)

    async def load(self, path: str | os.PathLike[str] | None = None, *, compress: bool | None = None) -> None:
        await asyncio.to_thread(self._store.load, path, compress=compress)

    async def save(self, path: str | os.PathLike[str] | None = None, *, compress: bool | None = None) -> None:
        await asyncio.to_thread(self._store.save, path, compress=compress)
