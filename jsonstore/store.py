from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

from .codec import StoreDocument, decode_value, encode_value
from .disk_store import DiskDocumentFile
from .errors import EncodeError, KeyNotFoundError, NoMatchError
from .interfaces import KeyValueStore
from .locks import RWLock
from .paths import as_path, effective_path, use_gzip
from .query import is_wildcard, match_regex, match_wildcard
from .settings import Settings

logger = logging.getLogger(__name__)

PathInput = str | os.PathLike[str]


class JSONStore(KeyValueStore):
    """
    In-memory key/value store persisted as one (optionally gzipped) JSON file.

    Values are kept as their JSON encoding and decoded on the way out. All
    access to the entry map goes through one reader/writer lock; no lock is
    held between two public calls, so compound sequences (set then save)
    are not atomic as a pair.
    """

    def __init__(
        self,
        location: PathInput | None = None,
        *,
        compress: bool | None = None,
        indent: int | None = 1,
    ):
        self._lock = RWLock()
        self._entries: dict[str, bytes] = {}
        self._location = as_path(location) if location is not None else None
        self._compress = compress
        self._indent = indent

    @classmethod
    def from_settings(cls, settings: Settings) -> "JSONStore":
        return cls(settings.location, compress=settings.compress, indent=settings.indent)

    # ------------------------------------------------------------------
    # configuration
    # ------------------------------------------------------------------
    @property
    def location(self) -> Path | None:
        return self._location

    @property
    def compress(self) -> bool | None:
        return self._compress

    @property
    def path(self) -> Path | None:
        """Backing file for load()/save() without an explicit path."""
        if self._location is None:
            return None
        return effective_path(self._location, self._compress)

    def set_compress(self, on: bool | None) -> None:
        """Toggle gzip; the configured location itself is left as-is."""
        self._compress = on

    # ------------------------------------------------------------------
    # in-memory operations
    # ------------------------------------------------------------------
    def set(self, key: str, value: Any) -> None:
        if not isinstance(key, str):
            raise TypeError(f"key must be a str, got {type(key).__name__}")
        try:
            key.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise EncodeError(key, f"key is not valid UTF-8 ({exc.reason})") from exc
        # Encode before locking: a failure leaves the old entry untouched.
        payload = encode_value(key, value)
        with self._lock.write():
            self._entries[key] = payload

    def set_and_persist(self, key: str, value: Any) -> None:
        self.set(key, value)
        self.save()

    def get(self, key: str, target: Any = None) -> Any:
        payload = self.get_raw(key)
        return decode_value(key, payload, target)

    def get_raw(self, key: str) -> bytes:
        with self._lock.read():
            payload = self._entries.get(key)
        if payload is None:
            raise KeyNotFoundError(key)
        return payload

    def delete(self, key: str) -> None:
        with self._lock.write():
            self._entries.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock.read():
            return sorted(self._entries)

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock.read():
            return key in self._entries

    def query(self, pattern: str, target: Any = None) -> dict[str, Any]:
        """
        Exact lookup when pattern has no "*", otherwise every key containing
        any "*"-separated fragment. Raises NoMatchError on an empty wildcard
        result and KeyNotFoundError on a missing exact key.
        """
        if not is_wildcard(pattern):
            return {pattern: self.get(pattern, target)}
        with self._lock.read():
            matched = {k: self._entries[k] for k in match_wildcard(self._entries, pattern)}
        if not matched:
            raise NoMatchError(pattern)
        return {k: decode_value(k, payload, target) for k, payload in sorted(matched.items())}

    def get_all(self, regex: str | re.Pattern[str]) -> dict[str, bytes]:
        with self._lock.read():
            return {k: self._entries[k] for k in sorted(match_regex(self._entries, regex))}

    # ------------------------------------------------------------------
    # persistence
    # ------------------------------------------------------------------
    def _disk_file(self, path: PathInput | None, compress: bool | None) -> DiskDocumentFile:
        if path is not None:
            target = as_path(path)
        elif self.path is not None:
            target = self.path
        else:
            raise ValueError("no path given and the store has no location")
        return DiskDocumentFile(target, gzipped=use_gzip(target, compress, self._compress))

    def load(self, path: PathInput | None = None, *, compress: bool | None = None) -> None:
        """
        Replace all entries with the content of the file. On any failure the
        current entries stay as they were.
        """
        disk = self._disk_file(path, compress)
        entries = disk.load().to_entries()
        with self._lock.write():
            self._entries = entries
            # Only adopt the path if save() would map it back to the same file.
            if self._location is None and effective_path(disk.path, self._compress) == disk.path:
                self._location = disk.path
        logger.debug(
            "JSONSTORE LOAD: %s (%d entries, gzip=%s)", disk.path, len(entries), disk.gzipped
        )

    def save(self, path: PathInput | None = None, *, compress: bool | None = None) -> None:
        """Write every entry to the file, replacing it. Always a full rewrite."""
        disk = self._disk_file(path, compress)
        # Held through the write: a later writer's save cannot land before this one.
        with self._lock.read():
            count = len(self._entries)
            disk.save(StoreDocument.from_entries(self._entries), indent=self._indent)
        logger.debug(
            "JSONSTORE SAVE: %s (%d entries, gzip=%s)", disk.path, count, disk.gzipped
        )


def open_store(path: PathInput, *, compress: bool | None = None) -> JSONStore:
    """Create a store bound to path and load it."""
    store = JSONStore(path, compress=compress)
    store.load()
    return store


def save(store: JSONStore, path: PathInput | None = None, *, compress: bool | None = None) -> None:
    store.save(path, compress=compress)
