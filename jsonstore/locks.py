from __future__ import annotations

import contextlib
import threading
import weakref
from pathlib import Path
from typing import Iterator


class RWLock:
    """
    Reader/writer lock: many concurrent readers or one writer.

    Waiting writers block new readers so a steady stream of reads cannot
    starve a write. Not reentrant in either mode.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("release_read() called without a matching acquire_read()")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            except BaseException:
                self._writers_waiting -= 1
                self._cond.notify_all()
                raise
            self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            if not self._writer:
                raise RuntimeError("release_write() called without a matching acquire_write()")
            self._writer = False
            self._cond.notify_all()

    @contextlib.contextmanager
    def read(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextlib.contextmanager
    def write(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class PathLockRegistry:
    """
    Hands out one lock per resolved file path, so writers to the same file
    in this process take turns.

    Entries are weak: a path's lock is dropped once no caller holds it, so
    saving to many distinct files does not grow the registry.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._by_path: weakref.WeakValueDictionary[str, threading.Lock] = weakref.WeakValueDictionary()

    def __len__(self) -> int:
        with self._guard:
            return len(self._by_path)

    def lock_for(self, path: Path) -> threading.Lock:
        resolved = str(path.resolve())
        with self._guard:
            lock = self._by_path.get(resolved)
            if lock is None:
                lock = self._by_path[resolved] = threading.Lock()
            return lock


GLOBAL_PATH_LOCKS = PathLockRegistry()
