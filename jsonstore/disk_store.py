from __future__ import annotations

import gzip
import logging
import zlib
from pathlib import Path

from .codec import StoreDocument
from .errors import FormatError, NotFoundError
from .locks import GLOBAL_PATH_LOCKS

logger = logging.getLogger(__name__)


class DiskDocumentFile:
    """
    One store document on disk at a fixed path, optionally gzip-framed.

    - load() raises NotFoundError / FormatError instead of returning a default.
    - save() writes atomically (temp file, then replace).
    """

    def __init__(self, path: Path, *, gzipped: bool = False):
        self._path = path
        self._gzipped = gzipped

    @property
    def path(self) -> Path:
        return self._path

    @property
    def gzipped(self) -> bool:
        return self._gzipped

    def load(self) -> StoreDocument:
        lock = GLOBAL_PATH_LOCKS.lock_for(self._path)
        with lock:
            try:
                raw = self._path.read_bytes()
            except FileNotFoundError as exc:
                raise NotFoundError(self._path) from exc
        if self._gzipped:
            raw = _gunzip(self._path, raw)
        return StoreDocument.from_disk_bytes(self._path, raw)

    def save(self, doc: StoreDocument, *, indent: int | None = 1) -> None:
        data = doc.to_disk_bytes(indent=indent)
        if self._gzipped:
            # mtime=0 keeps output byte-stable for identical content
            data = gzip.compress(data, mtime=0)
        lock = GLOBAL_PATH_LOCKS.lock_for(self._path)
        with lock:
            atomic_write_bytes(self._path, data)


def _gunzip(path: Path, raw: bytes) -> bytes:
    try:
        return gzip.decompress(raw)
    except (gzip.BadGzipFile, EOFError, zlib.error) as exc:
        raise FormatError(path, f"not a gzip stream ({exc})") from exc


def atomic_write_bytes(path: Path, payload: bytes) -> None:
    """
    Atomically write bytes to disk by writing to a temp file then replacing.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        with tmp_path.open("wb") as f:
            f.write(payload)
        tmp_path.replace(path)
    except BaseException:
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("JSONSTORE SAVE: failed to remove temp file %s: %r", tmp_path, e)
        raise
