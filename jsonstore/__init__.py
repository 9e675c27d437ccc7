from __future__ import annotations

from .errors import (
    DecodeError,
    EncodeError,
    FormatError,
    JSONStoreError,
    KeyNotFoundError,
    NoMatchError,
    NotFoundError,
)
from .interfaces import KeyValueStore
from .paths import effective_path, is_gzip_path
from .repositories import AsyncJSONStore
from .settings import Settings, get_settings, load_settings
from .store import JSONStore, open_store, save

__version__ = "0.1.0"

__all__ = [
    "JSONStore",
    "AsyncJSONStore",
    "KeyValueStore",
    "open_store",
    "save",
    "effective_path",
    "is_gzip_path",
    "Settings",
    "get_settings",
    "load_settings",
    "JSONStoreError",
    "KeyNotFoundError",
    "NoMatchError",
    "EncodeError",
    "DecodeError",
    "NotFoundError",
    "FormatError",
]
