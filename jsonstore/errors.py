from __future__ import annotations

from pathlib import Path


class JSONStoreError(Exception):
    """Base class for every error raised by jsonstore."""


class KeyNotFoundError(JSONStoreError, KeyError):
    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"{self.key} not found"


class NoMatchError(JSONStoreError, LookupError):
    def __init__(self, pattern: str):
        super().__init__(pattern)
        self.pattern = pattern

    def __str__(self) -> str:
        return f"no keys match {self.pattern!r}"


class EncodeError(JSONStoreError, ValueError):
    def __init__(self, key: str | None, reason: str):
        super().__init__(key, reason)
        self.key = key
        self.reason = reason

    def __str__(self) -> str:
        if self.key is None:
            return f"cannot encode: {self.reason}"
        return f"cannot encode value for {self.key!r}: {self.reason}"


class DecodeError(JSONStoreError, ValueError):
    def __init__(self, key: str, reason: str):
        super().__init__(key, reason)
        self.key = key
        self.reason = reason

    def __str__(self) -> str:
        return f"cannot decode value for {self.key!r}: {self.reason}"


class NotFoundError(JSONStoreError, FileNotFoundError):
    def __init__(self, path: Path):
        super().__init__(2, "Location does not exist", str(path))
        self.path = path

    def __str__(self) -> str:
        return f"Location does not exist: {self.path}"


class FormatError(JSONStoreError, ValueError):
    def __init__(self, path: Path, reason: str):
        super().__init__(path, reason)
        self.path = path
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.path} is not a valid store file: {self.reason}"
