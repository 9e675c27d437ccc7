from __future__ import annotations

import os
import re
from typing import Any, Protocol


class KeyValueStore(Protocol):
    """
    In-memory key/value operations plus whole-store persistence.
    """

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous entry."""
        ...

    def set_and_persist(self, key: str, value: Any) -> None:
        """set() followed by a full save()."""
        ...

    def get(self, key: str, target: Any = None) -> Any:
        """Return the value at key, decoded into target when given."""
        ...

    def delete(self, key: str) -> None:
        """Remove key; no-op when absent."""
        ...

    def keys(self) -> list[str]:
        ...

    def query(self, pattern: str, target: Any = None) -> dict[str, Any]:
        ...

    def get_all(self, regex: str | re.Pattern[str]) -> dict[str, bytes]:
        ...

    def load(self, path: str | os.PathLike[str] | None = None, *, compress: bool | None = None) -> None:
        ...

    def save(self, path: str | os.PathLike[str] | None = None, *, compress: bool | None = None) -> None:
        ...
