from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def _env_tristate(name: str) -> bool | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be one of {_TRUE + _FALSE}, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    # Backing file; None keeps the store memory-only until a path is given
    location: str | None

    # None: infer from a ".gz" suffix
    compress: bool | None

    # Pretty-print indent of the saved document
    indent: int


def get_settings() -> Settings:
    location = os.getenv("JSONSTORE_LOCATION", "").strip() or None
    compress = _env_tristate("JSONSTORE_COMPRESS")
    indent = _env_int("JSONSTORE_INDENT", 1)

    return Settings(
        location=location,
        compress=compress,
        indent=indent,
    )


def load_settings(env_file: str | os.PathLike[str] | None = None) -> Settings:
    """Read a dotenv file (without overriding real env vars), then the environment."""
    load_dotenv(env_file)
    return get_settings()
