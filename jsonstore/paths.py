from __future__ import annotations

import os
from pathlib import Path

GZIP_SUFFIX = ".gz"


def as_path(path: str | os.PathLike[str]) -> Path:
    return path if isinstance(path, Path) else Path(path)


def is_gzip_path(path: str | os.PathLike[str]) -> bool:
    return as_path(path).name.endswith(GZIP_SUFFIX)


def effective_path(base: str | os.PathLike[str], compress: bool | None) -> Path:
    """
    Path a store actually reads/writes for a configured base location.

    compress=None keeps the base untouched; True guarantees a trailing ".gz";
    False strips one. Never mutates anything.
    """
    path = as_path(base)
    if compress is None:
        return path
    if compress and not is_gzip_path(path):
        return path.with_name(path.name + GZIP_SUFFIX)
    if not compress and is_gzip_path(path):
        return path.with_name(path.name[: -len(GZIP_SUFFIX)])
    return path


def use_gzip(path: Path, *overrides: bool | None) -> bool:
    """First explicit override wins; otherwise infer from the suffix."""
    for flag in overrides:
        if flag is not None:
            return flag
    return is_gzip_path(path)
