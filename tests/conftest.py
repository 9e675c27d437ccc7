from __future__ import annotations

from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for `import jsonstore` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    """
    Plain (uncompressed) store file under a temp dir so tests never touch the cwd.
    """
    return tmp_path / "store.json"


@pytest.fixture
def gz_store_path(tmp_path: Path) -> Path:
    return tmp_path / "store.json.gz"


@pytest.fixture
def store():
    from jsonstore import JSONStore

    s = JSONStore()
    s.set("name:1", "alice")
    s.set("name:2", "bob")
    s.set("country:1", "chile")
    return s
