r"""
Value and document encoding.

In memory every value is held as its compact JSON encoding (the payload).
On disk the store is one JSON object mapping each key to its payload as a
string, i.e. values are JSON-encoded twice:

    {
     "human:1": "{\"Name\":\"Dante\",\"Height\":5.4}"
    }
"""

from __future__ import annotations

import functools
import json
from pathlib import Path
from typing import Any, Mapping

from pydantic import ConfigDict, RootModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from .errors import DecodeError, EncodeError, FormatError


def encode_value(key: str | None, value: Any) -> bytes:
    """Serialize anything pydantic-core understands (models, dataclasses, containers, scalars)."""
    try:
        return to_json(value)
    except (PydanticSerializationError, ValueError, TypeError) as exc:
        raise EncodeError(key, str(exc)) from exc


@functools.lru_cache(maxsize=128)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def decode_value(key: str, payload: bytes, target: Any = None) -> Any:
    """
    Decode a payload. target=None yields plain Python (dict/list/str/...);
    otherwise the payload is validated into target.
    """
    if target is None:
        try:
            return json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DecodeError(key, str(exc)) from exc
    try:
        adapter = _adapter(target)
    except TypeError:
        # unhashable target, skip the cache
        adapter = TypeAdapter(target)
    try:
        return adapter.validate_json(payload)
    except ValidationError as exc:
        raise DecodeError(key, str(exc)) from exc


class StoreDocument(RootModel[dict[str, str]]):
    """Mirrors the on-disk schema: { "<key>": "<value as JSON text>" }."""

    model_config = ConfigDict(strict=True)

    @classmethod
    def from_disk_bytes(cls, path: Path, raw: bytes) -> "StoreDocument":
        try:
            return cls.model_validate_json(raw)
        except ValidationError as exc:
            raise FormatError(path, _first_error(exc)) from exc

    @classmethod
    def from_entries(cls, entries: Mapping[str, bytes]) -> "StoreDocument":
        doc: dict[str, str] = {}
        for key, payload in entries.items():
            try:
                doc[key] = payload.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise EncodeError(key, str(exc)) from exc
        return cls(doc)

    def to_entries(self) -> dict[str, bytes]:
        return {key: text.encode("utf-8") for key, text in self.root.items()}

    def to_disk_bytes(self, *, indent: int | None = 1) -> bytes:
        text = json.dumps(self.root, indent=indent, sort_keys=True, ensure_ascii=False)
        try:
            return text.encode("utf-8")
        except UnicodeEncodeError as exc:
            bad = next((k for k in self.root if not _utf8_ok(k)), None)
            raise EncodeError(bad, f"not valid UTF-8 ({exc.reason})") from exc


def _utf8_ok(text: str) -> bool:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    err = errors[0]
    loc = ".".join(str(p) for p in err.get("loc", ()))
    return f"{loc}: {err['msg']}" if loc else err["msg"]
