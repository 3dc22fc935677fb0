"""
Key-value persistence for JSON-serializable values.

The report engine only needs two operations, `save(key, value)` and
`load(key)`, so any backing medium can be plugged in through the
KeyValueStore protocol. Two implementations are bundled:

- MemoryKeyValueStore: process-local, used by tests and dry runs
- JSONFileKeyValueStore: one `<key>.json` file per key under a data directory
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from loguru import logger


@runtime_checkable
class KeyValueStore(Protocol):
    """Capability interface for the persistent store."""

    def save(self, key: str, value: Any) -> None: ...

    def load(self, key: str) -> Any | None: ...


class MemoryKeyValueStore:
    """
    In-memory store.

    Values are round-tripped through JSON on write so that anything this
    store accepts would also survive a real backend.
    """

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.save(key, value)

    def save(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value, ensure_ascii=False)

    def load(self, key: str) -> Any | None:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def keys(self) -> list[str]:
        return list(self._data)


class JSONFileKeyValueStore:
    """
    File-backed store.

    Values are stored as {data_dir}/{key}.json and replaced atomically, so a
    crash mid-write never leaves a truncated file behind.
    An unreadable file raises on load; only a missing file loads as None.
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not key or Path(key).name != key or key in (".", ".."):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.data_dir / f"{key}.json"

    def save(self, key: str, value: Any) -> None:
        path = self._path(key)
        payload = json.dumps(value, ensure_ascii=False, indent=2)

        fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def load(self, key: str) -> Any | None:
        path = self._path(key)
        if not path.exists():
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Unreadable store file {path}: {e}")
            raise
