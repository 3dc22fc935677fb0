"""Key-value storage backends."""

from miaaula.storage.kv_store import (
    JSONFileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
)

__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "JSONFileKeyValueStore",
]
