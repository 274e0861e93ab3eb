"""Built-in durable storage implementations."""

from .json_file_store import JsonFileSnapshotStore
from .memory_store import InMemorySnapshotStore

__all__ = [
    "InMemorySnapshotStore",
    "JsonFileSnapshotStore",
]
