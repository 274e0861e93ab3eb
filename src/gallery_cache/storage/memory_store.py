"""In-memory snapshot store for development and testing.

Holds the blob for the lifetime of the object only. Production callers
that need the cache to survive restarts use ``JsonFileSnapshotStore`` or
their own ``SnapshotStore`` implementation (Redis, SQLite, etc.).
"""

from __future__ import annotations

import threading


class InMemorySnapshotStore:
    """Single-slot in-memory store. Implements SnapshotStore protocol."""

    __slots__ = ("_blob", "_lock", "save_count")

    def __init__(self, blob: str | None = None) -> None:
        self._blob = blob
        self._lock = threading.Lock()
        self.save_count = 0

    def load(self) -> str | None:
        with self._lock:
            return self._blob

    def save(self, blob: str) -> None:
        with self._lock:
            self._blob = blob
            self.save_count += 1

    def __repr__(self) -> str:
        size = 0 if self._blob is None else len(self._blob)
        return f"{type(self).__name__}(bytes={size})"
