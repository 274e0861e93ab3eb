"""JSON-file-backed durable store for cache snapshots."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from gallery_cache.exceptions import StorageError

logger = logging.getLogger(__name__)


class JsonFileSnapshotStore:
    """Persistent single-blob store backed by a file on disk.

    Implements the ``SnapshotStore`` protocol. Writes are atomic (temp file
    + rename) so a crash mid-write leaves the previous snapshot in place.

    Suitable for a single process. Not suitable for concurrent multi-process
    access.

    Example::

        store = JsonFileSnapshotStore("~/.cache/gallery/cache.json")
        cache = QueryResultCache(store)
    """

    __slots__ = ("_file_path",)

    def __init__(self, file_path: str | Path) -> None:
        self._file_path = Path(file_path).expanduser().resolve()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load(self) -> str | None:
        """Read the snapshot file, or return None if it does not exist."""
        try:
            return self._file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            msg = f"Failed to read cache snapshot from {self._file_path}"
            raise StorageError(msg) from e

    def save(self, blob: str) -> None:
        """Atomically replace the snapshot file with ``blob``."""
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self._file_path.parent, suffix=".tmp")
        except OSError as e:
            msg = f"Failed to write cache snapshot to {self._file_path}"
            raise StorageError(msg) from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(blob)
            Path(tmp_path).replace(self._file_path)
        except OSError as e:
            Path(tmp_path).unlink(missing_ok=True)
            msg = f"Failed to write cache snapshot to {self._file_path}"
            raise StorageError(msg) from e
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
        logger.debug("Saved cache snapshot to %s (%d chars)", self._file_path, len(blob))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(file={self._file_path!s})"
