"""Durable storage protocol for the query cache.

Any object with matching ``load`` / ``save`` methods can back a
``QueryResultCache`` -- no inheritance required.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SnapshotStore(Protocol):
    """A single-slot, string-valued store that survives process restarts."""

    def load(self) -> str | None:
        """Read the last saved blob.

        Returns:
            The blob, or ``None`` if nothing has been saved yet.

        Raises:
            StorageError: If the blob exists but cannot be read.
        """
        ...

    def save(self, blob: str) -> None:
        """Replace the stored blob.

        Parameters:
            blob: The serialized cache snapshot.

        Side Effects:
            The blob is durably written before this method returns; a failed
            write must leave the previous blob intact.

        Raises:
            StorageError: If the blob cannot be written.
        """
        ...
