"""Cache storage protocol.

Defines the interface for the mapping from canonical request path to
cached asset. Keys always start with ``/`` and use forward slashes.
"""

from collections.abc import Collection
from typing import Protocol, runtime_checkable

from static_cache.entities import CacheEntry


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends.

    Implementations must tolerate one writer concurrent with many readers
    without a reader ever observing a partially written entry.
    """

    def get(self, path: str) -> CacheEntry | None:
        """Look up an entry.

        Args:
            path: Canonical request path

        Returns:
            The cached entry, or None if absent
        """
        ...

    def set(self, path: str, entry: CacheEntry) -> None:
        """Replace the entry stored at a path.

        Args:
            path: Canonical request path
            entry: The new entry
        """
        ...

    def delete(self, path: str) -> bool:
        """Remove the entry stored at a path.

        Args:
            path: Canonical request path

        Returns:
            True if an entry was removed, False otherwise
        """
        ...

    def delete_prefix(self, prefix: str, keep: Collection[str] = ()) -> int:
        """Remove every entry below a directory.

        Args:
            prefix: Path prefix ending in ``/``
            keep: Paths to leave in place

        Returns:
            Number of entries removed
        """
        ...

    def size(self) -> int:
        """Return the number of cached entries."""
        ...
