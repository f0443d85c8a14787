"""In-memory implementation of CacheStore.

The whole asset tree lives in a process-local dict. Entries are frozen
dataclasses and dict item assignment is atomic, so readers go lock-free;
the lock only serializes writers against each other.
"""

import threading
from collections.abc import Collection

from static_cache.entities import CacheEntry


class InMemoryCacheRepository:
    """Dict-backed cache store.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        store = InMemoryCacheRepository()
        store.set("/index.html", CacheEntry(b"<p>hi</p>", "text/html"))
        store.get("/index.html").content_type  # "text/html"
        ```
    """

    def __init__(self, entries: dict[str, CacheEntry] | None = None) -> None:
        """Initialize the store.

        Args:
            entries: Optional initial mapping, copied.
        """
        self._entries: dict[str, CacheEntry] = dict(entries or {})
        self._write_lock = threading.Lock()

    def get(self, path: str) -> CacheEntry | None:
        return self._entries.get(path)

    def set(self, path: str, entry: CacheEntry) -> None:
        """Replace the entry at ``path``.

        Raises:
            ValueError: If the path is not canonical
        """
        if not path.startswith("/"):
            raise ValueError(f"Cache keys must start with '/', got {path!r}")
        with self._write_lock:
            self._entries[path] = entry

    def delete(self, path: str) -> bool:
        with self._write_lock:
            return self._entries.pop(path, None) is not None

    def delete_prefix(self, prefix: str, keep: Collection[str] = ()) -> int:
        """Remove every entry whose path starts with ``prefix``.

        Args:
            prefix: Path prefix, e.g. ``/css/``
            keep: Paths to leave in place even if they match

        Returns:
            Number of entries removed
        """
        with self._write_lock:
            stale = [path for path in self._entries if path.startswith(prefix) and path not in keep]
            for path in stale:
                del self._entries[path]
        return len(stale)

    def size(self) -> int:
        return len(self._entries)

    def paths(self) -> list[str]:
        """Snapshot of cached paths, sorted."""
        with self._write_lock:
            return sorted(self._entries)

    def __contains__(self, path: object) -> bool:
        return path in self._entries
