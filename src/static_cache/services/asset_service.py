"""Serving layer: request path to cached entry."""

from static_cache.entities import CacheEntry
from static_cache.errors import NotHandled
from static_cache.protocols import CacheStore

INDEX_PATH = "/index.html"


class AssetService:
    """Read-only view of the cache for request handling.

    Example:
        ```python
        service = AssetService(store)
        result = service.serve("/")
        if isinstance(result, NotHandled):
            ...  # fall through to the disk, then 404
        ```
    """

    def __init__(self, store: CacheStore, index_path: str = INDEX_PATH) -> None:
        """Initialize the asset service.

        Args:
            store: The cache store to read from.
            index_path: Index document, relative to a directory path.
        """
        self._store = store
        self._index_path = index_path

    def normalize(self, request_path: str) -> str:
        """Map a directory path (trailing ``/``) to its index document."""
        if request_path.endswith("/"):
            return request_path[:-1] + self._index_path
        return request_path

    def serve(self, request_path: str) -> CacheEntry | NotHandled:
        """Look up the entry for a request path.

        Args:
            request_path: The URL path of the request

        Returns:
            The cached entry, or NotHandled carrying the normalized path
        """
        path = self.normalize(request_path)
        entry = self._store.get(path)
        if entry is None:
            return NotHandled(path=path)
        return entry
