"""Service layer for cache building, maintenance and lookup.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Cache logic) -> (Store / Transformer)

Usage:
    ```python
    from static_cache.repositories import MinifyTransformer
    from static_cache.services import AssetService, CacheBuilder, CacheWatcher, EntryLoader

    loader = EntryLoader(MinifyTransformer.create())
    store = CacheBuilder(loader).build("public")
    watcher = CacheWatcher("public", store, loader)
    service = AssetService(store)
    ```
"""

from .asset_service import INDEX_PATH, AssetService
from .cache_builder import CacheBuilder
from .cache_watcher import CacheWatcher, watchfiles_source
from .entry_loader import EntryLoader, canonical_path

__all__ = [
    "AssetService",
    "CacheBuilder",
    "CacheWatcher",
    "EntryLoader",
    "INDEX_PATH",
    "canonical_path",
    "watchfiles_source",
]
