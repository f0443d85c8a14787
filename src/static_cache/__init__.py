"""Static Cache - static asset server with an in-memory minified cache.

This package provides a layered architecture for serving a directory of
web assets:

Layers:
    - protocols: Interface contracts (CacheStore, AssetTransformer)
    - repositories: In-memory store and minifying transformer
    - services: Cache builder, watcher and serving layer
    - handlers: Access gate and HTTP asset handler
    - entities: Domain models (internal)

Usage:
    ```python
    from static_cache.repositories import MinifyTransformer
    from static_cache.services import AssetService, CacheBuilder, EntryLoader

    loader = EntryLoader(MinifyTransformer.create(inject_html="<!-- x -->"))
    store = CacheBuilder(loader).build("public")
    AssetService(store).serve("/")
    ```

For the HTTP server:
    ```python
    from static_cache.api.app import app, create_app
    ```
"""

from static_cache.config import Settings, get_settings, settings
from static_cache.entities import CacheEntry
from static_cache.errors import (
    AccessDecision,
    NotHandled,
    ReadFailed,
    StaticCacheError,
    TransformFailed,
    Transformed,
)
from static_cache.handlers import AccessGate, AssetHandler, admit
from static_cache.protocols import AssetTransformer, CacheStore
from static_cache.repositories import InMemoryCacheRepository, MinifyTransformer
from static_cache.services import AssetService, CacheBuilder, CacheWatcher, EntryLoader

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    "settings",
    # Protocols (interfaces)
    "AssetTransformer",
    "CacheStore",
    # Services (cache logic)
    "AssetService",
    "CacheBuilder",
    "CacheWatcher",
    "EntryLoader",
    # Handlers (HTTP)
    "AccessGate",
    "AssetHandler",
    "admit",
    # Repositories
    "InMemoryCacheRepository",
    "MinifyTransformer",
    # Entities and results
    "CacheEntry",
    "AccessDecision",
    "NotHandled",
    "ReadFailed",
    "StaticCacheError",
    "TransformFailed",
    "Transformed",
]
