"""Protocol interfaces for swappable implementations.

Services depend on these protocols rather than on concrete classes, so the
in-memory store or the minifying transformer can be replaced in tests.
"""

from .asset_transformer import AssetTransformer
from .cache_store import CacheStore

__all__ = [
    "AssetTransformer",
    "CacheStore",
]
