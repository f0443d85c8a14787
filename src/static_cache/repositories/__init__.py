"""Repository layer for data access.

Concrete implementations of the protocols: the in-memory cache store and
the transform adapter wrapping the third-party minifiers.
"""

from static_cache.protocols import AssetTransformer, CacheStore

from .memory_repository import InMemoryCacheRepository
from .mime import DEFAULT_CONTENT_TYPE, MIME_TYPES, content_type_for
from .minify_transformer import MinifyTransformer

__all__ = [
    "AssetTransformer",
    "CacheStore",
    "DEFAULT_CONTENT_TYPE",
    "InMemoryCacheRepository",
    "MIME_TYPES",
    "MinifyTransformer",
    "content_type_for",
]
