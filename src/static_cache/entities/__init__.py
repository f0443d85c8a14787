"""Domain entities for internal representation.

Entities are frozen dataclasses with no external dependencies. A cached
asset is replaced as a whole whenever it changes, never mutated in place.
"""

from .cache_entry import CacheEntry

__all__ = ["CacheEntry"]
