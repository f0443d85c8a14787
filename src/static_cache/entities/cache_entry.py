"""Cache entry domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CacheEntry:
    """One servable asset.

    Attributes:
        content: The transformed (or raw, on fallback) bytes
        content_type: MIME type resolved from the file extension
    """

    content: bytes
    content_type: str

    @property
    def size(self) -> int:
        """Length of the cached content in bytes."""
        return len(self.content)
