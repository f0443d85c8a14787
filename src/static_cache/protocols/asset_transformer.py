"""Asset transformer protocol.

A transformer turns raw file bytes into the bytes that get cached. It must
report failures through its return value and never raise.
"""

from typing import Protocol, runtime_checkable

from static_cache.errors import TransformResult


@runtime_checkable
class AssetTransformer(Protocol):
    """Protocol for asset transform adapters."""

    def transform(self, data: bytes, extension: str) -> TransformResult:
        """Transform file contents.

        Args:
            data: Raw file bytes
            extension: File extension including the dot (any case)

        Returns:
            Transformed on success, TransformFailed on error
        """
        ...
