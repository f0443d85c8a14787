"""Shared read-and-transform step for the builder and the watcher.

The fallback policy lives here and nowhere else: when the transformer
reports a failure the raw bytes are cached under the same content type
and a warning is logged, so the asset stays servable.
"""

import logging
from pathlib import Path, PurePath

from static_cache.entities import CacheEntry
from static_cache.errors import ReadFailed, TransformFailed
from static_cache.protocols import AssetTransformer

logger = logging.getLogger(__name__)


def canonical_path(relative: str | PurePath) -> str:
    """Build the cache key for a path relative to the root.

    Args:
        relative: Path relative to the root directory, any separator style

    Returns:
        The path with a leading ``/`` and forward slashes
    """
    posix = PurePath(relative).as_posix().replace("\\", "/")
    return "/" + posix.lstrip("/")


class EntryLoader:
    """Reads a file and turns it into a CacheEntry."""

    def __init__(self, transformer: AssetTransformer) -> None:
        self._transformer = transformer

    def load(self, file_path: Path, key: str) -> CacheEntry:
        """Read and transform one file.

        Args:
            file_path: File on disk
            key: Canonical path, used in log messages

        Returns:
            The transformed entry, or the raw bytes when the transform failed

        Raises:
            ReadFailed: If the file cannot be read
        """
        try:
            data = file_path.read_bytes()
        except OSError as e:
            raise ReadFailed(file_path, e) from e

        result = self._transformer.transform(data, file_path.suffix)
        if isinstance(result, TransformFailed):
            logger.warning("Minify failed for %s, serving raw. Error: %s", key, result.error)
            return CacheEntry(content=data, content_type=result.content_type)

        return CacheEntry(content=result.content, content_type=result.content_type)
