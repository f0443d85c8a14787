"""Startup cache builder.

Walks the asset tree once and fills a cache store before the server starts
accepting requests.
"""

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from static_cache.errors import ReadFailed
from static_cache.protocols import CacheStore
from static_cache.repositories import InMemoryCacheRepository
from static_cache.services.entry_loader import EntryLoader, canonical_path

logger = logging.getLogger(__name__)


def walk_files(directory: Path, strict: bool = False) -> Iterator[Path]:
    """Yield regular files below ``directory``, depth first.

    Symlinks are skipped. An unreadable nested directory is logged and
    skipped; ``strict`` makes an unreadable ``directory`` itself raise.
    """
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError:
        if strict:
            raise
        logger.warning("Skipping unreadable directory %s", directory, exc_info=True)
        return

    for entry in entries:
        try:
            if entry.is_symlink():
                logger.debug("Skipping symlink %s", entry.path)
            elif entry.is_dir(follow_symlinks=False):
                yield from walk_files(Path(entry.path))
            elif entry.is_file(follow_symlinks=False):
                yield Path(entry.path)
        except OSError as e:
            logger.warning("Skipping %s: %s", entry.path, e)


class CacheBuilder:
    """Populates a cache store from a directory tree.

    Business logic:
    1. Recursively enumerate regular files (symlinks are skipped)
    2. Key each file by its canonical path
    3. Load it through the shared entry loader (raw bytes on transform failure)
    4. Skip files that cannot be read, without aborting the build

    Example:
        ```python
        builder = CacheBuilder(EntryLoader(MinifyTransformer.create()))
        store = builder.build(Path("public"))
        print(store.size())
        ```
    """

    def __init__(self, loader: EntryLoader) -> None:
        """Initialize the builder.

        Args:
            loader: Shared read-and-transform step.
        """
        self._loader = loader

    def build(self, root_dir: Path | str, store: CacheStore | None = None) -> CacheStore:
        """Build the cache for a directory tree.

        Args:
            root_dir: Root of the asset tree
            store: Store to populate. A new in-memory store if None.

        Returns:
            The populated store

        Raises:
            OSError: If the root directory itself cannot be read
        """
        root = Path(root_dir)
        store = store if store is not None else InMemoryCacheRepository()

        skipped = 0
        for file_path in walk_files(root, strict=True):
            key = canonical_path(file_path.relative_to(root))
            try:
                entry = self._loader.load(file_path, key)
            except ReadFailed as e:
                logger.warning("Skipping %s: %s", key, e.error)
                skipped += 1
                continue
            store.set(key, entry)

        logger.info("Cached %d files from %s (%d skipped)", store.size(), root, skipped)
        return store

