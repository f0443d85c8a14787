"""Filesystem watcher that keeps the cache in sync with the disk.

Change notifications come from ``watchfiles.awatch`` (recursive, under the
root). One background task consumes them; each changed path is handled on
its own, in arrival order, by re-reading the file or dropping its entry.
A directory path covers everything below it. If the subscription fails it
is re-opened with exponential backoff, and the whole tree is re-read first
because events may have been missed in between.
"""

import asyncio
import logging
import stat
from collections.abc import AsyncIterator, Callable, Iterable
from pathlib import Path
from typing import Any

from watchfiles import awatch

from static_cache.entities import CacheEntry
from static_cache.errors import ReadFailed
from static_cache.protocols import CacheStore
from static_cache.services.cache_builder import walk_files
from static_cache.services.entry_loader import EntryLoader, canonical_path

logger = logging.getLogger(__name__)

# Seconds to let the subscription exit on its own before cancelling it
STOP_TIMEOUT = 5.0
# Backoff bounds, in seconds, for re-opening a failed subscription
RETRY_DELAY = 1.0
MAX_RETRY_DELAY = 30.0

ChangeBatch = Iterable[tuple[Any, str]]
ChangeSource = Callable[[Path, asyncio.Event], AsyncIterator[ChangeBatch]]


def watchfiles_source(root: Path, stop_event: asyncio.Event) -> AsyncIterator[ChangeBatch]:
    """Subscribe to every change below ``root`` until ``stop_event`` is set."""
    return awatch(root, watch_filter=None, stop_event=stop_event, recursive=True)


class CacheWatcher:
    """Applies filesystem changes to a cache store.

    Handling is idempotent: the new entry is derived only from the file's
    current content, so replaying an event converges to the same entry.
    Batches are consumed by a single task and their paths applied one at a
    time, which keeps updates to the same path from interleaving.

    Example:
        ```python
        watcher = CacheWatcher(Path("public"), store, loader)
        await watcher.start()
        ...
        await watcher.stop()
        ```
    """

    def __init__(
        self,
        root_dir: Path | str,
        store: CacheStore,
        loader: EntryLoader,
        source: ChangeSource | None = None,
        retry_delay: float = RETRY_DELAY,
        max_retry_delay: float = MAX_RETRY_DELAY,
    ) -> None:
        """
        Args:
            root_dir: Root of the asset tree
            store: Store to keep up to date
            loader: Shared read-and-transform step
            source: Change notification source. Defaults to watchfiles.
            retry_delay: First wait before re-opening a failed subscription
            max_retry_delay: Upper bound for the doubling wait
        """
        self._root = Path(root_dir).resolve()
        self._store = store
        self._loader = loader
        self._source = source or watchfiles_source
        self._retry_delay = retry_delay
        self._max_retry_delay = max_retry_delay
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background subscription and return immediately."""
        if self.running:
            logger.warning("Watcher already running for %s", self._root)
            return

        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._watch_loop())
        logger.info("Started watching %s", self._root)

    async def stop(self) -> None:
        """Stop the subscription and wait for the task to finish."""
        if self._task is None:
            return

        self._stop_event.set()
        await asyncio.wait({self._task}, timeout=STOP_TIMEOUT)
        if not self._task.done():
            self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Stopped watching %s", self._root)

    async def wait(self) -> None:
        """Wait until the change source is exhausted."""
        if self._task is not None:
            await self._task

    async def _watch_loop(self) -> None:
        delay = self._retry_delay
        try:
            while not self._stop_event.is_set():
                try:
                    async for changes in self._source(self._root, self._stop_event):
                        delay = self._retry_delay
                        await self._apply_batch(changes)
                    return
                except Exception:
                    logger.exception(
                        "Watch subscription failed for %s, retrying in %.1fs", self._root, delay
                    )

                if await self._stopped_within(delay):
                    return
                delay = min(delay * 2, self._max_retry_delay)
                try:
                    await asyncio.to_thread(self.resync)
                except Exception:
                    logger.exception("Resync failed for %s", self._root)
        except asyncio.CancelledError:
            logger.debug("Watch loop cancelled")
            raise

    async def _apply_batch(self, changes: ChangeBatch) -> None:
        for relative in self._changed_paths(changes):
            try:
                await asyncio.to_thread(self.apply, relative)
            except Exception:
                logger.exception("Failed to apply change for %s", relative)

    async def _stopped_within(self, delay: float) -> bool:
        """Wait up to ``delay`` seconds; True if stop was requested meanwhile."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True

    def _changed_paths(self, changes: ChangeBatch) -> list[str]:
        """Relative paths in a batch, de-duplicated, outside-root paths dropped."""
        paths: dict[str, None] = {}
        for _change, changed in changes:
            try:
                relative = Path(changed).relative_to(self._root)
            except ValueError:
                logger.debug("Ignoring change outside root: %s", changed)
                continue
            if relative.parts:
                paths[relative.as_posix()] = None
        return list(paths)

    def apply(self, relative_path: str) -> CacheEntry | None:
        """Bring the entry for one path in line with the disk.

        A path that is gone, or is no longer a regular file, takes every key
        below it along. A directory has each of its files (re)loaded.

        Args:
            relative_path: Path relative to the root

        Returns:
            The new entry, or None if the path holds no cacheable file
        """
        key = canonical_path(relative_path)
        file_path = self._root / relative_path

        try:
            st = file_path.lstat()
        except (FileNotFoundError, NotADirectoryError):
            self._drop(key)
            return None
        except OSError as e:
            logger.warning("Cannot stat %s, dropping cached entry: %s", key, e)
            self._drop(key)
            return None

        if stat.S_ISDIR(st.st_mode):
            self._store.delete(key)
            loaded = self._load_tree(file_path)
            self._store.delete_prefix(key + "/", keep=loaded)
            logger.debug("Reloaded directory %s (%d files)", key, len(loaded))
            return None

        if not stat.S_ISREG(st.st_mode):
            self._drop(key)
            return None

        try:
            entry = self._loader.load(file_path, key)
        except ReadFailed as e:
            logger.warning("Cannot read %s, dropping cached entry: %s", key, e.error)
            self._store.delete(key)
            return None

        self._store.set(key, entry)
        logger.debug("Updated %s (%d bytes)", key, entry.size)
        return entry

    def resync(self) -> int:
        """Reload the whole tree and drop every key with no file behind it.

        Returns:
            Number of entries now cached
        """
        loaded = self._load_tree(self._root)
        removed = self._store.delete_prefix("/", keep=loaded)
        logger.info("Resynced %s: %d cached, %d removed", self._root, len(loaded), removed)
        return len(loaded)

    def _drop(self, key: str) -> None:
        removed = self._store.delete_prefix(key + "/")
        if self._store.delete(key) or removed:
            logger.debug("Removed %s (%d below it)", key, removed)

    def _load_tree(self, directory: Path) -> set[str]:
        """Load every regular file below ``directory``; return the keys set."""
        loaded: set[str] = set()
        for file_path in walk_files(directory):
            key = canonical_path(file_path.relative_to(self._root))
            try:
                entry = self._loader.load(file_path, key)
            except ReadFailed as e:
                logger.warning("Cannot read %s, dropping cached entry: %s", key, e.error)
                self._store.delete(key)
                continue
            self._store.set(key, entry)
            loaded.add(key)
        return loaded
