"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Settings (and an optional transformer override) set on app.state by
      the app factory
    - Cache built and watcher started during lifespan, before the first request
    - Dependency functions retrieve from request.app.state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from starlette.staticfiles import StaticFiles

from static_cache.config import Settings
from static_cache.handlers import AssetHandler
from static_cache.protocols import AssetTransformer
from static_cache.repositories import MinifyTransformer
from static_cache.services import AssetService, CacheBuilder, CacheWatcher, EntryLoader

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> AssetHandler:
    """Dependency injection for AssetHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "asset_handler", None)
    if handler is None:
        raise RuntimeError("AssetHandler not initialized. Check lifespan setup.")
    return handler


def build_transformer(settings: Settings) -> AssetTransformer:
    """Create the default minifying transformer from settings."""
    return MinifyTransformer.create(inject_html=settings.load_inject_html())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores them in app.state:
    1. Cache store - built synchronously from the asset tree
    2. Watcher - started in the background when enabled
    3. Service and handler - used by the asset route

    The build must finish before the app accepts requests; an unreadable
    root directory raises here and aborts startup.

    Cleanup:
        Stops the watcher and removes all services from app.state
    """
    settings: Settings = app.state.settings
    root = settings.public_path

    transformer = getattr(app.state, "transformer", None) or build_transformer(settings)
    loader = EntryLoader(transformer)

    logger.info("Building minified cache from %s", root)
    store = CacheBuilder(loader).build(root)

    watcher: CacheWatcher | None = None
    if settings.watch_enabled:
        watcher = CacheWatcher(root, store, loader)
        await watcher.start()

    asset_service = AssetService(store)
    app.state.store = store
    app.state.watcher = watcher
    app.state.asset_service = asset_service
    app.state.asset_handler = AssetHandler(asset_service, StaticFiles(directory=root, html=True))

    logger.info("Serving %d cached files", store.size())

    yield

    if watcher is not None:
        await watcher.stop()

    del app.state.asset_handler
    del app.state.asset_service
    del app.state.watcher
    del app.state.store
    logger.info("Static cache shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[AssetHandler, Depends(get_handler)]
