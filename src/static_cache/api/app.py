import logging

from fastapi import FastAPI, Request, Response

from static_cache.api.dependencies import HandlerDep, lifespan
from static_cache.config import Settings, get_settings, settings
from static_cache.handlers import AccessGate
from static_cache.protocols import AssetTransformer


def create_app(
    app_settings: Settings | None = None,
    transformer: AssetTransformer | None = None,
) -> FastAPI:
    """Create the static asset server.

    Middleware and routes, in order:
    1. Access gate - 426 unless the request came through HTTPS
    2. Cached assets - ``/`` serves ``/index.html``
    3. Disk fallback for files not in the cache
    4. 404

    Args:
        app_settings: Settings to use. Defaults to the environment.
        transformer: Override the minifying transformer (for testing).

    Returns:
        Configured FastAPI application
    """
    app_settings = app_settings or get_settings()

    app = FastAPI(
        title="Static Cache",
        description="Static asset server with an in-memory minified cache",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = app_settings
    app.state.transformer = transformer

    app.middleware("http")(
        AccessGate(header=app_settings.trust_header, accepted=app_settings.trusted_protocols)
    )

    @app.api_route("/{asset_path:path}", methods=["GET", "HEAD"], include_in_schema=False)
    async def serve_asset(request: Request, handler: HandlerDep) -> Response:
        """Serve an asset from the cache, the disk, or 404."""
        return await handler.serve(request)

    return app


app = create_app()


def main() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "static_cache.api.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
