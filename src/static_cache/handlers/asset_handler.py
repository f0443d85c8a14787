"""HTTP handler for asset requests.

Fallback chain: cached entry -> file on disk -> 404.
"""

from fastapi import Request, Response, status
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException
from starlette.staticfiles import StaticFiles

from static_cache.errors import NotHandled
from static_cache.services import AssetService

NOT_FOUND_MESSAGE = "Not found"


class AssetHandler:
    """Turns serving-layer results into HTTP responses.

    Cache hits are sent as stored, with no further transformation. Misses
    fall through to a plain read from the same root (files the cache never
    captured), and finally to a 404.
    """

    def __init__(self, asset_service: AssetService, static_files: StaticFiles | None = None) -> None:
        """Initialize the asset handler.

        Args:
            asset_service: The serving layer (required).
            static_files: Disk fallback rooted at the asset directory. None
                disables the fallback.
        """
        self._assets = asset_service
        self._static = static_files

    async def serve(self, request: Request) -> Response:
        """Handle GET/HEAD for any asset path.

        Args:
            request: The incoming request

        Returns:
            The cached asset, the file from disk, or a 404 response
        """
        result = self._assets.serve(request.scope["path"])
        if isinstance(result, NotHandled):
            return await self._fallback(result, request)
        return Response(content=result.content, media_type=result.content_type)

    async def _fallback(self, miss: NotHandled, request: Request) -> Response:
        if self._static is None:
            return self.not_found()

        try:
            return await self._static.get_response(miss.path.lstrip("/"), request.scope)
        except HTTPException as e:
            if e.status_code == status.HTTP_404_NOT_FOUND:
                return self.not_found()
            raise

    @staticmethod
    def not_found() -> Response:
        return PlainTextResponse(NOT_FOUND_MESSAGE, status_code=status.HTTP_404_NOT_FOUND)
