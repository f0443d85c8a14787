"""Access gate: only admit requests that reached the proxy over HTTPS.

TLS is terminated upstream; the proxy reports the original protocol in a
forwarded header. Anything else gets a 426 before routing.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable

from fastapi import Request, Response, status
from fastapi.responses import PlainTextResponse

from static_cache.errors import AccessDecision

logger = logging.getLogger(__name__)

REJECT_MESSAGE = "HTTPS (via HTTP/3) required."
DEFAULT_TRUSTED = ("https",)

ALLOW = AccessDecision(allowed=True)
REJECT = AccessDecision(
    allowed=False,
    status_code=status.HTTP_426_UPGRADE_REQUIRED,
    message=REJECT_MESSAGE,
)


def admit(signal: str | None, accepted: Iterable[str] = DEFAULT_TRUSTED) -> AccessDecision:
    """Decide whether a request may proceed.

    Args:
        signal: Trust signal value (e.g. the X-Forwarded-Proto header), or None
        accepted: Accepted values, compared case-insensitively

    Returns:
        ALLOW or REJECT
    """
    normalized = (signal or "").strip().lower()
    if normalized and normalized in {value.lower() for value in accepted}:
        return ALLOW
    return REJECT


class AccessGate:
    """HTTP middleware applying ``admit`` to every request.

    Example:
        ```python
        gate = AccessGate(header="x-forwarded-proto", accepted=("https",))
        app.middleware("http")(gate)
        ```
    """

    def __init__(self, header: str = "x-forwarded-proto", accepted: Iterable[str] = DEFAULT_TRUSTED) -> None:
        self._header = header
        self._accepted = tuple(accepted)

    async def __call__(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        decision = admit(request.headers.get(self._header), self._accepted)
        if not decision.allowed:
            logger.debug("Rejected %s %s: untrusted transport", request.method, request.url.path)
            return PlainTextResponse(decision.message, status_code=decision.status_code)
        return await call_next(request)
