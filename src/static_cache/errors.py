"""Error and result types shared across layers.

Only ``ReadFailed`` is raised. The other types are plain values returned
from the transform adapter, the serving layer and the access gate so that
callers branch on them instead of catching exceptions.
"""

from dataclasses import dataclass
from pathlib import Path


class StaticCacheError(Exception):
    """Base class for static cache errors."""


class ReadFailed(StaticCacheError):
    """A file could not be read (vanished, permission denied, ...).

    Attributes:
        path: The file that failed to read
        error: The underlying OS error
    """

    def __init__(self, path: Path, error: OSError) -> None:
        super().__init__(f"Failed to read {path}: {error}")
        self.path = path
        self.error = error


@dataclass(frozen=True)
class Transformed:
    """Successful transform result."""

    content: bytes
    content_type: str


@dataclass(frozen=True)
class TransformFailed:
    """Failed transform result.

    The content type is still resolved so the caller can serve the raw bytes.
    """

    error: Exception
    content_type: str


TransformResult = Transformed | TransformFailed


@dataclass(frozen=True)
class NotHandled:
    """Cache miss for a normalized request path."""

    path: str


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of the access gate."""

    allowed: bool
    status_code: int = 200
    message: str = ""
