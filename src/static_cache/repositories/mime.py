"""Static extension to MIME type table."""

DEFAULT_CONTENT_TYPE = "application/octet-stream"

MIME_TYPES: dict[str, str] = {
    ".html": "text/html",
    ".htm": "text/html",
    ".js": "application/javascript",
    ".mjs": "application/javascript",
    ".css": "text/css",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".webp": "image/webp",
    ".json": "application/json",
    ".map": "application/json",
    ".txt": "text/plain",
    ".xml": "application/xml",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
}


def content_type_for(extension: str) -> str:
    """Resolve the MIME type for an extension, case-insensitively."""
    return MIME_TYPES.get(extension.lower(), DEFAULT_CONTENT_TYPE)
