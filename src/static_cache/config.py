import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip().lower() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Assets
    public_dir: str = os.getenv("PUBLIC_DIR", "public")
    inject_html: str = os.getenv("INJECT_HTML", "")
    inject_html_file: str | None = os.getenv("INJECT_HTML_FILE")
    watch_enabled: bool = os.getenv("WATCH_ENABLED", "true").lower() == "true"

    # Access gate
    trust_header: str = os.getenv("TRUST_HEADER", "x-forwarded-proto")
    trusted_protocols: tuple[str, ...] = _split_csv(os.getenv("TRUSTED_PROTOCOLS", "https"))

    # Server
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8080"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def public_path(self) -> Path:
        """Root directory of the served asset tree."""
        return Path(self.public_dir)

    def load_inject_html(self) -> str:
        """Resolve the HTML fragment to inject.

        Returns:
            Contents of INJECT_HTML_FILE when set, INJECT_HTML otherwise
        """
        if self.inject_html_file:
            return Path(self.inject_html_file).read_text(encoding="utf-8")
        return self.inject_html

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not 0 < self.port < 65536:
            raise ValueError(f"PORT must be between 1 and 65535, got {self.port}")

        if not self.trusted_protocols:
            raise ValueError("TRUSTED_PROTOCOLS must name at least one protocol")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
