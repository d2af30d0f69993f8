"""
config.py: Environment configuration for the API.

Settings come from environment variables, with an optional ``.env`` file at
the project root filling in anything not already set.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path

from boardsync.dsl.schema import LAYOUT_FRONTMATTER_KEY, InsertPosition
from boardsync.errors import ConfigurationError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# Load .env file if it exists
def _load_dotenv():
    env_path = Path(__file__).parent.parent.parent / ".env"
    if env_path.exists():
        with open(env_path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    key = key.strip()
                    value = value.strip()
                    if key and value and key not in os.environ:
                        os.environ[key] = value

_load_dotenv()


def _float(name: str, default: str) -> float:
    raw = os.environ.get(name, default)
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.app_name: str = "boardsync"
        self.app_version: str = "0.1.0"

        # Server settings
        self.host: str = os.environ.get("HOST", "0.0.0.0")
        self.port: int = int(os.environ.get("PORT", "8000"))
        self.debug: bool = os.environ.get("DEBUG", "false").lower() == "true"

        # CORS settings
        self.cors_origins: list = os.environ.get(
            "CORS_ORIGINS",
            "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
        ).split(",")

        # Documents and layouts
        self.document_root: str = os.environ.get("BOARDSYNC_DOCUMENT_ROOT", "./boards")
        self.layouts_file: str = os.environ.get("BOARDSYNC_LAYOUTS_FILE", "")
        self.frontmatter_key: str = os.environ.get(
            "BOARDSYNC_FRONTMATTER_KEY", LAYOUT_FRONTMATTER_KEY
        )

        raw_position = os.environ.get("BOARDSYNC_INSERT_POSITION", InsertPosition.LAYOUT_ORDER.value)
        try:
            self.insert_position: InsertPosition = InsertPosition(raw_position)
        except ValueError as e:
            raise ConfigurationError(
                f"BOARDSYNC_INSERT_POSITION must be one of "
                f"{', '.join(p.value for p in InsertPosition)}, got {raw_position!r}"
            ) from e

        # Cache
        self.cache_ttl_seconds: float = _float("BOARDSYNC_CACHE_TTL_SECONDS", "300")
        self.cache_sweep_seconds: float = _float("BOARDSYNC_CACHE_SWEEP_SECONDS", "60")

        # Logging
        self.log_level: str = os.environ.get("BOARDSYNC_LOG_LEVEL", "INFO").upper()

    @property
    def has_layouts_file(self) -> bool:
        """Check if an extra layout file is configured."""
        return bool(self.layouts_file)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the application."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
