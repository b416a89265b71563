"""Application settings for the todo query service.

Cache bounds and endpoint addresses are read from the environment. A ``.env``
file is loaded with ``python-dotenv`` and the values are exposed through an
immutable Pydantic settings object.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

# Load environment variables from a .env file if present
load_dotenv()

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_CACHE_CAPACITY = 25
DEFAULT_CACHE_TTL_MS = 5 * 60 * 1000
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 4000
DEFAULT_SERVER_URL = "http://localhost:4000/"
REQUEST_TIMEOUT = 10  # seconds


class Settings(BaseModel):
    """Immutable settings object used across the application."""

    cache_capacity: int = DEFAULT_CACHE_CAPACITY
    cache_ttl_ms: int = DEFAULT_CACHE_TTL_MS
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    server_url: str = DEFAULT_SERVER_URL
    timeout: int = REQUEST_TIMEOUT

    model_config = ConfigDict(frozen=True)

    @property
    def ttl_seconds(self) -> float:
        return self.cache_ttl_ms / 1000.0


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise RuntimeError(f"{name} must be positive, got {value}")
    return value


def _build_settings() -> Settings:
    """Construct the ``Settings`` instance based on environment variables."""

    return Settings(
        cache_capacity=_positive_int("TODO_CACHE_CAPACITY", DEFAULT_CACHE_CAPACITY),
        cache_ttl_ms=_positive_int("TODO_CACHE_TTL_MS", DEFAULT_CACHE_TTL_MS),
        host=os.getenv("TODO_SERVER_HOST", DEFAULT_HOST),
        port=_positive_int("TODO_SERVER_PORT", DEFAULT_PORT),
        server_url=os.getenv("TODO_SERVER_URL", DEFAULT_SERVER_URL),
        timeout=_positive_int("TODO_REQUEST_TIMEOUT", REQUEST_TIMEOUT),
    )


# Public settings instance
settings = _build_settings()
