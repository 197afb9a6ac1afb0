from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

DEFAULT_FREE_TODO_LIMIT = 10


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - FREE_TODO_LIMIT: maximum number of todos for users on the free plan (default: 10)
    - LOG_LEVEL: logging level name (default: INFO)
    - HOST: interface the server binds to (default: 127.0.0.1)
    - PORT: port the server listens on (default: 8000)
    """

    cors_allow_origins: List[str]
    free_todo_limit: int
    log_level: str
    host: str = "127.0.0.1"
    port: int = 8000


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_positive_int(value: str, default: int) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    origins = _parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*"))
    limit = _parse_positive_int(
        _get_env("FREE_TODO_LIMIT", str(DEFAULT_FREE_TODO_LIMIT)), DEFAULT_FREE_TODO_LIMIT
    )
    log_level = _get_env("LOG_LEVEL", "INFO").strip().upper()
    host = _get_env("HOST", "127.0.0.1").strip()
    port = _parse_positive_int(_get_env("PORT", "8000"), 8000)

    return Settings(
        cors_allow_origins=origins,
        free_todo_limit=limit,
        log_level=log_level,
        host=host,
        port=port,
    )
