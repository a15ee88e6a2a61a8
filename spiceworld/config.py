"""Shared runtime settings for the server adapter.

This module owns environment-backed application settings. It is intentionally
separate from ``spiceworld.core.config`` because core config stays minimal and
framework-agnostic.
"""

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class Settings:
    app_name: str
    debug: bool
    log_verbosity: str
    strict_publish: bool
    storage_path: str
    storage_base_url: str
    catalog_seed_path: str | None
    cors_allow_origins: tuple[str, ...]


def _env_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}


def _env_choice(name: str, default: str, *, allowed: set[str]) -> str:
    val = os.getenv(name)
    if val is None:
        return default
    normalized = val.strip().lower()
    if normalized in allowed:
        return normalized
    return default


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    origins = tuple(
        origin.strip()
        for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
        if origin.strip()
    )
    return Settings(
        app_name=os.getenv("APP_NAME", "Spiceworld"),
        debug=_env_bool("DEBUG", default=False),
        strict_publish=_env_bool("STRICT_PUBLISH", default=False),
        log_verbosity=_env_choice(
            "LOG_VERBOSITY",
            default="medium",
            allowed={"low", "medium", "high", "extrahigh"},
        ),
        storage_path=os.getenv("STORAGE_PATH", "var/uploads"),
        storage_base_url=os.getenv("STORAGE_BASE_URL", "/static/uploads"),
        catalog_seed_path=os.getenv("CATALOG_SEED_PATH") or None,
        cors_allow_origins=origins or ("*",),
    )


__all__ = ["Settings", "get_settings"]
