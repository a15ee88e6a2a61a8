"""Core engine configuration.

Core config is side-effect free: it does not load dotenv files.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .canonical.entities import DEFAULT_CURRENCY
from .validate.rules import MAX_IMAGES_PER_PRODUCT


@dataclass(frozen=True)
class CoreConfig:
    strict: bool = False
    max_images_per_product: int = MAX_IMAGES_PER_PRODUCT
    default_currency: str = DEFAULT_CURRENCY


def _env_int(name: str, default: int) -> int:
    val = os.getenv(name)
    if val is None:
        return default
    try:
        parsed = int(val.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def config_from_env(*, strict: bool = False) -> CoreConfig:
    return CoreConfig(
        strict=strict,
        max_images_per_product=_env_int("MAX_IMAGES_PER_PRODUCT", MAX_IMAGES_PER_PRODUCT),
        default_currency=(os.getenv("DEFAULT_CURRENCY") or DEFAULT_CURRENCY).strip().upper(),
    )


__all__ = ["CoreConfig", "config_from_env"]
