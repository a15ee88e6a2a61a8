"""Public package entrypoint for the Spiceworld product engine.

This package provides a stable import surface for the product mutation core
(validation, thumbnail and publish resolution, atomic create/patch), plus
optional frontend adapters (CLI and FastAPI server).
"""

from importlib.metadata import PackageNotFoundError, version
from typing import Any

_LAZY_EXPORTS: dict[str, tuple[str, str]] = {
    "MutationOrchestrator": ("spiceworld.core", "MutationOrchestrator"),
    "Product": ("spiceworld.core", "Product"),
    "app": ("spiceworld.server.main", "app"),
    "create_app": ("spiceworld.server.main", "create_app"),
    "validate_and_resolve": ("spiceworld.core", "validate_and_resolve"),
}

try:
    __version__ = version("spiceworld")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "MutationOrchestrator",
    "Product",
    "__version__",
    "app",
    "create_app",
    "validate_and_resolve",
]


def __getattr__(name: str) -> Any:
    target = _LAZY_EXPORTS.get(name)
    if target is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, attribute_name = target
    module = __import__(module_name, fromlist=[attribute_name])
    value = getattr(module, attribute_name)
    globals()[name] = value
    return value
