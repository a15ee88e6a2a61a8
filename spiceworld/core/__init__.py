"""Core engine API.

The core layer is framework-agnostic and safe to import from scripts, tests,
CLI commands, and web frontends.
"""

from typing import Any

_LAZY_EXPORTS: dict[str, tuple[str, str]] = {
    "AggregatedError": ("spiceworld.core.validate.report", "AggregatedError"),
    "Category": ("spiceworld.core.canonical.entities", "Category"),
    "ConflictError": ("spiceworld.core.errors", "ConflictError"),
    "CoreConfig": ("spiceworld.core.config", "CoreConfig"),
    "InMemoryBlobStore": ("spiceworld.core.memory", "InMemoryBlobStore"),
    "InMemoryCategoryRepository": ("spiceworld.core.memory", "InMemoryCategoryRepository"),
    "InMemoryProductRepository": ("spiceworld.core.memory", "InMemoryProductRepository"),
    "LocalBlobStore": ("spiceworld.core.storage", "LocalBlobStore"),
    "MutationOrchestrator": ("spiceworld.core.orchestrator", "MutationOrchestrator"),
    "MutationOutcome": ("spiceworld.core.orchestrator", "MutationOutcome"),
    "MutationResult": ("spiceworld.core.orchestrator", "MutationResult"),
    "NotFoundError": ("spiceworld.core.errors", "NotFoundError"),
    "Product": ("spiceworld.core.canonical.entities", "Product"),
    "ProductMutation": ("spiceworld.core.orchestrator", "ProductMutation"),
    "ProductMutationError": ("spiceworld.core.errors", "ProductMutationError"),
    "ProductValidationError": ("spiceworld.core.errors", "ProductValidationError"),
    "UploadedFile": ("spiceworld.core.canonical.entities", "UploadedFile"),
    "assign_thumbnail": ("spiceworld.core.resolve.thumbnail", "assign_thumbnail"),
    "config_from_env": ("spiceworld.core.config", "config_from_env"),
    "determine_publish_status": ("spiceworld.core.resolve.publish", "determine_publish_status"),
    "has_changes": ("spiceworld.core.resolve.changes", "has_changes"),
    "mutation_from_payload": ("spiceworld.core.orchestrator", "mutation_from_payload"),
    "validate_and_resolve": ("spiceworld.core.orchestrator", "validate_and_resolve"),
    "validate_images": ("spiceworld.core.validate.images", "validate_images"),
    "validate_variants": ("spiceworld.core.validate.variants", "validate_variants"),
}

__all__ = [
    "AggregatedError",
    "Category",
    "ConflictError",
    "CoreConfig",
    "InMemoryBlobStore",
    "InMemoryCategoryRepository",
    "InMemoryProductRepository",
    "LocalBlobStore",
    "MutationOrchestrator",
    "MutationOutcome",
    "MutationResult",
    "NotFoundError",
    "Product",
    "ProductMutation",
    "ProductMutationError",
    "ProductValidationError",
    "UploadedFile",
    "assign_thumbnail",
    "config_from_env",
    "determine_publish_status",
    "has_changes",
    "mutation_from_payload",
    "validate_and_resolve",
    "validate_images",
    "validate_variants",
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
