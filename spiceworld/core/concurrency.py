"""Optimistic concurrency on the product version counter."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ConflictError

VERSION_CONFLICT = "VERSION_CONFLICT"


@dataclass(frozen=True)
class ConcurrencyGuard:
    """Compare-and-swap on a monotonic integer.

    ``declared`` is the version the client last read (``_version``). ``None``
    means the client did not declare one; the version loaded by the
    orchestrator is then used as the expected value at commit time.
    """

    declared: int | None
    loaded: int

    @property
    def expected(self) -> int:
        return self.loaded if self.declared is None else self.declared

    def check(self) -> None:
        if self.declared is not None and self.declared != self.loaded:
            raise_version_conflict()


def compare_and_swap(stored: int, expected: int) -> int:
    """Return the version to store, or raise when ``expected`` is stale."""
    if stored != expected:
        raise_version_conflict()
    return stored + 1


def raise_version_conflict() -> None:
    raise ConflictError(
        "Product was modified by another request. Reload it and retry.",
        code=VERSION_CONFLICT,
    )


__all__ = ["VERSION_CONFLICT", "ConcurrencyGuard", "compare_and_swap", "raise_version_conflict"]
