"""Product mutation exceptions.

Raised by the orchestrator. Frontends (server, CLI) catch these and translate
them into their own responses.
"""

from __future__ import annotations

from .validate.report import AggregatedError


class ProductMutationError(Exception):
    code = "MUTATION_FAILED"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class ProductValidationError(ProductMutationError):
    """Aggregated validation failure: every violation is listed in ``error``."""

    def __init__(self, error: AggregatedError) -> None:
        super().__init__(error.message, code=error.code)
        self.error = error

    def to_dict(self) -> dict:
        return self.error.to_dict()


class RequestShapeError(ProductValidationError):
    """The request is malformed before any domain rule applies."""


class NotFoundError(ProductMutationError):
    code = "NOT_FOUND"


class ConflictError(ProductMutationError):
    code = "CONFLICT"


class UploadError(ProductMutationError):
    code = "UPLOAD_FAILED"


class MutationPersistenceError(ProductMutationError):
    """The atomic write failed after validation; not retryable by the client."""

    code = "PERSISTENCE_FAILED"


__all__ = [
    "ConflictError",
    "MutationPersistenceError",
    "NotFoundError",
    "ProductMutationError",
    "ProductValidationError",
    "RequestShapeError",
    "UploadError",
]
