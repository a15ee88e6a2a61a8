from .images import IMAGES_VALIDATION_FAILED, validate_images
from .report import AggregatedError, ValidationIssue, ValidationReport, build_report
from .rules import (
    MAX_IMAGES_PER_PRODUCT,
    REQUEST_SHAPE_INVALID,
    validate_create_request,
    validate_patch_request,
)
from .variants import VARIANTS_VALIDATION_FAILED, validate_variants

__all__ = [
    "IMAGES_VALIDATION_FAILED",
    "MAX_IMAGES_PER_PRODUCT",
    "REQUEST_SHAPE_INVALID",
    "VARIANTS_VALIDATION_FAILED",
    "AggregatedError",
    "ValidationIssue",
    "ValidationReport",
    "build_report",
    "validate_create_request",
    "validate_images",
    "validate_patch_request",
    "validate_variants",
]
