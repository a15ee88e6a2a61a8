"""Request-shape rules checked before any domain validation."""

from __future__ import annotations

import re

from ..canonical.entities import PRODUCT_STATUSES, Image
from ..canonical.operations import ImageOps, VariantCreate, VariantOps, VariantUpdate, resulting_images
from .report import ValidationIssue, ValidationReport, build_report

REQUEST_SHAPE_INVALID = "REQUEST_SHAPE_INVALID"
MAX_IMAGES_PER_PRODUCT = 5

_NAME_PATTERN = re.compile(r"^[a-zà-ÿ][a-zà-ÿ ]*$")
_MIN_NAME_LENGTH = 3
_MIN_SKU_LENGTH = 3


def validate_create_request(
    *,
    name: str,
    description: str | None,
    status: str | None,
    variants: VariantOps | None,
    images_ops: ImageOps | None,
    max_images: int = MAX_IMAGES_PER_PRODUCT,
) -> ValidationReport:
    issues: list[ValidationIssue] = []
    issues.extend(_check_name(name))
    if not (description or "").strip():
        issues.append(_issue("description", "Description is required."))
    if status is None:
        issues.append(_issue("status", "Status is required."))
    else:
        issues.extend(_check_status(status))

    variants = variants or VariantOps()
    if not variants.create:
        issues.append(_issue("variants.create", "At least one variant is required."))
    if variants.update or variants.delete:
        issues.append(_issue("variants", "Only create operations are allowed when creating a product."))
    issues.extend(_check_variant_fields(variants))

    images_ops = images_ops or ImageOps()
    image_count = len(images_ops.create)
    if image_count < 1 or image_count > max_images:
        issues.append(
            _issue(
                "imagesOps.create",
                f"A product needs between 1 and {max_images} images ({image_count} given).",
            )
        )
    if images_ops.update or images_ops.delete:
        issues.append(_issue("imagesOps", "Only create operations are allowed when creating a product."))

    return build_report(issues, code=REQUEST_SHAPE_INVALID, noun="request", field="body")


def validate_patch_request(
    *,
    name: str | None,
    status: str | None,
    variants: VariantOps | None,
    images_ops: ImageOps | None,
    current_images: list[Image],
    max_images: int = MAX_IMAGES_PER_PRODUCT,
) -> ValidationReport:
    issues: list[ValidationIssue] = []
    if name is not None:
        issues.extend(_check_name(name))
    if status is not None:
        issues.extend(_check_status(status))
    if variants is not None:
        issues.extend(_check_variant_fields(variants))

    if images_ops is not None:
        if len(images_ops.create) > max_images or len(images_ops.update) > max_images:
            issues.append(_issue("imagesOps", f"At most {max_images} image operations per kind are allowed."))
        resulting_count = len(resulting_images(current_images, images_ops))
        if resulting_count > max_images:
            issues.append(
                _issue(
                    "imagesOps",
                    f"Product would have {resulting_count} images, the maximum is {max_images}.",
                )
            )

    return build_report(issues, code=REQUEST_SHAPE_INVALID, noun="request", field="body")


def _issue(field: str, message: str, *, operation: str | None = None) -> ValidationIssue:
    return ValidationIssue(code=REQUEST_SHAPE_INVALID, message=message, field=field, operation=operation)


def _check_name(name: str) -> list[ValidationIssue]:
    text = name or ""
    if len(text) < _MIN_NAME_LENGTH or not _NAME_PATTERN.match(text):
        return [
            _issue(
                "name",
                "Name must be at least 3 characters of lowercase letters and spaces, starting with a letter.",
            )
        ]
    return []


def _check_status(status: str) -> list[ValidationIssue]:
    if status not in PRODUCT_STATUSES:
        return [_issue("status", f"Status must be one of: {', '.join(PRODUCT_STATUSES)}.")]
    return []


def _check_variant_fields(variants: VariantOps) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for kind, position, command in variants.labelled():
        if not isinstance(command, (VariantCreate, VariantUpdate)):
            continue
        operation = f"{kind}[{position}]"
        if command.price is not None and command.price < 0:
            issues.append(_issue("price", f"{operation}: price must be >= 0.", operation=operation))
        if command.stock is not None and command.stock < 0:
            issues.append(_issue("stock", f"{operation}: stock must be >= 0.", operation=operation))
        if command.sku is not None and len(command.sku) < _MIN_SKU_LENGTH:
            issues.append(_issue("sku", f"{operation}: sku must be at least 3 characters.", operation=operation))
    return issues


__all__ = [
    "MAX_IMAGES_PER_PRODUCT",
    "REQUEST_SHAPE_INVALID",
    "validate_create_request",
    "validate_patch_request",
]
