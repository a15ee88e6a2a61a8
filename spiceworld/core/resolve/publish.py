"""Publish eligibility.

A request for ``PUBLISHED`` that the resulting variant set cannot back is
degraded to ``DRAFT`` with warnings instead of being rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..canonical.entities import Variant
from ..canonical.operations import ResultingVariant, VariantOps, resulting_variants
from ..validate.report import ValidationIssue


@dataclass(frozen=True)
class PublishDecision:
    final_status: str
    warnings: list[ValidationIssue] = field(default_factory=list)

    @property
    def warning_codes(self) -> list[str]:
        return [warning.code for warning in self.warnings]


def determine_publish_status(
    *,
    requested_status: str | None,
    current_status: str,
    current_variants: list[Variant] | None = None,
    variants: VariantOps | None = None,
    category_has_attributes: bool,
    reset_attributes: bool = False,
) -> PublishDecision:
    if requested_status != "PUBLISHED":
        return PublishDecision(final_status=requested_status or current_status)

    resulting = resulting_variants(current_variants, variants, reset_attributes=reset_attributes)
    warnings = publish_violations(resulting, category_has_attributes=category_has_attributes)
    if warnings:
        return PublishDecision(final_status="DRAFT", warnings=warnings)
    return PublishDecision(final_status="PUBLISHED")


def publish_violations(
    resulting: list[ResultingVariant] | list[Variant],
    *,
    category_has_attributes: bool,
) -> list[ValidationIssue]:
    violations: list[ValidationIssue] = []
    if not any(variant.price > 0 for variant in resulting):
        violations.append(
            ValidationIssue(
                code="PUB1",
                message="Cannot publish: at least one variant must have a price greater than 0",
                severity="warning",
                field="variants.price",
            )
        )
    if category_has_attributes and not any(variant.attribute_value_ids for variant in resulting):
        violations.append(
            ValidationIssue(
                code="PUB2",
                message=(
                    "Cannot publish: the category defines attributes but no variant "
                    "has attribute values assigned"
                ),
                severity="warning",
                field="variants.attributeValueIds",
            )
        )
    return violations


def status_after_category_change(
    *,
    requested_status: str | None,
    current_status: str,
    resulting: list[ResultingVariant],
    new_category_has_attributes: bool,
) -> PublishDecision | None:
    """Force DRAFT when a published product's variants do not fit the new category.

    Returns ``None`` when the category change does not constrain the status.
    """
    if (requested_status or current_status) != "PUBLISHED":
        return None

    if new_category_has_attributes:
        needs_draft = any(not variant.attribute_value_ids for variant in resulting)
    else:
        needs_draft = len(resulting) > 1

    if not needs_draft:
        return None

    return PublishDecision(
        final_status="DRAFT",
        warnings=[
            ValidationIssue(
                code="AUTO_DRAFT",
                message=(
                    "Product automatically set to DRAFT because its variants are not configured "
                    "for the new category. Reconfigure variant attributes for the new category."
                ),
                severity="warning",
                field="categoryId",
            )
        ],
    )


__all__ = [
    "PublishDecision",
    "determine_publish_status",
    "publish_violations",
    "status_after_category_change",
]
