"""Variant operation checks against a category attribute schema.

VVA1 and VVA2 run per create/update entry so every message can point at the
offending ``create[i]``/``update[i]``. VVA3 and VVA4 run over the variant set
that would exist once the batch is applied. VVA5 rejects a variant id that is
both updated and deleted. Nothing fails fast.
"""

from __future__ import annotations

from ..canonical.entities import Category, Variant
from ..canonical.operations import (
    ResultingVariant,
    VariantCreate,
    VariantOps,
    VariantUpdate,
    resulting_variants,
)
from .report import ValidationIssue, ValidationReport, build_report

VARIANTS_VALIDATION_FAILED = "VARIANTS_VALIDATION_FAILED"


def validate_variants(
    category: Category,
    ops: VariantOps | None,
    current_variants: list[Variant] | None = None,
    *,
    reset_attributes: bool = False,
) -> ValidationReport:
    value_to_attribute = category.value_to_attribute()
    issues: list[ValidationIssue] = []

    for kind, position, command in (ops or VariantOps()).labelled():
        if not isinstance(command, (VariantCreate, VariantUpdate)):
            continue
        value_ids = command.attribute_value_ids
        if not value_ids:
            continue
        operation = f"{kind}[{position}]"
        name = command.sku or (operation if isinstance(command, VariantCreate) else command.id)
        issues.extend(_check_invalid_values(name, operation, value_ids, value_to_attribute))
        issues.extend(_check_attribute_collisions(name, operation, value_ids, value_to_attribute))

    if ops is not None:
        overlap = sorted({op.id for op in ops.update} & set(ops.delete))
        if overlap:
            issues.append(
                ValidationIssue(
                    code="VVA5",
                    message=f"Variant {', '.join(overlap)} cannot be both updated and deleted",
                    field="variants",
                    details={"overlapping": overlap},
                )
            )

    resulting = resulting_variants(current_variants, ops, reset_attributes=reset_attributes)
    capacity_issue = _check_capacity(len(resulting), category)
    if capacity_issue is not None:
        issues.append(capacity_issue)
    issues.extend(_check_duplicate_combinations(resulting))

    return build_report(
        issues,
        code=VARIANTS_VALIDATION_FAILED,
        noun="variants",
        field="variants",
    )


def _check_invalid_values(
    name: str,
    operation: str,
    value_ids: tuple[str, ...],
    value_to_attribute: dict[str, str],
) -> list[ValidationIssue]:
    return [
        ValidationIssue(
            code="VVA1",
            message=(
                f"{operation}: Invalid attribute value \"{value_id}\" for variant {name}. "
                "Attribute values should match product category."
            ),
            field="attributeValueIds",
            operation=operation,
            details={"invalidValue": value_id},
        )
        for value_id in value_ids
        if value_id not in value_to_attribute
    ]


def _check_attribute_collisions(
    name: str,
    operation: str,
    value_ids: tuple[str, ...],
    value_to_attribute: dict[str, str],
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    seen: dict[str, list[str]] = {}
    for value_id in value_ids:
        attribute_id = value_to_attribute.get(value_id)
        if attribute_id is None:
            continue
        previous = seen.setdefault(attribute_id, [])
        if previous:
            issues.append(
                ValidationIssue(
                    code="VVA2",
                    message=(
                        f"{operation}: Variant {name} has multiple values for the same attribute "
                        f"({attribute_id}). Found values: {', '.join(previous)} and {value_id}."
                    ),
                    field="attributeValueIds",
                    operation=operation,
                    details={"attributeId": attribute_id, "duplicates": [*previous, value_id]},
                )
            )
        previous.append(value_id)
    return issues


def _check_capacity(variant_count: int, category: Category) -> ValidationIssue | None:
    if variant_count < 1:
        return ValidationIssue(
            code="VVA3",
            message="Product must have at least 1 variant. Cannot delete all variants.",
            field="variants",
            details={"current": variant_count, "minimum": 1},
        )

    maximum = category.max_combinations()
    if variant_count > maximum:
        return ValidationIssue(
            code="VVA3",
            message=(
                f"Product has {variant_count} variant(s), but category only allows "
                f"{maximum} unique combination(s)"
            ),
            field="variants",
            details={"current": variant_count, "maximum": maximum},
        )
    return None


def _check_duplicate_combinations(resulting: list[ResultingVariant]) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    first_seen: dict[tuple[str, ...], str] = {}
    for variant in resulting:
        key = variant.combination
        existing = first_seen.get(key)
        if existing is None:
            first_seen[key] = variant.source
            continue
        combination = ", ".join(key) if key else "no attribute values"
        issues.append(
            ValidationIssue(
                code="VVA4",
                message=(
                    f"Duplicate attribute combination ({combination}) found in variants "
                    f"{existing} and {variant.source}"
                ),
                field="variants.attributeValueIds",
                operation=variant.source if variant.source != variant.id else None,
                details={"duplicates": [existing, variant.source]},
            )
        )
    return issues


__all__ = ["VARIANTS_VALIDATION_FAILED", "validate_variants"]
