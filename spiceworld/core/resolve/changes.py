"""No-op detection for PATCH requests."""

from __future__ import annotations

from ..canonical.entities import Image, Product, Variant
from ..canonical.operations import ImageOps, VariantOps


def has_product_changes(
    current: Product,
    *,
    name: str | None = None,
    description: str | None = None,
    status: str | None = None,
    category_id: str | None = None,
) -> bool:
    return (
        (name is not None and name != current.name)
        or (description is not None and description != current.description)
        or (status is not None and status != current.status)
        or (category_id is not None and category_id != current.category_id)
    )


def has_variant_changes(ops: VariantOps | None, current_variants: list[Variant]) -> bool:
    if not ops:
        return False
    if ops.create or ops.delete:
        return True

    by_id = {variant.id: variant for variant in current_variants}
    for op in ops.update:
        current = by_id.get(op.id)
        if current is None:
            continue
        if (
            (op.price is not None and op.price != current.price)
            or (op.sku is not None and op.sku != current.sku)
            or (op.stock is not None and op.stock != current.stock)
            or (op.currency is not None and op.currency.upper() != current.currency)
            or (
                op.attribute_value_ids is not None
                and sorted(op.attribute_value_ids) != sorted(current.attribute_value_ids)
            )
        ):
            return True
    return False


def has_image_changes(ops: ImageOps | None, current_images: list[Image]) -> bool:
    if not ops:
        return False
    if ops.create or ops.delete:
        return True

    by_id = {image.id: image for image in current_images}
    for op in ops.update:
        current = by_id.get(op.id)
        if current is None:
            continue
        if (
            op.file_index is not None
            or (op.alt_text is not None and op.alt_text != current.alt_text)
            or (op.is_thumbnail is not None and op.is_thumbnail != current.is_thumbnail)
        ):
            return True
    return False


def has_changes(
    current: Product,
    *,
    name: str | None = None,
    description: str | None = None,
    status: str | None = None,
    category_id: str | None = None,
    variants: VariantOps | None = None,
    images_ops: ImageOps | None = None,
) -> bool:
    return (
        has_product_changes(
            current,
            name=name,
            description=description,
            status=status,
            category_id=category_id,
        )
        or has_variant_changes(variants, current.variants)
        or has_image_changes(images_ops, current.images)
    )


__all__ = ["has_changes", "has_image_changes", "has_product_changes", "has_variant_changes"]
