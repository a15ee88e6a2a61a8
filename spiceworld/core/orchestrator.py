"""Atomic product create/patch built from the pure validators and resolvers.

``validate_and_resolve`` is pure: it receives already-loaded state and returns
either a ``ResolvedMutation`` or the ``AggregatedError`` of the first failing
validator (variants before images). ``MutationOrchestrator`` adds the I/O:
repository lookups, the version check, blob uploads, the single ``persist``
call, and compensating blob deletion when that call fails.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from .canonical.entities import Category, Product, StoredBlob, UploadedFile, slugify_name
from .canonical.operations import (
    ImageOps,
    VariantOps,
    image_ops_from_payload,
    resulting_variants,
    variant_ops_from_payload,
)
from .concurrency import ConcurrencyGuard
from .config import CoreConfig
from .errors import (
    MutationPersistenceError,
    NotFoundError,
    ProductMutationError,
    ProductValidationError,
    RequestShapeError,
    UploadError,
)
from .ports import (
    BlobStore,
    CategoryRepository,
    ImageChange,
    MutationTransaction,
    NewImage,
    ProductRepository,
)
from .resolve.changes import has_changes
from .resolve.publish import (
    PublishDecision,
    determine_publish_status,
    publish_violations,
    status_after_category_change,
)
from .resolve.thumbnail import assign_thumbnail
from .validate.images import validate_images
from .validate.report import AggregatedError, ValidationIssue, ValidationReport
from .validate.rules import validate_create_request, validate_patch_request
from .validate.variants import validate_variants

logger = logging.getLogger(__name__)

STATUS_REQUIREMENTS_NOT_MET = "STATUS_REQUIREMENTS_NOT_MET"


@dataclass(frozen=True)
class ProductMutation:
    """A create (``product_id is None``) or patch request, already parsed."""

    product_id: str | None = None
    name: str | None = None
    description: str | None = None
    status: str | None = None
    category_id: str | None = None
    variants: VariantOps | None = None
    images_ops: ImageOps | None = None
    images: tuple[UploadedFile, ...] = ()
    version: int | None = None


@dataclass(frozen=True)
class ResolvedMutation:
    category: Category
    final_status: str
    variants: VariantOps | None = None
    images_ops: ImageOps | None = None
    warnings: list[ValidationIssue] = field(default_factory=list)
    referenced_indices: list[int] = field(default_factory=list)
    auto_assign_thumbnail: bool = False
    category_changed: bool = False


@dataclass(frozen=True)
class MutationResult:
    resolved: ResolvedMutation | None = None
    error: AggregatedError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class MutationOutcome:
    product: Product
    warnings: list[ValidationIssue] = field(default_factory=list)
    changed: bool = True


def mutation_from_payload(
    payload: dict[str, Any],
    *,
    product_id: str | None = None,
    images: Sequence[UploadedFile] = (),
) -> ProductMutation:
    """Build a ``ProductMutation`` from the wire payload.

    Raises ``ValueError`` when the payload is malformed.
    """
    if not isinstance(payload, dict):
        raise ValueError("Mutation payload must be a JSON object")
    version = payload.get("_version", payload.get("version"))
    if version is not None and (isinstance(version, bool) or not isinstance(version, int)):
        raise ValueError("_version must be an integer")
    category_id = payload.get("categoryId", payload.get("category_id"))
    return ProductMutation(
        product_id=product_id,
        name=payload.get("name"),
        description=payload.get("description"),
        status=payload.get("status"),
        category_id=str(category_id) if category_id is not None else None,
        variants=variant_ops_from_payload(payload.get("variants")),
        images_ops=image_ops_from_payload(payload.get("imagesOps", payload.get("images_ops"))),
        images=tuple(images),
        version=version,
    )


def validate_and_resolve(
    mutation: ProductMutation,
    *,
    category: Category,
    current: Product | None = None,
) -> MutationResult:
    category_changed = (
        current is not None
        and mutation.category_id is not None
        and mutation.category_id != current.category_id
    )
    current_variants = current.variants if current is not None else None
    current_images = current.images if current is not None else None

    if current is None or mutation.variants is not None or category_changed:
        report = validate_variants(
            category,
            mutation.variants,
            current_variants,
            reset_attributes=category_changed,
        )
        if not report.valid:
            return MutationResult(error=report.error)

    images_ops = mutation.images_ops
    referenced: list[int] = []
    auto_assign = False
    if images_ops is not None:
        report = validate_images(mutation.images, images_ops, current_images)
        if not report.valid:
            return MutationResult(error=report.error)
        resolution = assign_thumbnail(images_ops, current_images)
        images_ops = resolution.images_ops
        referenced = resolution.referenced_indices
        auto_assign = resolution.auto_assign_thumbnail

    decision = _decide_status(mutation, category, current, category_changed)
    return MutationResult(
        resolved=ResolvedMutation(
            category=category,
            final_status=decision.final_status,
            variants=mutation.variants,
            images_ops=images_ops,
            warnings=list(decision.warnings),
            referenced_indices=referenced,
            auto_assign_thumbnail=auto_assign,
            category_changed=category_changed,
        )
    )


def _decide_status(
    mutation: ProductMutation,
    category: Category,
    current: Product | None,
    category_changed: bool,
) -> PublishDecision:
    current_status = current.status if current is not None else "DRAFT"
    current_variants = current.variants if current is not None else None

    if category_changed:
        forced = status_after_category_change(
            requested_status=mutation.status,
            current_status=current_status,
            resulting=resulting_variants(current_variants, mutation.variants, reset_attributes=True),
            new_category_has_attributes=category.has_attributes,
        )
        if forced is not None:
            return forced

    return determine_publish_status(
        requested_status=mutation.status,
        current_status=current_status,
        current_variants=current_variants,
        variants=mutation.variants,
        category_has_attributes=category.has_attributes,
        reset_attributes=category_changed,
    )


class MutationOrchestrator:

    def __init__(
        self,
        *,
        categories: CategoryRepository,
        products: ProductRepository,
        blobs: BlobStore,
        config: CoreConfig | None = None,
    ) -> None:
        self.categories = categories
        self.products = products
        self.blobs = blobs
        self.config = config or CoreConfig()

    def get_product(self, product_id: str) -> Product:
        product = self.products.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        return product

    def get_category(self, category_id: str) -> Category:
        category = self.categories.get_by_id(category_id)
        if category is None:
            raise NotFoundError(f"Category {category_id} not found")
        return category

    def resolve(self, mutation: ProductMutation) -> MutationResult:
        """Load the state a mutation needs and run ``validate_and_resolve`` on it."""
        current = self.get_product(mutation.product_id) if mutation.product_id else None
        category_id = mutation.category_id or (current.category_id if current else None)
        if category_id is None:
            raise RequestShapeError(
                AggregatedError(code="REQUEST_SHAPE_INVALID", message="categoryId is required", field="categoryId")
            )
        return validate_and_resolve(mutation, category=self.get_category(category_id), current=current)

    def create(self, mutation: ProductMutation) -> MutationOutcome:
        _raise_for_shape(
            validate_create_request(
                name=mutation.name or "",
                description=mutation.description,
                status=mutation.status,
                variants=mutation.variants,
                images_ops=mutation.images_ops,
                max_images=self.config.max_images_per_product,
            )
        )
        category = self.get_category(str(mutation.category_id))
        resolved = _unwrap(validate_and_resolve(mutation, category=category))
        self._reject_warnings_when_strict(resolved)

        name = str(mutation.name)
        uploads = self._upload(mutation.images, resolved.referenced_indices)
        tx = MutationTransaction(
            product_id=None,
            name=name,
            slug=slugify_name(name),
            description=mutation.description,
            status=resolved.final_status,
            category_id=category.id,
            variants=resolved.variants or VariantOps(),
            default_currency=self.config.default_currency,
            image_creates=_new_images(resolved.images_ops, uploads, name),
        )
        product = self._persist(tx, uploads)
        logger.debug("Created product %s (status=%s)", product.id, product.status)
        return MutationOutcome(product=product, warnings=resolved.warnings)

    def patch(self, mutation: ProductMutation) -> MutationOutcome:
        current = self.get_product(str(mutation.product_id))
        guard = ConcurrencyGuard(declared=mutation.version, loaded=current.version)
        guard.check()
        _ensure_references(mutation, current)

        if not has_changes(
            current,
            name=mutation.name,
            description=mutation.description,
            status=mutation.status,
            category_id=mutation.category_id,
            variants=mutation.variants,
            images_ops=mutation.images_ops,
        ):
            logger.debug("Patch of product %s is a no-op; nothing persisted", current.id)
            return MutationOutcome(product=current, changed=False)

        _raise_for_shape(
            validate_patch_request(
                name=mutation.name,
                status=mutation.status,
                variants=mutation.variants,
                images_ops=mutation.images_ops,
                current_images=current.images,
                max_images=self.config.max_images_per_product,
            )
        )

        category = self.get_category(mutation.category_id or current.category_id)
        resolved = _unwrap(validate_and_resolve(mutation, category=category, current=current))
        self._reject_warnings_when_strict(resolved)

        name = mutation.name or current.name
        uploads = self._upload(mutation.images, resolved.referenced_indices)
        images_ops = resolved.images_ops or ImageOps()
        tx = MutationTransaction(
            product_id=current.id,
            name=name,
            slug=slugify_name(name),
            description=current.description if mutation.description is None else mutation.description,
            status=resolved.final_status,
            category_id=category.id,
            expected_version=guard.expected,
            variants=resolved.variants or VariantOps(),
            reset_attributes=resolved.category_changed,
            default_currency=self.config.default_currency,
            image_creates=_new_images(images_ops, uploads, name),
            image_updates=tuple(
                ImageChange(
                    id=op.id,
                    blob=uploads.get(op.file_index) if op.file_index is not None else None,
                    alt_text=op.alt_text,
                    is_thumbnail=op.is_thumbnail,
                )
                for op in images_ops.update
            ),
            image_deletes=tuple(images_ops.delete),
        )
        product = self._persist(tx, uploads)

        replaced = {op.id for op in images_ops.update if op.file_index is not None}
        stale_keys = [
            image.key
            for image in current.images
            if image.id in set(images_ops.delete) or image.id in replaced
        ]
        self._delete_blobs(stale_keys)
        logger.debug(
            "Patched product %s to version %d (status=%s)",
            product.id,
            product.version,
            product.status,
        )
        return MutationOutcome(product=product, warnings=resolved.warnings)

    def check_publishable(self, product_id: str) -> list[ValidationIssue]:
        """PUB1/PUB2 violations of the stored product, empty when publishable."""
        product = self.get_product(product_id)
        category = self.get_category(product.category_id)
        return publish_violations(product.variants, category_has_attributes=category.has_attributes)

    def _reject_warnings_when_strict(self, resolved: ResolvedMutation) -> None:
        """In strict mode a PUBLISHED request that would be downgraded fails instead."""
        if not self.config.strict or not resolved.warnings:
            return
        raise ProductValidationError(
            AggregatedError(
                code=STATUS_REQUIREMENTS_NOT_MET,
                message=f"Requested status cannot be applied ({len(resolved.warnings)} issue(s))",
                field="status",
                sub_errors=tuple(resolved.warnings),
            )
        )

    def _upload(self, images: Sequence[UploadedFile], indices: list[int]) -> dict[int, StoredBlob]:
        uploads: dict[int, StoredBlob] = {}
        for index in sorted(set(indices)):
            try:
                uploads[index] = self.blobs.upload(images[index])
            except Exception as exc:
                self._delete_blobs([blob.key for blob in uploads.values()])
                raise UploadError(f"Upload of file {index} failed: {exc}") from exc
        return uploads

    def _persist(self, tx: MutationTransaction, uploads: dict[int, StoredBlob]) -> Product:
        try:
            return self.products.persist(tx)
        except ProductMutationError:
            self._delete_blobs([blob.key for blob in uploads.values()])
            raise
        except Exception as exc:
            self._delete_blobs([blob.key for blob in uploads.values()])
            raise MutationPersistenceError(f"Product could not be saved: {exc}") from exc

    def _delete_blobs(self, keys: list[str]) -> None:
        for key in keys:
            try:
                self.blobs.delete(key)
            except Exception:
                logger.warning("Could not delete blob %s", key, exc_info=True)


def _unwrap(result: MutationResult) -> ResolvedMutation:
    if result.resolved is not None and result.error is None:
        return result.resolved
    error = result.error or AggregatedError(
        code="MUTATION_UNRESOLVED",
        message="Mutation could not be resolved",
    )
    raise ProductValidationError(error)


def _raise_for_shape(report: ValidationReport) -> None:
    if report.error is not None:
        raise RequestShapeError(report.error)


def _ensure_references(mutation: ProductMutation, current: Product) -> None:
    variant_ids = {variant.id for variant in current.variants}
    image_ids = {image.id for image in current.images}

    if mutation.variants is not None:
        referenced = [op.id for op in mutation.variants.update] + mutation.variants.delete
        missing = [variant_id for variant_id in referenced if variant_id not in variant_ids]
        if missing:
            raise NotFoundError(f"Variant(s) not found on product: {', '.join(missing)}")

    if mutation.images_ops is not None:
        referenced = [op.id for op in mutation.images_ops.update] + mutation.images_ops.delete
        missing = [image_id for image_id in referenced if image_id not in image_ids]
        if missing:
            raise NotFoundError(f"Image(s) not found on product: {', '.join(missing)}")


def _new_images(
    images_ops: ImageOps | None,
    uploads: dict[int, StoredBlob],
    product_name: str,
) -> tuple[NewImage, ...]:
    if images_ops is None:
        return ()
    return tuple(
        NewImage(
            blob=uploads[op.file_index],
            alt_text=op.alt_text or f"{product_name} image",
            is_thumbnail=bool(op.is_thumbnail),
        )
        for op in images_ops.create
    )


__all__ = [
    "MutationOrchestrator",
    "MutationOutcome",
    "MutationResult",
    "ProductMutation",
    "ResolvedMutation",
    "STATUS_REQUIREMENTS_NOT_MET",
    "mutation_from_payload",
    "validate_and_resolve",
]
