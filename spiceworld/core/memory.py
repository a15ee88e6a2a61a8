"""In-memory implementations of the orchestrator ports."""

from __future__ import annotations

import copy
import threading
import uuid
from collections.abc import Callable, Iterable

from .canonical.entities import Category, Image, Product, StoredBlob, UploadedFile, Variant
from .canonical.operations import VariantCreate, VariantDelete, VariantUpdate
from .concurrency import compare_and_swap
from .errors import ConflictError, NotFoundError
from .ports import BlobStore, CategoryRepository, MutationTransaction, ProductRepository

NAME_CONFLICT = "NAME_CONFLICT"


def _new_id() -> str:
    return str(uuid.uuid4())


class InMemoryCategoryRepository(CategoryRepository):

    def __init__(self, categories: Iterable[Category] = ()) -> None:
        self._categories = {category.id: category for category in categories}

    def add(self, category: Category) -> None:
        self._categories[category.id] = category

    def get_by_id(self, category_id: str) -> Category | None:
        category = self._categories.get(category_id)
        return copy.deepcopy(category) if category is not None else None


class InMemoryProductRepository(ProductRepository):
    """Dict-backed store; ``persist`` is serialized by a lock."""

    def __init__(
        self,
        products: Iterable[Product] = (),
        *,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._products = {product.id: copy.deepcopy(product) for product in products}
        self._id_factory = id_factory
        self._lock = threading.Lock()
        self.persist_calls = 0

    def add(self, product: Product) -> None:
        self._products[product.id] = copy.deepcopy(product)

    def get_by_id(self, product_id: str) -> Product | None:
        product = self._products.get(product_id)
        return copy.deepcopy(product) if product is not None else None

    def persist(self, tx: MutationTransaction) -> Product:
        with self._lock:
            self.persist_calls += 1
            self._ensure_unique_slug(tx)
            if tx.is_create:
                product = Product(
                    id=self._id_factory(),
                    name=tx.name,
                    slug=tx.slug,
                    description=tx.description,
                    status=tx.status,  # type: ignore[arg-type]
                    category_id=tx.category_id,
                    version=0,
                )
            else:
                stored = self._products.get(str(tx.product_id))
                if stored is None:
                    raise NotFoundError(f"Product {tx.product_id} not found")
                expected = stored.version if tx.expected_version is None else tx.expected_version
                product = copy.deepcopy(stored)
                product.version = compare_and_swap(stored.version, expected)
                product.name = tx.name
                product.slug = tx.slug
                product.description = tx.description
                product.status = tx.status  # type: ignore[assignment]
                product.category_id = tx.category_id

            product.variants = self._apply_variants(product.variants, tx)
            product.images = self._apply_images(product.images, tx)
            self._products[product.id] = product
            return copy.deepcopy(product)

    def _ensure_unique_slug(self, tx: MutationTransaction) -> None:
        for product in self._products.values():
            if product.slug == tx.slug and product.id != tx.product_id:
                raise ConflictError(
                    f'A product named "{tx.name}" already exists.',
                    code=NAME_CONFLICT,
                )

    def _apply_variants(self, variants: list[Variant], tx: MutationTransaction) -> list[Variant]:
        by_id = {variant.id: variant for variant in variants}
        if tx.reset_attributes:
            for variant in by_id.values():
                variant.attribute_value_ids = []

        created: list[Variant] = []
        for command in tx.variants.commands:
            if isinstance(command, VariantDelete):
                by_id.pop(command.id, None)
            elif isinstance(command, VariantUpdate):
                target = by_id.get(command.id)
                if target is None:
                    raise NotFoundError(f"Variant {command.id} not found")
                if command.price is not None:
                    target.price = command.price
                if command.sku is not None:
                    target.sku = command.sku
                if command.stock is not None:
                    target.stock = command.stock
                if command.currency is not None:
                    target.currency = command.currency.upper()
                if command.attribute_value_ids is not None:
                    target.attribute_value_ids = list(command.attribute_value_ids)
            elif isinstance(command, VariantCreate):
                created.append(
                    Variant(
                        id=self._id_factory(),
                        price=command.price,
                        sku=command.sku,
                        stock=command.stock or 0,
                        currency=command.currency or tx.default_currency,
                        attribute_value_ids=list(command.attribute_value_ids),
                    )
                )
        return [*by_id.values(), *created]

    def _apply_images(self, images: list[Image], tx: MutationTransaction) -> list[Image]:
        deleted = set(tx.image_deletes)
        by_id = {image.id: image for image in images if image.id not in deleted}
        for change in tx.image_updates:
            target = by_id.get(change.id)
            if target is None:
                raise NotFoundError(f"Image {change.id} not found")
            if change.blob is not None:
                target.key = change.blob.key
                target.url = change.blob.url
            if change.alt_text is not None:
                target.alt_text = change.alt_text
            if change.is_thumbnail is not None:
                target.is_thumbnail = change.is_thumbnail

        created = [
            Image(
                id=self._id_factory(),
                key=new_image.blob.key,
                url=new_image.blob.url,
                alt_text=new_image.alt_text,
                is_thumbnail=new_image.is_thumbnail,
            )
            for new_image in tx.image_creates
        ]
        return [*by_id.values(), *created]


class InMemoryBlobStore(BlobStore):

    def __init__(self, base_url: str = "memory://blobs") -> None:
        self.base_url = base_url.rstrip("/")
        self.blobs: dict[str, bytes] = {}
        self.deleted: list[str] = []

    def upload(self, file: UploadedFile) -> StoredBlob:
        key = f"{uuid.uuid4().hex}-{file.filename}"
        self.blobs[key] = file.content
        return StoredBlob(key=key, url=f"{self.base_url}/{key}")

    def delete(self, key: str) -> None:
        self.blobs.pop(key, None)
        self.deleted.append(key)


__all__ = [
    "NAME_CONFLICT",
    "InMemoryBlobStore",
    "InMemoryCategoryRepository",
    "InMemoryProductRepository",
]
