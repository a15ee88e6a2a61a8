"""Collaborator ports consumed by the mutation orchestrator.

Concrete implementations (in-memory, filesystem, SQL) live outside the
validators so those stay pure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from .canonical.entities import Category, Product, StoredBlob, UploadedFile
from .canonical.operations import VariantOps


class CategoryRepository(ABC):

    @abstractmethod
    def get_by_id(self, category_id: str) -> Category | None:
        """Return a category with its attributes and values, or None."""


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product with its variants and images, or None."""

    @abstractmethod
    def persist(self, tx: MutationTransaction) -> Product:
        """Apply ``tx`` atomically and return the stored product.

        Must raise ``ConflictError`` when ``tx.expected_version`` no longer
        matches the stored version, and leave the stored state untouched.
        """


class BlobStore(ABC):

    @abstractmethod
    def upload(self, file: UploadedFile) -> StoredBlob:
        """Store one file and return its key and public URL."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a stored blob. Unknown keys are ignored."""


@dataclass(frozen=True)
class NewImage:
    blob: StoredBlob
    alt_text: str
    is_thumbnail: bool


@dataclass(frozen=True)
class ImageChange:
    id: str
    blob: StoredBlob | None = None
    alt_text: str | None = None
    is_thumbnail: bool | None = None


@dataclass(frozen=True)
class MutationTransaction:
    """Everything one create/patch writes, applied as a single unit."""

    product_id: str | None
    name: str
    slug: str
    description: str | None
    status: str
    category_id: str
    expected_version: int | None = None
    variants: VariantOps = field(default_factory=VariantOps)
    reset_attributes: bool = False
    default_currency: str = "EUR"
    image_creates: tuple[NewImage, ...] = ()
    image_updates: tuple[ImageChange, ...] = ()
    image_deletes: tuple[str, ...] = ()

    @property
    def is_create(self) -> bool:
        return self.product_id is None


__all__ = [
    "BlobStore",
    "CategoryRepository",
    "ImageChange",
    "MutationTransaction",
    "NewImage",
    "ProductRepository",
]
