from dataclasses import dataclass, field
from typing import Any, Literal

from slugify import slugify

ProductStatus = Literal["DRAFT", "PUBLISHED", "ARCHIVED"]
PRODUCT_STATUSES: tuple[str, ...] = ("DRAFT", "PUBLISHED", "ARCHIVED")
DEFAULT_CURRENCY = "EUR"


@dataclass(frozen=True)
class AttributeValue:
    id: str
    value: str


@dataclass
class Attribute:
    id: str
    name: str
    values: list[AttributeValue] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.values = _normalize_attribute_values(self.values)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "values": [{"id": value.id, "value": value.value} for value in self.values],
        }


@dataclass
class Category:
    id: str
    name: str
    attributes: list[Attribute] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.attributes = _normalize_attributes(self.attributes)

    @property
    def has_attributes(self) -> bool:
        return bool(self.attributes)

    def value_to_attribute(self) -> dict[str, str]:
        """Map every attribute value id of the category to its attribute id."""
        return {
            value.id: attribute.id
            for attribute in self.attributes
            for value in attribute.values
        }

    def max_combinations(self) -> int:
        total = 1
        for attribute in self.attributes:
            total *= len(attribute.values) or 1
        return total

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "attributes": [attribute.to_dict() for attribute in self.attributes],
        }


@dataclass
class Variant:
    id: str
    price: int = 0
    sku: str | None = None
    stock: int = 0
    currency: str = DEFAULT_CURRENCY
    attribute_value_ids: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.sku = _clean_text(self.sku)
        self.currency = (_clean_text(self.currency) or DEFAULT_CURRENCY).upper()
        self.attribute_value_ids = [str(value_id) for value_id in self.attribute_value_ids or []]

    @property
    def combination(self) -> tuple[str, ...]:
        return tuple(sorted(self.attribute_value_ids))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "price": self.price,
            "sku": self.sku,
            "stock": self.stock,
            "currency": self.currency,
            "attributeValueIds": list(self.attribute_value_ids),
        }


@dataclass
class Image:
    id: str
    key: str
    url: str
    alt_text: str | None = None
    is_thumbnail: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "key": self.key,
            "url": self.url,
            "altText": self.alt_text,
            "isThumbnail": self.is_thumbnail,
        }


@dataclass
class Product:
    id: str
    name: str
    category_id: str
    description: str | None = None
    slug: str | None = None
    status: ProductStatus = "DRAFT"
    version: int = 0
    variants: list[Variant] = field(default_factory=list)
    images: list[Image] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.status not in PRODUCT_STATUSES:
            raise ValueError(f"status must be one of: {', '.join(PRODUCT_STATUSES)}")
        if not self.slug:
            self.slug = slugify_name(self.name)

    @property
    def thumbnail(self) -> Image | None:
        return next((image for image in self.images if image.is_thumbnail), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "status": self.status,
            "categoryId": self.category_id,
            "version": self.version,
            "variants": [variant.to_dict() for variant in self.variants],
            "images": [image.to_dict() for image in self.images],
        }


@dataclass(frozen=True)
class UploadedFile:
    """One file of the per-request upload batch, addressed by its position."""

    filename: str
    content: bytes = b""
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class StoredBlob:
    key: str
    url: str


def slugify_name(name: str) -> str:
    return slugify(str(name or ""))


def category_from_payload(payload: dict[str, Any]) -> Category:
    if not isinstance(payload, dict):
        raise ValueError("Category payload must be an object.")
    category_id = _clean_text(payload.get("id"))
    if not category_id:
        raise ValueError("Category id is required.")
    return Category(
        id=category_id,
        name=str(payload.get("name") or ""),
        attributes=list(payload.get("attributes") or []),
    )


def product_from_payload(payload: dict[str, Any]) -> Product:
    if not isinstance(payload, dict):
        raise ValueError("Product payload must be an object.")
    return Product(
        id=str(payload["id"]),
        name=str(payload.get("name") or ""),
        slug=_clean_text(payload.get("slug")),
        description=payload.get("description"),
        status=str(payload.get("status") or "DRAFT"),  # type: ignore[arg-type]
        category_id=str(payload.get("categoryId") or payload.get("category_id") or ""),
        version=int(payload.get("version") or 0),
        variants=[_variant_from_payload(item) for item in payload.get("variants") or []],
        images=[_image_from_payload(item) for item in payload.get("images") or []],
    )


def _clean_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _pick(payload: dict[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    if camel in payload:
        return payload[camel]
    return payload.get(snake, default)


def _variant_from_payload(payload: dict[str, Any]) -> Variant:
    return Variant(
        id=str(payload["id"]),
        price=int(payload.get("price") or 0),
        sku=payload.get("sku"),
        stock=int(payload.get("stock") or 0),
        currency=str(payload.get("currency") or DEFAULT_CURRENCY),
        attribute_value_ids=list(_pick(payload, "attributeValueIds", "attribute_value_ids", []) or []),
    )


def _image_from_payload(payload: dict[str, Any]) -> Image:
    return Image(
        id=str(payload["id"]),
        key=str(payload.get("key") or payload["id"]),
        url=str(payload.get("url") or ""),
        alt_text=_pick(payload, "altText", "alt_text"),
        is_thumbnail=bool(_pick(payload, "isThumbnail", "is_thumbnail", False)),
    )


def _normalize_attribute_values(
    values: list[AttributeValue] | list[dict[str, Any]] | None,
) -> list[AttributeValue]:
    out: list[AttributeValue] = []
    seen: set[str] = set()
    for item in values or []:
        if isinstance(item, AttributeValue):
            value = item
        elif isinstance(item, dict):
            value_id = _clean_text(item.get("id"))
            if not value_id:
                continue
            value = AttributeValue(id=value_id, value=str(item.get("value") or ""))
        else:
            continue
        if value.id in seen:
            raise ValueError(f"Duplicate attribute value id: {value.id}")
        seen.add(value.id)
        out.append(value)

    texts = [value.value for value in out]
    if len(set(texts)) != len(texts):
        raise ValueError("Attribute values must be unique within an attribute.")
    return out


def _normalize_attributes(values: list[Attribute] | list[dict[str, Any]] | None) -> list[Attribute]:
    out: list[Attribute] = []
    for item in values or []:
        if isinstance(item, Attribute):
            out.append(item)
        elif isinstance(item, dict):
            attribute_id = _clean_text(item.get("id"))
            if not attribute_id:
                continue
            out.append(
                Attribute(
                    id=attribute_id,
                    name=str(item.get("name") or ""),
                    values=list(item.get("values") or []),
                )
            )

    names = [attribute.name for attribute in out]
    if len(set(names)) != len(names):
        raise ValueError("Attribute names must be unique within a category.")
    return out


__all__ = [
    "DEFAULT_CURRENCY",
    "PRODUCT_STATUSES",
    "Attribute",
    "AttributeValue",
    "Category",
    "Image",
    "Product",
    "ProductStatus",
    "StoredBlob",
    "UploadedFile",
    "Variant",
    "category_from_payload",
    "product_from_payload",
    "slugify_name",
]
