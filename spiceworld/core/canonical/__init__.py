from .entities import (
    DEFAULT_CURRENCY,
    PRODUCT_STATUSES,
    Attribute,
    AttributeValue,
    Category,
    Image,
    Product,
    ProductStatus,
    StoredBlob,
    UploadedFile,
    Variant,
    category_from_payload,
    product_from_payload,
    slugify_name,
)
from .operations import (
    ImageCreate,
    ImageDelete,
    ImageOps,
    ImageUpdate,
    ResultingImage,
    ResultingVariant,
    VariantCreate,
    VariantDelete,
    VariantOps,
    VariantUpdate,
    image_ops_from_payload,
    resulting_images,
    resulting_variants,
    variant_ops_from_payload,
)

__all__ = [
    "DEFAULT_CURRENCY",
    "PRODUCT_STATUSES",
    "Attribute",
    "AttributeValue",
    "Category",
    "Image",
    "ImageCreate",
    "ImageDelete",
    "ImageOps",
    "ImageUpdate",
    "Product",
    "ProductStatus",
    "ResultingImage",
    "ResultingVariant",
    "StoredBlob",
    "UploadedFile",
    "Variant",
    "VariantCreate",
    "VariantDelete",
    "VariantOps",
    "VariantUpdate",
    "category_from_payload",
    "image_ops_from_payload",
    "product_from_payload",
    "resulting_images",
    "resulting_variants",
    "slugify_name",
    "variant_ops_from_payload",
]
