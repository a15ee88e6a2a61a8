from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class VariantCreateIn(_WireModel):
    price: int
    attribute_value_ids: list[str] = Field(default_factory=list, alias="attributeValueIds")
    sku: str | None = None
    stock: int | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)


class VariantUpdateIn(_WireModel):
    id: str
    price: int | None = None
    attribute_value_ids: list[str] | None = Field(default=None, alias="attributeValueIds")
    sku: str | None = None
    stock: int | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)


class VariantOpsIn(_WireModel):
    create: list[VariantCreateIn] = Field(default_factory=list)
    update: list[VariantUpdateIn] = Field(default_factory=list)
    delete: list[str] = Field(default_factory=list)


class ImageCreateIn(_WireModel):
    file_index: int = Field(..., alias="fileIndex")
    alt_text: str | None = Field(default=None, alias="altText")
    is_thumbnail: bool | None = Field(default=None, alias="isThumbnail")


class ImageUpdateIn(_WireModel):
    id: str
    file_index: int | None = Field(default=None, alias="fileIndex")
    alt_text: str | None = Field(default=None, alias="altText")
    is_thumbnail: bool | None = Field(default=None, alias="isThumbnail")


class ImageOpsIn(_WireModel):
    create: list[ImageCreateIn] = Field(default_factory=list)
    update: list[ImageUpdateIn] = Field(default_factory=list)
    delete: list[str] = Field(default_factory=list)


class ProductMutationIn(_WireModel):
    """JSON carried in the ``payload`` form field of create/patch requests."""

    name: str | None = None
    description: str | None = None
    status: Literal["DRAFT", "PUBLISHED", "ARCHIVED"] | None = None
    category_id: str | None = Field(default=None, alias="categoryId")
    variants: VariantOpsIn | None = None
    images_ops: ImageOpsIn | None = Field(default=None, alias="imagesOps")
    version: int | None = Field(
        default=None,
        alias="_version",
        description="Version the client last read; a mismatch is rejected with 409.",
    )
