"""Request-scoped operation batches for variants and images.

A batch is an ordered tuple of commands. ``create``/``update``/``delete`` are
views over that tuple, and the resulting entity set is one fold over it.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Union

from .entities import Image, Variant


@dataclass(frozen=True)
class VariantCreate:
    price: int
    attribute_value_ids: tuple[str, ...] = ()
    sku: str | None = None
    stock: int | None = None
    currency: str | None = None


@dataclass(frozen=True)
class VariantUpdate:
    id: str
    price: int | None = None
    sku: str | None = None
    stock: int | None = None
    currency: str | None = None
    attribute_value_ids: tuple[str, ...] | None = None


@dataclass(frozen=True)
class VariantDelete:
    id: str


@dataclass(frozen=True)
class ImageCreate:
    file_index: int
    alt_text: str | None = None
    is_thumbnail: bool | None = None


@dataclass(frozen=True)
class ImageUpdate:
    id: str
    file_index: int | None = None
    alt_text: str | None = None
    is_thumbnail: bool | None = None


@dataclass(frozen=True)
class ImageDelete:
    id: str


VariantCommand = Union[VariantCreate, VariantUpdate, VariantDelete]
ImageCommand = Union[ImageCreate, ImageUpdate, ImageDelete]


def _label(command: object) -> str:
    if isinstance(command, (VariantCreate, ImageCreate)):
        return "create"
    if isinstance(command, (VariantUpdate, ImageUpdate)):
        return "update"
    return "delete"


class _OpsBatch:
    commands: tuple[Any, ...]

    def labelled(self) -> Iterator[tuple[str, int, Any]]:
        """Yield ``(kind, position_within_kind, command)`` in batch order."""
        counters = {"create": 0, "update": 0, "delete": 0}
        for command in self.commands:
            kind = _label(command)
            yield kind, counters[kind], command
            counters[kind] += 1

    def _of_kind(self, kind: str) -> list[Any]:
        return [command for command in self.commands if _label(command) == kind]

    @property
    def is_empty(self) -> bool:
        return not self.commands

    def __bool__(self) -> bool:
        return not self.is_empty


@dataclass(frozen=True)
class VariantOps(_OpsBatch):
    commands: tuple[VariantCommand, ...] = ()

    @classmethod
    def build(
        cls,
        *,
        create: list[VariantCreate] | None = None,
        update: list[VariantUpdate] | None = None,
        delete: list[str] | None = None,
    ) -> VariantOps:
        commands: list[VariantCommand] = [VariantDelete(id=str(item)) for item in delete or []]
        commands.extend(update or [])
        commands.extend(create or [])
        return cls(commands=tuple(commands))

    @property
    def create(self) -> list[VariantCreate]:
        return self._of_kind("create")

    @property
    def update(self) -> list[VariantUpdate]:
        return self._of_kind("update")

    @property
    def delete(self) -> list[str]:
        return [command.id for command in self._of_kind("delete")]


@dataclass(frozen=True)
class ImageOps(_OpsBatch):
    commands: tuple[ImageCommand, ...] = ()

    @classmethod
    def build(
        cls,
        *,
        create: list[ImageCreate] | None = None,
        update: list[ImageUpdate] | None = None,
        delete: list[str] | None = None,
    ) -> ImageOps:
        commands: list[ImageCommand] = [ImageDelete(id=str(item)) for item in delete or []]
        commands.extend(update or [])
        commands.extend(create or [])
        return cls(commands=tuple(commands))

    @property
    def create(self) -> list[ImageCreate]:
        return self._of_kind("create")

    @property
    def update(self) -> list[ImageUpdate]:
        return self._of_kind("update")

    @property
    def delete(self) -> list[str]:
        return [command.id for command in self._of_kind("delete")]

    def referenced_indices(self) -> list[int]:
        indices: list[int] = [command.file_index for command in self.create]
        indices.extend(
            command.file_index
            for command in self.update
            if command.file_index is not None
        )
        return indices


@dataclass(frozen=True)
class ResultingVariant:
    """A variant as it would exist once the batch is applied."""

    source: str
    price: int
    attribute_value_ids: tuple[str, ...]
    id: str | None = None

    @property
    def combination(self) -> tuple[str, ...]:
        return tuple(sorted(self.attribute_value_ids))


@dataclass(frozen=True)
class ResultingImage:
    source: str
    is_thumbnail: bool
    id: str | None = None


def resulting_variants(
    current: list[Variant] | None,
    ops: VariantOps | None,
    *,
    reset_attributes: bool = False,
) -> list[ResultingVariant]:
    """Fold ``ops`` over ``current``: current - deleted + updated + created.

    With ``reset_attributes`` the current attribute values are dropped (they
    belong to a category the product is leaving); updates may assign new ones.
    """
    existing: dict[str, ResultingVariant] = {}
    for variant in current or []:
        existing[variant.id] = ResultingVariant(
            source=variant.id,
            id=variant.id,
            price=variant.price,
            attribute_value_ids=() if reset_attributes else tuple(variant.attribute_value_ids),
        )

    created: list[ResultingVariant] = []
    for kind, position, command in (ops or VariantOps()).labelled():
        if isinstance(command, VariantDelete):
            existing.pop(command.id, None)
        elif isinstance(command, VariantUpdate):
            target = existing.get(command.id)
            if target is None:
                continue
            existing[command.id] = ResultingVariant(
                source=f"{kind}[{position}]",
                id=command.id,
                price=target.price if command.price is None else command.price,
                attribute_value_ids=(
                    target.attribute_value_ids
                    if command.attribute_value_ids is None
                    else tuple(command.attribute_value_ids)
                ),
            )
        else:
            created.append(
                ResultingVariant(
                    source=f"{kind}[{position}]",
                    price=command.price,
                    attribute_value_ids=tuple(command.attribute_value_ids),
                )
            )

    return [*existing.values(), *created]


def resulting_images(current: list[Image] | None, ops: ImageOps | None) -> list[ResultingImage]:
    existing: dict[str, ResultingImage] = {
        image.id: ResultingImage(source=image.id, id=image.id, is_thumbnail=image.is_thumbnail)
        for image in current or []
    }

    created: list[ResultingImage] = []
    for kind, position, command in (ops or ImageOps()).labelled():
        if isinstance(command, ImageDelete):
            existing.pop(command.id, None)
        elif isinstance(command, ImageUpdate):
            target = existing.get(command.id)
            if target is None:
                continue
            existing[command.id] = ResultingImage(
                source=f"{kind}[{position}]",
                id=command.id,
                is_thumbnail=target.is_thumbnail if command.is_thumbnail is None else command.is_thumbnail,
            )
        else:
            created.append(
                ResultingImage(
                    source=f"{kind}[{position}]",
                    is_thumbnail=bool(command.is_thumbnail),
                )
            )

    return [*existing.values(), *created]


def variant_ops_from_payload(payload: dict[str, Any] | None) -> VariantOps | None:
    if payload is None:
        return None
    if not isinstance(payload, dict):
        raise ValueError("variants must be an object with create/update/delete lists.")

    create = [
        VariantCreate(
            price=_int_field(item, "price", required=True),
            attribute_value_ids=tuple(_id_list(_pick(item, "attributeValueIds", "attribute_value_ids", []))),
            sku=item.get("sku"),
            stock=_int_field(item, "stock"),
            currency=item.get("currency"),
        )
        for item in _object_list(payload.get("create"), "variants.create")
    ]
    update = []
    for item in _object_list(payload.get("update"), "variants.update"):
        raw_ids = _pick(item, "attributeValueIds", "attribute_value_ids", None)
        update.append(
            VariantUpdate(
                id=_required_id(item, "variants.update"),
                price=_int_field(item, "price"),
                sku=item.get("sku"),
                stock=_int_field(item, "stock"),
                currency=item.get("currency"),
                attribute_value_ids=None if raw_ids is None else tuple(_id_list(raw_ids)),
            )
        )
    return VariantOps.build(create=create, update=update, delete=_id_list(payload.get("delete")))


def image_ops_from_payload(payload: dict[str, Any] | None) -> ImageOps | None:
    if payload is None:
        return None
    if not isinstance(payload, dict):
        raise ValueError("imagesOps must be an object with create/update/delete lists.")

    create = [
        ImageCreate(
            file_index=_int_field(item, "fileIndex", snake="file_index", required=True),
            alt_text=_pick(item, "altText", "alt_text"),
            is_thumbnail=_optional_bool(_pick(item, "isThumbnail", "is_thumbnail")),
        )
        for item in _object_list(payload.get("create"), "imagesOps.create")
    ]
    update = [
        ImageUpdate(
            id=_required_id(item, "imagesOps.update"),
            file_index=_int_field(item, "fileIndex", snake="file_index"),
            alt_text=_pick(item, "altText", "alt_text"),
            is_thumbnail=_optional_bool(_pick(item, "isThumbnail", "is_thumbnail")),
        )
        for item in _object_list(payload.get("update"), "imagesOps.update")
    ]
    return ImageOps.build(create=create, update=update, delete=_id_list(payload.get("delete")))


def _pick(payload: dict[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    if camel in payload:
        return payload[camel]
    return payload.get(snake, default)


def _object_list(value: Any, label: str) -> list[dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise ValueError(f"{label} must be a list of objects.")
    return value


def _id_list(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ValueError("Expected a list of ids.")
    return [str(item) for item in value]


def _required_id(item: dict[str, Any], label: str) -> str:
    value = item.get("id")
    if value is None or not str(value).strip():
        raise ValueError(f"{label} entries require an id.")
    return str(value)


def _int_field(item: dict[str, Any], key: str, *, snake: str | None = None, required: bool = False) -> Any:
    value = _pick(item, key, snake or key)
    if value is None:
        if required:
            raise ValueError(f"{key} is required.")
        return None
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer.")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be an integer.") from exc


def _optional_bool(value: Any) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    raise ValueError("isThumbnail must be a boolean.")


__all__ = [
    "ImageCommand",
    "ImageCreate",
    "ImageDelete",
    "ImageOps",
    "ImageUpdate",
    "ResultingImage",
    "ResultingVariant",
    "VariantCommand",
    "VariantCreate",
    "VariantDelete",
    "VariantOps",
    "VariantUpdate",
    "image_ops_from_payload",
    "resulting_images",
    "resulting_variants",
    "variant_ops_from_payload",
]
