import pytest

from spiceworld.core.canonical.operations import (
    ImageCreate,
    ImageDelete,
    ImageOps,
    ImageUpdate,
    VariantCreate,
    VariantDelete,
    VariantOps,
    VariantUpdate,
    image_ops_from_payload,
    resulting_images,
    resulting_variants,
    variant_ops_from_payload,
)
from tests.helpers._catalog_builders import WEIGHT_50, WEIGHT_100, make_image, make_variant


def test_build_orders_deletes_then_updates_then_creates() -> None:
    ops = VariantOps.build(
        create=[VariantCreate(price=1)],
        update=[VariantUpdate(id="v1", price=2)],
        delete=["v2"],
    )

    assert [type(command) for command in ops.commands] == [VariantDelete, VariantUpdate, VariantCreate]
    assert ops.delete == ["v2"]
    assert [label[:2] for label in ops.labelled()] == [("delete", 0), ("update", 0), ("create", 0)]


def test_empty_batch_is_falsy() -> None:
    assert not VariantOps()
    assert ImageOps.build(delete=["a"])


def test_variant_payload_accepts_camel_and_snake_case() -> None:
    ops = variant_ops_from_payload(
        {
            "create": [
                {"price": 450, "attributeValueIds": [WEIGHT_50], "sku": "PAP-50"},
                {"price": 900, "attribute_value_ids": [WEIGHT_100], "stock": 3},
            ],
            "update": [{"id": "v1", "price": 1000}],
            "delete": ["v9"],
        }
    )

    assert ops is not None
    assert ops.create[0].attribute_value_ids == (WEIGHT_50,)
    assert ops.create[1].attribute_value_ids == (WEIGHT_100,)
    assert ops.create[1].stock == 3
    assert ops.update[0].attribute_value_ids is None
    assert ops.delete == ["v9"]


def test_absent_payload_means_no_batch() -> None:
    assert variant_ops_from_payload(None) is None
    assert image_ops_from_payload(None) is None


@pytest.mark.parametrize(
    "payload",
    [
        {"create": [{"sku": "no-price"}]},
        {"create": [{"price": "cheap"}]},
        {"update": [{"price": 1}]},
        {"delete": "v1"},
        ["not", "an", "object"],
    ],
)
def test_malformed_variant_payload_raises(payload) -> None:
    with pytest.raises(ValueError):
        variant_ops_from_payload(payload)


def test_image_payload_parses_thumbnail_flags() -> None:
    ops = image_ops_from_payload(
        {
            "create": [{"fileIndex": 1, "altText": "jar", "isThumbnail": True}],
            "update": [{"id": "a", "file_index": 0}],
            "delete": ["b"],
        }
    )

    assert ops is not None
    assert ops.create == [ImageCreate(file_index=1, alt_text="jar", is_thumbnail=True)]
    assert ops.update == [ImageUpdate(id="a", file_index=0)]
    assert isinstance(ops.commands[0], ImageDelete)
    assert ops.referenced_indices() == [1, 0]


def test_image_payload_rejects_non_boolean_thumbnail() -> None:
    with pytest.raises(ValueError, match="isThumbnail"):
        image_ops_from_payload({"create": [{"fileIndex": 0, "isThumbnail": "yes"}]})


def test_resulting_variants_folds_commands_over_current_state() -> None:
    current = [make_variant("v1", WEIGHT_50, price=100), make_variant("v2", WEIGHT_100, price=200)]
    ops = VariantOps.build(
        delete=["v2"],
        update=[VariantUpdate(id="v1", price=150)],
        create=[VariantCreate(price=300, attribute_value_ids=(WEIGHT_100,))],
    )

    resulting = resulting_variants(current, ops)

    assert [(variant.source, variant.price) for variant in resulting] == [("update[0]", 150), ("create[0]", 300)]
    assert resulting[0].attribute_value_ids == (WEIGHT_50,)


def test_resulting_variants_reset_drops_unassigned_values() -> None:
    current = [make_variant("v1", WEIGHT_50), make_variant("v2", WEIGHT_100)]
    ops = VariantOps.build(update=[VariantUpdate(id="v2", attribute_value_ids=("g-whole",))])

    resulting = resulting_variants(current, ops, reset_attributes=True)

    assert [variant.attribute_value_ids for variant in resulting] == [(), ("g-whole",)]


def test_resulting_images_applies_thumbnail_updates() -> None:
    current = [make_image("a", thumbnail=True), make_image("b")]
    ops = ImageOps.build(
        update=[ImageUpdate(id="a", is_thumbnail=False)],
        create=[ImageCreate(file_index=0, is_thumbnail=True)],
    )

    resulting = resulting_images(current, ops)

    assert [(image.source, image.is_thumbnail) for image in resulting] == [
        ("update[0]", False),
        ("b", False),
        ("create[0]", True),
    ]
