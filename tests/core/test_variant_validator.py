from spiceworld.core.canonical.operations import VariantCreate, VariantOps, VariantUpdate
from spiceworld.core.validate.variants import VARIANTS_VALIDATION_FAILED, validate_variants
from tests.helpers._catalog_builders import (
    ORIGIN_INDIA,
    ORIGIN_SRI_LANKA,
    WEIGHT_50,
    WEIGHT_100,
    grind_category,
    make_variant,
    plain_category,
    spice_category,
)


def test_distinct_valid_combinations_pass() -> None:
    ops = VariantOps.build(
        create=[
            VariantCreate(price=500, attribute_value_ids=(WEIGHT_50, ORIGIN_INDIA)),
            VariantCreate(price=900, attribute_value_ids=(WEIGHT_100, ORIGIN_INDIA)),
        ]
    )

    report = validate_variants(spice_category(), ops)

    assert report.valid is True
    assert report.error is None


def test_unknown_attribute_value_is_reported_with_operation_position() -> None:
    ops = VariantOps.build(
        create=[
            VariantCreate(price=500, attribute_value_ids=(WEIGHT_50,)),
            VariantCreate(price=500, attribute_value_ids=("w-9000",), sku="PAP-XL"),
        ]
    )

    report = validate_variants(spice_category(), ops)

    assert report.valid is False
    assert report.codes == ["VVA1"]
    issue = report.issues[0]
    assert issue.operation == "create[1]"
    assert issue.message.startswith("create[1]: ")
    assert "PAP-XL" in issue.message
    assert issue.details == {"invalidValue": "w-9000"}


def test_two_values_of_the_same_attribute_collide() -> None:
    ops = VariantOps.build(create=[VariantCreate(price=500, attribute_value_ids=(WEIGHT_50, WEIGHT_100))])

    report = validate_variants(spice_category(), ops)

    assert report.codes == ["VVA2"]
    assert report.issues[0].details["attributeId"] == "attr-weight"
    assert report.issues[0].details["duplicates"] == [WEIGHT_50, WEIGHT_100]


def test_repeating_one_value_is_a_collision() -> None:
    ops = VariantOps.build(create=[VariantCreate(price=500, attribute_value_ids=(ORIGIN_INDIA, ORIGIN_INDIA))])

    report = validate_variants(spice_category(), ops)

    assert "VVA2" in report.codes


def test_more_variants_than_combinations_is_rejected() -> None:
    ops = VariantOps.build(
        create=[
            VariantCreate(price=500, attribute_value_ids=("g-whole",)),
            VariantCreate(price=500, attribute_value_ids=("g-ground",)),
            VariantCreate(price=500),
        ]
    )

    report = validate_variants(grind_category(), ops)

    assert report.valid is False
    assert report.codes == ["VVA3"]
    assert report.issues[0].details == {"current": 3, "maximum": 2}


def test_category_without_attributes_allows_a_single_variant() -> None:
    one = VariantOps.build(create=[VariantCreate(price=2500)])
    two = VariantOps.build(create=[VariantCreate(price=2500), VariantCreate(price=5000)])

    assert validate_variants(plain_category(), one).valid is True
    assert "VVA3" in validate_variants(plain_category(), two).codes


def test_deleting_every_variant_is_rejected() -> None:
    current = [make_variant("v1", WEIGHT_50), make_variant("v2", WEIGHT_100)]
    ops = VariantOps.build(delete=["v1", "v2"])

    report = validate_variants(spice_category(), ops, current)

    assert report.codes == ["VVA3"]
    assert report.issues[0].details["minimum"] == 1


def test_updating_and_deleting_the_same_variant_is_rejected() -> None:
    current = [make_variant("v1", WEIGHT_50), make_variant("v2", WEIGHT_100)]
    ops = VariantOps.build(update=[VariantUpdate(id="v1", price=700)], delete=["v1"])

    report = validate_variants(spice_category(), ops, current)

    assert report.codes == ["VVA5"]
    assert report.issues[0].details == {"overlapping": ["v1"]}


def test_two_empty_combinations_are_duplicates() -> None:
    ops = VariantOps.build(create=[VariantCreate(price=0), VariantCreate(price=0)])

    report = validate_variants(grind_category(), ops)

    assert report.codes == ["VVA4"]
    assert report.issues[0].details["duplicates"] == ["create[0]", "create[1]"]


def test_combinations_compare_as_unordered_sets() -> None:
    ops = VariantOps.build(
        create=[
            VariantCreate(price=500, attribute_value_ids=(WEIGHT_50, ORIGIN_INDIA)),
            VariantCreate(price=500, attribute_value_ids=(ORIGIN_INDIA, WEIGHT_50)),
        ]
    )

    assert validate_variants(spice_category(), ops).codes == ["VVA4"]


def test_update_that_copies_another_combination_is_rejected() -> None:
    current = [make_variant("v1", WEIGHT_50, ORIGIN_INDIA), make_variant("v2", WEIGHT_100, ORIGIN_INDIA)]
    ops = VariantOps.build(update=[VariantUpdate(id="v1", attribute_value_ids=(WEIGHT_100, ORIGIN_INDIA))])

    report = validate_variants(spice_category(), ops, current)

    assert report.codes == ["VVA4"]


def test_deleted_combination_can_be_recreated_in_the_same_batch() -> None:
    current = [make_variant("v1", WEIGHT_50, ORIGIN_INDIA)]
    ops = VariantOps.build(
        delete=["v1"],
        create=[VariantCreate(price=700, attribute_value_ids=(ORIGIN_INDIA, WEIGHT_50))],
    )

    assert validate_variants(spice_category(), ops, current).valid is True


def test_reset_attributes_makes_untouched_variants_collide() -> None:
    current = [make_variant("v1", WEIGHT_50), make_variant("v2", WEIGHT_100)]

    report = validate_variants(grind_category(), None, current, reset_attributes=True)

    assert report.codes == ["VVA4"]


def test_reset_attributes_with_reassignment_passes() -> None:
    current = [make_variant("v1", WEIGHT_50), make_variant("v2", WEIGHT_100)]
    ops = VariantOps.build(
        update=[
            VariantUpdate(id="v1", attribute_value_ids=("g-whole",)),
            VariantUpdate(id="v2", attribute_value_ids=("g-ground",)),
        ]
    )

    assert validate_variants(grind_category(), ops, current, reset_attributes=True).valid is True


def test_every_violation_is_collected_into_one_error() -> None:
    ops = VariantOps.build(
        create=[
            VariantCreate(price=500, attribute_value_ids=("nope",)),
            VariantCreate(price=500, attribute_value_ids=(ORIGIN_INDIA, ORIGIN_SRI_LANKA)),
            VariantCreate(price=500),
            VariantCreate(price=500),
        ]
    )

    report = validate_variants(spice_category(), ops)

    assert sorted(report.codes) == ["VVA1", "VVA2", "VVA4"]
    assert report.error is not None
    assert report.error.code == VARIANTS_VALIDATION_FAILED
    assert report.error.message == "Found 3 validation errors in variants"
    payload = report.error.to_dict()
    assert payload["field"] == "variants"
    assert [item["code"] for item in payload["details"]["subErrors"]] == report.codes
