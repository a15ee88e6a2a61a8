import pytest

from spiceworld.core.canonical.operations import ImageCreate, ImageOps, ImageUpdate
from spiceworld.core.validate.images import IMAGES_VALIDATION_FAILED, validate_images
from tests.helpers._catalog_builders import make_image, upload_batch


def test_plain_create_batch_is_valid() -> None:
    ops = ImageOps.build(create=[ImageCreate(file_index=0), ImageCreate(file_index=1, is_thumbnail=True)])

    report = validate_images(upload_batch(2), ops)

    assert report.valid is True


def test_duplicate_file_index_in_create() -> None:
    ops = ImageOps.build(create=[ImageCreate(file_index=0), ImageCreate(file_index=0)])

    report = validate_images(upload_batch(1), ops)

    assert report.codes == ["VIO1"]
    assert report.issues[0].details == {"duplicates": [0]}


def test_duplicate_file_index_in_update() -> None:
    current = [make_image("a", thumbnail=True), make_image("b")]
    ops = ImageOps.build(update=[ImageUpdate(id="a", file_index=0), ImageUpdate(id="b", file_index=0)])

    assert validate_images(upload_batch(1), ops, current).codes == ["VIO2"]


def test_file_index_shared_by_create_and_update() -> None:
    current = [make_image("a", thumbnail=True)]
    ops = ImageOps.build(
        create=[ImageCreate(file_index=0)],
        update=[ImageUpdate(id="a", file_index=0)],
    )

    assert validate_images(upload_batch(1), ops, current).codes == ["VIO3"]


def test_two_explicit_thumbnails_in_create() -> None:
    ops = ImageOps.build(
        create=[ImageCreate(file_index=0, is_thumbnail=True), ImageCreate(file_index=1, is_thumbnail=True)]
    )

    report = validate_images(upload_batch(2), ops)

    assert report.valid is False
    assert report.codes == ["VIO4"]
    assert report.error is not None
    assert report.error.code == IMAGES_VALIDATION_FAILED


def test_new_thumbnail_does_not_conflict_with_current_thumbnail() -> None:
    current = [make_image("a", thumbnail=True)]
    ops = ImageOps.build(create=[ImageCreate(file_index=0, is_thumbnail=True)])

    assert validate_images(upload_batch(1), ops, current).valid is True


def test_create_and_update_thumbnail_claims_do_not_conflict() -> None:
    current = [make_image("a", thumbnail=True), make_image("b")]
    ops = ImageOps.build(
        create=[ImageCreate(file_index=0, is_thumbnail=True)],
        update=[ImageUpdate(id="b", is_thumbnail=True)],
    )

    assert validate_images(upload_batch(1), ops, current).valid is True


def test_two_update_thumbnail_claims_conflict() -> None:
    current = [make_image("a", thumbnail=True), make_image("b"), make_image("c")]
    ops = ImageOps.build(
        update=[ImageUpdate(id="b", is_thumbnail=True), ImageUpdate(id="c", is_thumbnail=True)],
    )

    report = validate_images(upload_batch(0), ops, current)

    assert report.codes == ["VIO4"]
    assert report.issues[0].details == {"create": 0, "update": 2, "maximum": 1}


def test_updating_and_deleting_the_same_image_is_rejected() -> None:
    current = [make_image("a", thumbnail=True), make_image("b")]
    ops = ImageOps.build(update=[ImageUpdate(id="b", file_index=0)], delete=["b"])

    report = validate_images(upload_batch(1), ops, current)

    assert report.codes == ["VIO9"]
    assert report.issues[0].details == {"overlapping": ["b"]}


def test_unsetting_current_thumbnail_removes_the_conflict() -> None:
    current = [make_image("a", thumbnail=True)]
    ops = ImageOps.build(
        create=[ImageCreate(file_index=0, is_thumbnail=True)],
        update=[ImageUpdate(id="a", is_thumbnail=False)],
    )

    assert validate_images(upload_batch(1), ops, current).valid is True


@pytest.mark.parametrize(
    "ops",
    [
        ImageOps.build(create=[ImageCreate(file_index=2)]),
        ImageOps.build(update=[ImageUpdate(id="a", file_index=2)]),
        ImageOps.build(create=[ImageCreate(file_index=-1)]),
    ],
)
def test_file_index_outside_the_batch_is_rejected(ops: ImageOps) -> None:
    current = [make_image("a", thumbnail=True)]

    report = validate_images(upload_batch(2), ops, current)

    assert report.codes == ["VIO5"]
    assert report.issues[0].operation is not None


def test_deleting_every_image_without_replacement_is_rejected() -> None:
    current = [make_image("a", thumbnail=True), make_image("b")]
    ops = ImageOps.build(delete=["a", "b"])

    assert validate_images(upload_batch(0), ops, current).codes == ["VIO6"]


def test_deleting_every_image_with_a_replacement_is_accepted() -> None:
    current = [make_image("a", thumbnail=True), make_image("b")]
    ops = ImageOps.build(delete=["a", "b"], create=[ImageCreate(file_index=0)])

    assert validate_images(upload_batch(1), ops, current).valid is True


def test_duplicate_ids_in_update_and_delete() -> None:
    current = [make_image("a", thumbnail=True), make_image("b"), make_image("c")]
    ops = ImageOps.build(
        update=[ImageUpdate(id="b", alt_text="one"), ImageUpdate(id="b", alt_text="two")],
        delete=["c", "c"],
    )

    report = validate_images(upload_batch(0), ops, current)

    assert report.codes == ["VIO7", "VIO8"]
    assert report.error is not None
    assert report.error.message == "Found 2 validation errors in image operations"
