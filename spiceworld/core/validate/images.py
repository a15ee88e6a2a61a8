"""Image operation checks against the current images and the upload batch.

Error codes:
- VIO1: duplicate fileIndex in create
- VIO2: duplicate fileIndex in update
- VIO3: same fileIndex in both create and update
- VIO4: more than one thumbnail in the resulting state
- VIO5: fileIndex out of bounds
- VIO6: every current image deleted with nothing created
- VIO7: duplicate image id in update
- VIO8: duplicate image id in delete
- VIO9: same image id in both update and delete

For VIO4 only explicit ``is_thumbnail=True`` claims compete, creates among
themselves and updates among themselves. An explicit claim demotes the
current thumbnail, and a create claim outranks an update claim; see
``resolve/thumbnail.py``.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from ..canonical.entities import Image, UploadedFile
from ..canonical.operations import ImageOps, resulting_images
from .report import ValidationIssue, ValidationReport, build_report

IMAGES_VALIDATION_FAILED = "IMAGES_VALIDATION_FAILED"


def validate_images(
    images: Sequence[UploadedFile],
    images_ops: ImageOps,
    current_images: list[Image] | None = None,
) -> ValidationReport:
    create_indices = [op.file_index for op in images_ops.create]
    update_indices = [op.file_index for op in images_ops.update if op.file_index is not None]

    issues: list[ValidationIssue] = []

    duplicates = _duplicates(create_indices)
    if duplicates:
        issues.append(
            ValidationIssue(
                code="VIO1",
                message=f"Duplicate fileIndex in create: {_join(duplicates)}",
                field="imagesOps.create",
                details={"duplicates": duplicates},
            )
        )

    duplicates = _duplicates(update_indices)
    if duplicates:
        issues.append(
            ValidationIssue(
                code="VIO2",
                message=f"Duplicate fileIndex in update: {_join(duplicates)}",
                field="imagesOps.update",
                details={"duplicates": duplicates},
            )
        )

    overlap = sorted(set(create_indices) & set(update_indices))
    if overlap:
        issues.append(
            ValidationIssue(
                code="VIO3",
                message=f"fileIndex {_join(overlap)} used in both create and update",
                field="imagesOps",
                details={"overlapping": overlap},
            )
        )

    create_claims = sum(1 for op in images_ops.create if op.is_thumbnail is True)
    update_claims = sum(1 for op in images_ops.update if op.is_thumbnail is True)
    thumbnail_count = max(create_claims, update_claims)
    if thumbnail_count > 1:
        issues.append(
            ValidationIssue(
                code="VIO4",
                message=f"Multiple thumbnails in final state ({thumbnail_count} found)",
                field="imagesOps",
                details={"create": create_claims, "update": update_claims, "maximum": 1},
            )
        )

    resulting = resulting_images(current_images, images_ops)
    batch_size = len(images)
    for kind, position, command in images_ops.labelled():
        file_index = getattr(command, "file_index", None)
        if file_index is None:
            continue
        if file_index < 0 or file_index >= batch_size:
            issues.append(
                ValidationIssue(
                    code="VIO5",
                    message=f"Invalid fileIndex {file_index}. Only {batch_size} files provided.",
                    field="imagesOps",
                    operation=f"{kind}[{position}]",
                    details={"invalidValue": file_index},
                )
            )

    if current_images and not resulting:
        issues.append(
            ValidationIssue(
                code="VIO6",
                message="Cannot delete every image of a product without creating a replacement.",
                field="imagesOps.delete",
                details={"current": len(current_images), "minimum": 1},
            )
        )

    duplicates = _duplicates([op.id for op in images_ops.update])
    if duplicates:
        issues.append(
            ValidationIssue(
                code="VIO7",
                message=f"Duplicate image id in update: {_join(duplicates)}",
                field="imagesOps.update",
                details={"duplicates": duplicates},
            )
        )

    duplicates = _duplicates(images_ops.delete)
    if duplicates:
        issues.append(
            ValidationIssue(
                code="VIO8",
                message=f"Duplicate image id in delete: {_join(duplicates)}",
                field="imagesOps.delete",
                details={"duplicates": duplicates},
            )
        )

    overlap = sorted({op.id for op in images_ops.update} & set(images_ops.delete))
    if overlap:
        issues.append(
            ValidationIssue(
                code="VIO9",
                message=f"Image id {_join(overlap)} both updated and deleted",
                field="imagesOps",
                details={"overlapping": overlap},
            )
        )

    return build_report(
        issues,
        code=IMAGES_VALIDATION_FAILED,
        noun="image operations",
        field="images",
    )


def _duplicates(values: list) -> list:
    counts = Counter(values)
    return [value for value, count in counts.items() if count > 1]


def _join(values: list) -> str:
    return ", ".join(str(value) for value in values)


__all__ = ["IMAGES_VALIDATION_FAILED", "validate_images"]
