"""Deterministic thumbnail election for an image operation batch.

The resolver never mutates its input. It returns a resolved copy of the batch
in which exactly one image (created or existing) ends up flagged, whenever the
product has at least one image.

Priority order, first match wins:

1. first explicit ``is_thumbnail=True`` in create
2. first explicit ``is_thumbnail=True`` in update
3. the current thumbnail, if it survives and is not explicitly unset
4. first create not explicitly set to False
5. first update carrying a replacement file
6. first update without a file targeting a surviving image
7. first create, even when explicitly set to False
8. first surviving current image

Steps 4-8 are auto-assignments.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from ..canonical.entities import Image
from ..canonical.operations import ImageCommand, ImageCreate, ImageOps, ImageUpdate


@dataclass(frozen=True)
class ThumbnailWinner:
    source: str
    index: int | None = None
    image_id: str | None = None

    @property
    def label(self) -> str:
        if self.source == "create":
            return f"create[{self.index}]"
        return str(self.image_id)


@dataclass(frozen=True)
class ThumbnailResolution:
    images_ops: ImageOps
    auto_assign_thumbnail: bool
    referenced_indices: list[int]
    winner: ThumbnailWinner | None = None


def assign_thumbnail(
    images_ops: ImageOps,
    current_images: list[Image] | None = None,
) -> ThumbnailResolution:
    winner, auto = _elect(images_ops, current_images or [])
    resolved = images_ops if winner is None else _enforce(images_ops, current_images or [], winner)
    return ThumbnailResolution(
        images_ops=resolved,
        auto_assign_thumbnail=auto,
        referenced_indices=images_ops.referenced_indices(),
        winner=winner,
    )


def _elect(images_ops: ImageOps, current_images: list[Image]) -> tuple[ThumbnailWinner | None, bool]:
    creates = images_ops.create
    updates = images_ops.update
    deleted = set(images_ops.delete)
    surviving = [image for image in current_images if image.id not in deleted]
    surviving_ids = {image.id for image in surviving}
    unset_ids = {op.id for op in updates if op.is_thumbnail is False}
    current_thumbnail = next((image for image in surviving if image.is_thumbnail), None)

    for index, op in enumerate(creates):
        if op.is_thumbnail is True:
            return ThumbnailWinner(source="create", index=index), False

    for op in updates:
        if op.is_thumbnail is True and op.id in surviving_ids:
            return ThumbnailWinner(source="existing", image_id=op.id), False

    if current_thumbnail is not None and current_thumbnail.id not in unset_ids:
        return ThumbnailWinner(source="existing", image_id=current_thumbnail.id), False

    for index, op in enumerate(creates):
        if op.is_thumbnail is None:
            return ThumbnailWinner(source="create", index=index), True

    for op in updates:
        if op.file_index is not None and op.id in surviving_ids and op.id not in unset_ids:
            return ThumbnailWinner(source="existing", image_id=op.id), True

    for op in updates:
        if op.file_index is None and op.id in surviving_ids and op.id not in unset_ids:
            return ThumbnailWinner(source="existing", image_id=op.id), True

    if creates:
        return ThumbnailWinner(source="create", index=0), True

    fallback = next((image for image in surviving if image.id not in unset_ids), None)
    if fallback is None and surviving:
        fallback = surviving[0]
    if fallback is not None:
        return ThumbnailWinner(source="existing", image_id=fallback.id), True

    return None, False


def _enforce(images_ops: ImageOps, current_images: list[Image], winner: ThumbnailWinner) -> ImageOps:
    deleted = set(images_ops.delete)
    previous = next(
        (image for image in current_images if image.is_thumbnail and image.id not in deleted),
        None,
    )
    winner_id = winner.image_id if winner.source == "existing" else None

    commands: list[ImageCommand] = []
    updated_ids: set[str] = set()
    create_position = 0
    for command in images_ops.commands:
        if isinstance(command, ImageCreate):
            is_winner = winner.source == "create" and winner.index == create_position
            commands.append(replace(command, is_thumbnail=is_winner))
            create_position += 1
        elif isinstance(command, ImageUpdate):
            updated_ids.add(command.id)
            if command.id == winner_id:
                commands.append(replace(command, is_thumbnail=True))
            elif command.is_thumbnail or (previous is not None and command.id == previous.id):
                commands.append(replace(command, is_thumbnail=False))
            else:
                commands.append(command)
        else:
            commands.append(command)

    already_flagged = previous is not None and previous.id == winner_id
    if winner_id is not None and winner_id not in updated_ids and not already_flagged:
        commands.append(ImageUpdate(id=winner_id, is_thumbnail=True))
    if previous is not None and previous.id != winner_id and previous.id not in updated_ids:
        commands.append(ImageUpdate(id=previous.id, is_thumbnail=False))

    return ImageOps(commands=tuple(commands))


__all__ = ["ThumbnailResolution", "ThumbnailWinner", "assign_thumbnail"]
