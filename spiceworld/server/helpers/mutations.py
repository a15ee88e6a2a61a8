"""Product mutation helpers: payload decoding and core-error translation."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import TypeVar

from fastapi import HTTPException, UploadFile
from pydantic import ValidationError

from ...core.canonical.entities import UploadedFile
from ...core.errors import (
    ConflictError,
    MutationPersistenceError,
    NotFoundError,
    ProductValidationError,
    RequestShapeError,
    UploadError,
)
from ...core.orchestrator import MutationOutcome, ProductMutation, mutation_from_payload
from ...core.validate.rules import REQUEST_SHAPE_INVALID
from ..logging import product_result_to_loggable
from ..schemas import ProductMutationIn

logger = logging.getLogger("uvicorn.error")

T = TypeVar("T")


def read_uploads(files: list[UploadFile] | None) -> tuple[UploadedFile, ...]:
    return tuple(
        UploadedFile(
            filename=upload.filename or f"file-{index}",
            content=upload.file.read(),
            content_type=upload.content_type,
        )
        for index, upload in enumerate(files or [])
    )


def parse_mutation(
    raw_payload: str,
    *,
    product_id: str | None = None,
    files: list[UploadFile] | None = None,
) -> ProductMutation:
    try:
        parsed = ProductMutationIn.model_validate_json(raw_payload or "{}")
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail={
                "code": REQUEST_SHAPE_INVALID,
                "message": "Invalid mutation payload.",
                "details": {"errors": json.loads(exc.json(include_url=False))},
            },
        ) from exc

    try:
        return mutation_from_payload(
            parsed.model_dump(by_alias=True, exclude_none=True),
            product_id=product_id,
            images=read_uploads(files),
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=422,
            detail={"code": REQUEST_SHAPE_INVALID, "message": str(exc)},
        ) from exc


def run_mutation(action: Callable[[ProductMutation], MutationOutcome], mutation: ProductMutation) -> MutationOutcome:
    try:
        outcome = action(mutation)
    except RequestShapeError as exc:
        raise HTTPException(status_code=422, detail=exc.to_dict()) from exc
    except ProductValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.to_dict()) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.to_dict()) from exc
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=exc.to_dict()) from exc
    except UploadError as exc:
        logger.warning("Image upload failed: %s", exc)
        raise HTTPException(status_code=502, detail=exc.to_dict()) from exc
    except MutationPersistenceError as exc:
        logger.error("Product mutation could not be persisted: %s", exc)
        raise HTTPException(status_code=500, detail=exc.to_dict()) from exc

    logger.debug(
        "Product mutation summary (changed=%s):\n%s",
        outcome.changed,
        json.dumps(product_result_to_loggable(outcome.product), ensure_ascii=False, indent=2),
    )
    return outcome


def fetch_product(loader: Callable[[str], T], product_id: str) -> T:
    try:
        return loader(product_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.to_dict()) from exc


def outcome_to_response(outcome: MutationOutcome) -> dict:
    return {
        "product": outcome.product.to_dict(),
        "warnings": [warning.to_dict() for warning in outcome.warnings],
    }


__all__ = ["fetch_product", "outcome_to_response", "parse_mutation", "read_uploads", "run_mutation"]
