"""Command-line frontend for the Spiceworld core engine."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from spiceworld import __version__
from spiceworld.core.canonical.entities import UploadedFile, category_from_payload, product_from_payload
from spiceworld.core.canonical.operations import ImageOps
from spiceworld.core.orchestrator import MutationResult, mutation_from_payload, validate_and_resolve

load_dotenv(Path(__file__).resolve().parents[2] / ".env")


def _json_dump(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def _image_ops_to_dict(ops: ImageOps | None) -> dict[str, Any] | None:
    if ops is None:
        return None
    return {
        "create": [
            {"fileIndex": op.file_index, "altText": op.alt_text, "isThumbnail": op.is_thumbnail}
            for op in ops.create
        ],
        "update": [
            {"id": op.id, "fileIndex": op.file_index, "altText": op.alt_text, "isThumbnail": op.is_thumbnail}
            for op in ops.update
        ],
        "delete": list(ops.delete),
    }


def _result_to_dict(result: MutationResult) -> dict[str, Any]:
    resolved = result.resolved
    if result.error is not None or resolved is None:
        error = result.error.to_dict() if result.error is not None else None
        return {"valid": False, "error": error}
    return {
        "valid": True,
        "finalStatus": resolved.final_status,
        "warnings": [warning.to_dict() for warning in resolved.warnings],
        "autoAssignThumbnail": resolved.auto_assign_thumbnail,
        "referencedIndices": resolved.referenced_indices,
        "categoryChanged": resolved.category_changed,
        "imagesOps": _image_ops_to_dict(resolved.images_ops),
    }


def _uploads_from_document(files: Any) -> tuple[UploadedFile, ...]:
    """``files`` lists the batch as filenames; contents are not needed to validate."""
    if files is None:
        return ()
    if not isinstance(files, list):
        raise ValueError("files must be a list of filenames")
    return tuple(UploadedFile(filename=str(name)) for name in files)


def _cmd_validate(args: argparse.Namespace) -> int:
    document = json.loads(Path(args.input).read_text(encoding="utf-8"))
    if not isinstance(document, dict):
        raise ValueError("Mutation document must be a JSON object")
    if not isinstance(document.get("category"), dict):
        raise ValueError("Mutation document requires a 'category' object")

    category = category_from_payload(document["category"])
    current = product_from_payload(document["product"]) if document.get("product") else None
    mutation = mutation_from_payload(
        document.get("request") or {},
        product_id=current.id if current is not None else None,
        images=_uploads_from_document(document.get("files")),
    )
    result = validate_and_resolve(mutation, category=category, current=current)
    payload = _result_to_dict(result)
    if args.report:
        Path(args.report).write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    _json_dump(payload)

    if not payload["valid"]:
        return 1
    if args.strict and payload["warnings"]:
        return 1
    return 0


def _cmd_version(args: argparse.Namespace) -> int:
    print(__version__)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="spiceworld", description="Spiceworld product engine CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_cmd = subparsers.add_parser(
        "validate",
        help="Validate and resolve a product mutation described by a JSON document",
    )
    validate_cmd.add_argument("input", help="JSON file with 'category', optional 'product', 'request' and 'files'")
    validate_cmd.add_argument("--strict", action="store_true", help="Treat publish warnings as failures")
    validate_cmd.add_argument("--report", default="")
    validate_cmd.set_defaults(func=_cmd_validate)

    version_cmd = subparsers.add_parser("version", help="Print the installed version")
    version_cmd.set_defaults(func=_cmd_version)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return int(args.func(args) or 0)
    except Exception as exc:
        parser.exit(status=2, message=f"error: {exc}\n")


if __name__ == "__main__":
    raise SystemExit(main())
