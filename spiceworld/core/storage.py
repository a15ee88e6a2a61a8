"""Filesystem blob store."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from slugify import slugify

from .canonical.entities import StoredBlob, UploadedFile
from .ports import BlobStore

logger = logging.getLogger(__name__)


class LocalBlobStore(BlobStore):
    """Stores uploads under ``base_path`` and serves them from ``base_url``."""

    def __init__(self, base_path: str | Path, base_url: str = "/static") -> None:
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.base_url = base_url.rstrip("/")

    def upload(self, file: UploadedFile) -> StoredBlob:
        name = Path(file.filename)
        key = f"{uuid.uuid4().hex}-{slugify(name.stem) or 'file'}{name.suffix.lower()}"
        full_path = self.base_path / key
        full_path.write_bytes(file.content)
        logger.debug("Stored blob %s (%d bytes)", key, file.size)
        return StoredBlob(key=key, url=f"{self.base_url}/{key}")

    def delete(self, key: str) -> None:
        full_path = self.base_path / key
        if full_path.exists():
            full_path.unlink()
            logger.debug("Deleted blob %s", key)

    def exists(self, key: str) -> bool:
        return (self.base_path / key).exists()


__all__ = ["LocalBlobStore"]
