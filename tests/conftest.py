import os
import sys
import tempfile
from pathlib import Path

import pytest

# Ensure `import spiceworld` works when running `pytest` without needing PYTHONPATH hacks.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

# The server module builds its default blob store at import time.
os.environ.setdefault("STORAGE_PATH", str(Path(tempfile.gettempdir()) / "spiceworld-test-uploads"))

from spiceworld.core.memory import InMemoryBlobStore, InMemoryCategoryRepository, InMemoryProductRepository
from spiceworld.core.orchestrator import MutationOrchestrator
from tests.helpers._catalog_builders import grind_category, plain_category, spice_category


class Catalog:
    """In-memory collaborators wired into one orchestrator."""

    def __init__(self) -> None:
        self.categories = InMemoryCategoryRepository([spice_category(), grind_category(), plain_category()])
        counter = iter(range(1, 10_000))
        self.products = InMemoryProductRepository(id_factory=lambda: f"id-{next(counter)}")
        self.blobs = InMemoryBlobStore()
        self.orchestrator = MutationOrchestrator(
            categories=self.categories,
            products=self.products,
            blobs=self.blobs,
        )


@pytest.fixture
def catalog() -> Catalog:
    return Catalog()
