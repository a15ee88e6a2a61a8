"""FastAPI server adapter for the Spiceworld core engine."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

# Load .env before importing modules that may resolve/capture settings.
ROOT_DIR = Path(__file__).resolve().parents[2]
load_dotenv(ROOT_DIR / ".env")

from ..config import Settings, get_settings
from ..core.canonical.entities import Category, Product, category_from_payload, product_from_payload
from ..core.config import config_from_env
from ..core.memory import InMemoryCategoryRepository, InMemoryProductRepository
from ..core.orchestrator import MutationOrchestrator
from ..core.storage import LocalBlobStore
from .routers import api

settings = get_settings()
logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)


def load_catalog_seed(path: str | Path) -> tuple[list[Category], list[Product]]:
    """Read ``{"categories": [...], "products": [...]}`` (or a bare category list)."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, list):
        data = {"categories": data}
    if not isinstance(data, dict):
        raise ValueError("Catalog seed must be a JSON object or a list of categories.")
    categories = [category_from_payload(item) for item in data.get("categories") or []]
    products = [product_from_payload(item) for item in data.get("products") or []]
    return categories, products


def build_orchestrator(app_settings: Settings) -> MutationOrchestrator:
    categories: list[Category] = []
    products: list[Product] = []
    if app_settings.catalog_seed_path:
        categories, products = load_catalog_seed(app_settings.catalog_seed_path)
        logger.info(
            "Loaded %d categories and %d products from %s",
            len(categories),
            len(products),
            app_settings.catalog_seed_path,
        )
    return MutationOrchestrator(
        categories=InMemoryCategoryRepository(categories),
        products=InMemoryProductRepository(products),
        blobs=LocalBlobStore(app_settings.storage_path, base_url=app_settings.storage_base_url),
        config=config_from_env(strict=app_settings.strict_publish),
    )


def create_app(orchestrator: MutationOrchestrator | None = None) -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        summary="Validate and atomically create or patch catalog products",
        version="1.0.0",
    )
    fastapi_app.state.orchestrator = orchestrator or build_orchestrator(settings)

    if settings.storage_base_url.startswith("/") and Path(settings.storage_path).is_dir():
        fastapi_app.mount(
            settings.storage_base_url,
            StaticFiles(directory=settings.storage_path),
            name="uploads",
        )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    fastapi_app.include_router(api.router)
    return fastapi_app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("spiceworld.server.main:app", host="0.0.0.0", port=8000, reload=settings.debug)


__all__ = ["app", "build_orchestrator", "create_app", "load_catalog_seed", "logger", "run", "settings"]
