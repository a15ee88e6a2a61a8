import json

from fastapi.testclient import TestClient

from spiceworld.core.memory import InMemoryBlobStore, InMemoryProductRepository
from spiceworld.core.orchestrator import MutationOrchestrator
from spiceworld.server.main import create_app
from tests.helpers._catalog_builders import make_image, make_product, make_variant


def _client(orchestrator: MutationOrchestrator) -> TestClient:
    return TestClient(create_app(orchestrator=orchestrator))


def _create_payload(**overrides) -> str:
    payload = {
        "name": "smoked paprika",
        "description": "Sweet smoked paprika from La Vera.",
        "status": "PUBLISHED",
        "categoryId": "cat-spices",
        "variants": {"create": [{"price": 450, "attributeValueIds": ["w-50", "o-in"], "sku": "PAP-50"}]},
        "imagesOps": {"create": [{"fileIndex": 0, "altText": "front of the jar"}]},
    }
    payload.update(overrides)
    return json.dumps(payload)


def _files(count: int = 1) -> list[tuple[str, tuple[str, bytes, str]]]:
    return [("images", (f"jar-{index}.jpg", f"jpeg-{index}".encode(), "image/jpeg")) for index in range(count)]


def test_health(catalog) -> None:
    response = _client(catalog.orchestrator).get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_create_product_returns_product_and_warnings(catalog) -> None:
    client = _client(catalog.orchestrator)

    response = client.post("/api/v1/products", data={"payload": _create_payload()}, files=_files())

    assert response.status_code == 201
    body = response.json()
    assert body["warnings"] == []
    product = body["product"]
    assert product["status"] == "PUBLISHED"
    assert product["version"] == 0
    assert product["images"][0]["altText"] == "front of the jar"
    assert product["images"][0]["isThumbnail"] is True
    assert product["variants"][0]["attributeValueIds"] == ["w-50", "o-in"]

    fetched = client.get(f"/api/v1/products/{product['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["product"] == product


def test_publish_request_without_price_returns_draft_with_warning(catalog) -> None:
    payload = _create_payload(variants={"create": [{"price": 0, "attributeValueIds": []}]})

    response = _client(catalog.orchestrator).post("/api/v1/products", data={"payload": payload}, files=_files())

    assert response.status_code == 201
    assert response.json()["product"]["status"] == "DRAFT"
    assert "PUB1" in [warning["code"] for warning in response.json()["warnings"]]


def test_aggregated_validation_failure_is_400(catalog) -> None:
    payload = _create_payload(
        categoryId="cat-grind",
        variants={"create": [{"price": 100}, {"price": 200}]},
    )

    response = _client(catalog.orchestrator).post("/api/v1/products", data={"payload": payload}, files=_files())

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["code"] == "VARIANTS_VALIDATION_FAILED"
    assert [item["code"] for item in detail["details"]["subErrors"]] == ["VVA4"]


def test_image_validation_failure_is_400(catalog) -> None:
    payload = _create_payload(imagesOps={"create": [{"fileIndex": 0}, {"fileIndex": 3}]})

    response = _client(catalog.orchestrator).post("/api/v1/products", data={"payload": payload}, files=_files(2))

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "IMAGES_VALIDATION_FAILED"


def test_request_shape_violations_are_422(catalog) -> None:
    client = _client(catalog.orchestrator)

    bad_name = client.post("/api/v1/products", data={"payload": _create_payload(name="X")}, files=_files())
    bad_json = client.post("/api/v1/products", data={"payload": "{not json"}, files=_files())
    bad_status = client.post("/api/v1/products", data={"payload": _create_payload(status="LIVE")}, files=_files())

    assert bad_name.status_code == 422
    assert bad_name.json()["detail"]["code"] == "REQUEST_SHAPE_INVALID"
    assert bad_json.status_code == 422
    assert bad_status.status_code == 422


def test_unknown_product_is_404(catalog) -> None:
    response = _client(catalog.orchestrator).get("/api/v1/products/missing")

    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "NOT_FOUND"


def test_patch_with_stale_version_is_409(catalog) -> None:
    catalog.products.add(make_product(version=3, variants=[make_variant("v1", "w-50")], images=[make_image("a", thumbnail=True)]))

    response = _client(catalog.orchestrator).patch(
        "/api/v1/products/prod-1",
        data={"payload": json.dumps({"name": "hot paprika", "_version": 999})},
    )

    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["code"] == "VERSION_CONFLICT"
    assert "999" not in detail["message"]
    assert catalog.products.get_by_id("prod-1").name == "smoked paprika"


def test_patch_updates_and_bumps_version(catalog) -> None:
    catalog.products.add(make_product(version=3, variants=[make_variant("v1", "w-50")], images=[make_image("a", thumbnail=True)]))

    response = _client(catalog.orchestrator).patch(
        "/api/v1/products/prod-1",
        data={
            "payload": json.dumps(
                {
                    "_version": 3,
                    "variants": {"update": [{"id": "v1", "price": 999}]},
                    "imagesOps": {"update": [{"id": "a", "fileIndex": 0}]},
                }
            )
        },
        files=_files(),
    )

    assert response.status_code == 200
    product = response.json()["product"]
    assert product["version"] == 4
    assert product["variants"][0]["price"] == 999
    assert product["images"][0]["key"] != "key-a"
    assert catalog.blobs.deleted == ["key-a"]


def test_upload_failure_is_502(catalog) -> None:
    class _Unavailable(InMemoryBlobStore):
        def upload(self, file):
            raise OSError("bucket unavailable")

    orchestrator = MutationOrchestrator(
        categories=catalog.categories,
        products=catalog.products,
        blobs=_Unavailable(),
    )

    response = _client(orchestrator).post("/api/v1/products", data={"payload": _create_payload()}, files=_files())

    assert response.status_code == 502
    assert response.json()["detail"]["code"] == "UPLOAD_FAILED"


def test_persistence_failure_is_500(catalog) -> None:
    class _Broken(InMemoryProductRepository):
        def persist(self, tx):
            raise RuntimeError("disk full")

    orchestrator = MutationOrchestrator(categories=catalog.categories, products=_Broken(), blobs=catalog.blobs)

    response = _client(orchestrator).post("/api/v1/products", data={"payload": _create_payload()}, files=_files())

    assert response.status_code == 500
    assert response.json()["detail"]["code"] == "PERSISTENCE_FAILED"
    assert catalog.blobs.blobs == {}


def test_publishable_endpoint(catalog) -> None:
    catalog.products.add(make_product(category_id="cat-grind", variants=[make_variant("v1", price=0)]))

    response = _client(catalog.orchestrator).get("/api/v1/products/prod-1/publishable")

    assert response.status_code == 200
    body = response.json()
    assert body["publishable"] is False
    assert [warning["code"] for warning in body["warnings"]] == ["PUB1", "PUB2"]


def test_patch_with_new_thumbnail_demotes_the_current_one(catalog) -> None:
    catalog.products.add(make_product(version=1, variants=[make_variant("v1", "w-50")], images=[make_image("a", thumbnail=True)]))

    response = _client(catalog.orchestrator).patch(
        "/api/v1/products/prod-1",
        data={"payload": json.dumps({"_version": 1, "imagesOps": {"create": [{"fileIndex": 0, "isThumbnail": True}]}})},
        files=_files(),
    )

    assert response.status_code == 200
    images = response.json()["product"]["images"]
    assert [image["isThumbnail"] for image in images] == [False, True]
