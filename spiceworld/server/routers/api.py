"""JSON API routes: /health, /api/v1/products."""


from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from ...config import get_settings
from ...core.orchestrator import MutationOrchestrator
from ..helpers.mutations import fetch_product, outcome_to_response, parse_mutation, run_mutation

settings = get_settings()
router = APIRouter()


def get_orchestrator(request: Request) -> MutationOrchestrator:
	return request.app.state.orchestrator


@router.get("/health")
def health() -> dict:
	return {"status": "ok", "app": settings.app_name}


@router.get("/api/v1/products/{product_id}")
def get_product(
	product_id: str,
	orchestrator: MutationOrchestrator = Depends(get_orchestrator),
) -> dict:
	return {"product": fetch_product(orchestrator.get_product, product_id).to_dict()}


@router.get("/api/v1/products/{product_id}/publishable")
def check_publishable(
	product_id: str,
	orchestrator: MutationOrchestrator = Depends(get_orchestrator),
) -> dict:
	issues = fetch_product(orchestrator.check_publishable, product_id)
	return {"publishable": not issues, "warnings": [issue.to_dict() for issue in issues]}


@router.post("/api/v1/products", status_code=201)
def create_product(
	payload: str = Form(..., description="JSON mutation payload"),
	images: list[UploadFile] | None = File(None),
	orchestrator: MutationOrchestrator = Depends(get_orchestrator),
) -> dict:
	mutation = parse_mutation(payload, files=images)
	return outcome_to_response(run_mutation(orchestrator.create, mutation))


@router.patch("/api/v1/products/{product_id}")
def patch_product(
	product_id: str,
	payload: str = Form(..., description="JSON mutation payload"),
	images: list[UploadFile] | None = File(None),
	orchestrator: MutationOrchestrator = Depends(get_orchestrator),
) -> dict:
	mutation = parse_mutation(payload, product_id=product_id, files=images)
	return outcome_to_response(run_mutation(orchestrator.patch, mutation))
