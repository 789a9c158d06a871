"""FastAPI route definitions."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import FileResponse, JSONResponse

from mashup_maker.core.errors import InsufficientCandidates, InsufficientCategories
from mashup_maker.models import AuthType, PipelineFailure, PipelineOutcome
from mashup_maker.services.mashup_service import MashupService
from mashup_maker.api.schemas import (
    AddAPIResponse, AddedAPI, APIListData, APIListResponse, CategoriesData,
    CategoriesResponse, ErrorBody, ErrorResponse, GenerateCustomRequest,
    GenerateRequest, GenerateResponse, MashupData,
)

router = APIRouter()
mashup_router = APIRouter(prefix="/mashup", tags=["mashup"])
registry_router = APIRouter(prefix="/registry", tags=["registry"])


@lru_cache
def get_service() -> MashupService:
    """Shared service instance."""
    return MashupService()


def _failure_response(failure: PipelineFailure, status_code: int) -> JSONResponse:
    body = ErrorResponse(
        error=ErrorBody(
            code=failure.error_kind.value,
            message=failure.message,
            details=failure.details,
        ),
        partial_result=failure.partial_run.partial_result(),
    )
    return JSONResponse(status_code=status_code, content=body.to_wire())


def _respond(outcome: PipelineOutcome, failure_status: int | None = None) -> Any:
    if isinstance(outcome, PipelineFailure):
        if failure_status is None:
            insufficient = isinstance(
                outcome.cause, (InsufficientCandidates, InsufficientCategories),
            )
            failure_status = 400 if insufficient else 500
        return _failure_response(outcome, failure_status)

    return GenerateResponse(data=MashupData(
        id=outcome.run_id,
        idea=outcome.idea,
        ui_layout=outcome.ui_layout,
        code_preview=outcome.preview,
        download_url=outcome.download_locator,
        timestamp=outcome.timestamp,
    ))


@mashup_router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_mashup(
    request: GenerateRequest | None = Body(default=None),
    service: MashupService = Depends(get_service),
) -> Any:
    """Generate a mashup from three randomly selected APIs."""
    criteria = request.options if request is not None else None
    return _respond(await service.generate(criteria))


@mashup_router.post(
    "/generate-custom",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse}},
)
async def generate_custom_mashup(
    request: GenerateCustomRequest,
    service: MashupService = Depends(get_service),
) -> Any:
    """Generate a mashup from user-chosen APIs."""
    return _respond(await service.generate_custom(request.api_ids), failure_status=400)


@mashup_router.get("/download/{filename}", response_class=FileResponse)
async def download_archive(
    filename: str,
    service: MashupService = Depends(get_service),
) -> FileResponse:
    path = service.archive_path(filename)
    return FileResponse(path, media_type="application/zip", filename=filename)


@registry_router.get("/apis", response_model=APIListResponse)
async def list_apis(
    category: str | None = None,
    auth_type: AuthType | None = Query(default=None, alias="authType"),
    service: MashupService = Depends(get_service),
) -> APIListResponse:
    """List catalog APIs, optionally filtered by category or auth type."""
    apis = service.list_apis(category, auth_type.value if auth_type else None)
    return APIListResponse(data=APIListData(apis=apis, count=len(apis)))


@registry_router.get("/categories", response_model=CategoriesResponse)
async def list_categories(service: MashupService = Depends(get_service)) -> CategoriesResponse:
    return CategoriesResponse(data=CategoriesData(**service.categories()))


@registry_router.post("/apis", response_model=AddAPIResponse, status_code=201)
async def add_api(
    data: dict[str, Any] = Body(...),
    service: MashupService = Depends(get_service),
) -> AddAPIResponse:
    api = service.add_api(data)
    return AddAPIResponse(data=AddedAPI(id=api.id))


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


router.include_router(mashup_router)
router.include_router(registry_router)
