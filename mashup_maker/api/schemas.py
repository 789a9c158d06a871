"""API request/response schemas."""

from __future__ import annotations
from typing import Any, Literal

from pydantic import Field

from mashup_maker.models import (
    APIDescriptor, AppIdea, CodePreview, SelectionCriteria, UILayout,
)
from mashup_maker.models.base import CamelModel


class GenerateRequest(CamelModel):
    """Request body for /mashup/generate."""
    options: SelectionCriteria | None = None


class GenerateCustomRequest(CamelModel):
    """Request body for /mashup/generate-custom."""
    api_ids: list[str] = Field(min_length=1)


class MashupData(CamelModel):
    id: str
    idea: AppIdea
    ui_layout: UILayout
    code_preview: CodePreview
    download_url: str
    timestamp: int


class GenerateResponse(CamelModel):
    success: Literal[True] = True
    data: MashupData


class ErrorBody(CamelModel):
    code: str
    message: str
    details: Any = None


class ErrorResponse(CamelModel):
    success: Literal[False] = False
    error: ErrorBody
    partial_result: dict[str, Any] | None = None


class APIListData(CamelModel):
    apis: list[APIDescriptor]
    count: int


class APIListResponse(CamelModel):
    success: Literal[True] = True
    data: APIListData


class CategoriesData(CamelModel):
    categories: list[str]
    category_data: dict[str, int]
    total_categories: int


class CategoriesResponse(CamelModel):
    success: Literal[True] = True
    data: CategoriesData


class AddedAPI(CamelModel):
    id: str
    message: str = "API added successfully"


class AddAPIResponse(CamelModel):
    success: Literal[True] = True
    data: AddedAPI
