"""API catalog entries and selection criteria."""

from __future__ import annotations
from enum import Enum
from typing import Any

from pydantic import (
    AliasChoices, AnyHttpUrl, ConfigDict, Field, StrictBool, TypeAdapter, ValidationError,
    field_validator,
)

from .base import CamelModel

_HTTP_URL = TypeAdapter(AnyHttpUrl)


class AuthType(str, Enum):
    NONE = "none"
    APIKEY = "apikey"
    OAUTH = "oauth"


class APIDescriptor(CamelModel):
    """A curated public API. Identity is `id`; categories compare case-insensitively."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    category: str
    base_url: str
    sample_endpoint: str
    auth_type: AuthType
    cors_compatible: StrictBool
    documentation_url: str
    mock_data: dict[str, Any] | None = None

    @field_validator(
        "id", "name", "description", "category",
        "base_url", "sample_endpoint", "documentation_url",
    )
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("base_url", "documentation_url")
    @classmethod
    def _http_url(cls, v: str) -> str:
        # Validated as a URL, stored as given
        try:
            _HTTP_URL.validate_python(v)
        except ValidationError as e:
            raise ValueError(f"must be an http(s) URL: {e.errors()[0]['msg']}") from e
        return v

    @field_validator("auth_type", mode="before")
    @classmethod
    def _lower_auth_type(cls, v: object) -> object:
        return v.lower() if isinstance(v, str) else v

    @property
    def category_key(self) -> str:
        return self.category.lower()

    @property
    def requires_auth(self) -> bool:
        return self.auth_type in (AuthType.APIKEY, AuthType.OAUTH)


class SelectionCriteria(CamelModel):
    """Optional filters for random selection. Unset fields mean no constraint."""
    exclude_categories: frozenset[str] = frozenset()
    exclude_api_ids: frozenset[str] = Field(
        default=frozenset(),
        validation_alias=AliasChoices("excludeApiIds", "excludeAPIIds", "exclude_api_ids"),
        serialization_alias="excludeApiIds",
    )
    cors_only: bool = False
    require_auth: bool | None = None  # True: apikey/oauth only, False: none only
