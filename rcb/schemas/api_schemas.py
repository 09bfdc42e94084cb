"""Request / response bodies for the HTTP API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, field_validator

from rcb.schemas.base import CamelModel
from rcb.schemas.content import ContentConfig

FileType = Literal["quickref", "details"]


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------

class CreateJobRequest(CamelModel):
    """Body for POST /jobs."""

    categories: list[str] = Field(default_factory=list)
    batch_size: int = Field(default=25, ge=1)
    concurrent: int = Field(default=5, ge=1)
    config: ContentConfig = Field(default_factory=ContentConfig)

    @field_validator("categories", mode="before")
    @classmethod
    def _coerce_ids(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            return [str(c).strip() for c in v if str(c).strip()]
        return v


class UpdateJobRequest(CamelModel):
    """Body for PATCH /jobs/{id}."""

    status: str


class SuccessResponse(CamelModel):
    success: bool = True


# ---------------------------------------------------------------------------
# JSON files
# ---------------------------------------------------------------------------

class JSONFile(CamelModel):
    """One stored content artifact as listed by GET /json-files."""

    product_id: int
    product_name: str
    type: FileType
    filename: str
    content: dict[str, Any]
    last_modified: str
    size: int


class PutJSONFileRequest(CamelModel):
    product_id: int
    type: FileType
    content: dict[str, Any]


class DeleteJSONFileRequest(CamelModel):
    product_id: int
    type: FileType


class RegenerateRequest(CamelModel):
    product_id: int
    regenerate_type: FileType | None = None


class RegenerateResult(CamelModel):
    type: FileType
    success: bool


class RegenerateResponse(CamelModel):
    success: bool = True
    product_id: int
    product_name: str
    results: list[RegenerateResult] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Catalyst diagnostics
# ---------------------------------------------------------------------------

class CatalystTestRequest(CamelModel):
    product_id: int
