"""Pydantic schemas for the error envelope shared by every endpoint."""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    field: str
    issue: str


class ErrorResponse(BaseModel):
    """Stable error body: ``{code, message, details?, correlationId}``."""

    code: str = Field(..., examples=["RESOURCE_NOT_FOUND"])
    message: str
    details: list[ErrorDetail] | None = None
    correlation_id: str | None = Field(None, alias="correlationId")

    model_config = {"populate_by_name": True}
