"""Pydantic DTOs (Data Transfer Objects) for the Entity feature."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.domain.entities import CODE_MAX_LENGTH, DESCRIPTION_MAX_LENGTH


class EntityWrite(BaseModel):
    """Fields accepted on create and update.

    Whitespace is stripped before the length checks, so blank values fail
    ``min_length``.
    """

    code: str = Field(
        ..., min_length=1, max_length=CODE_MAX_LENGTH, examples=["ENT-001"],
    )
    description: str = Field(
        ..., min_length=1, max_length=DESCRIPTION_MAX_LENGTH, examples=["First entity"],
    )

    model_config = {"str_strip_whitespace": True}


class EntityCreate(EntityWrite):
    """Schema for creating a new entity."""


class EntityUpdate(EntityWrite):
    """Schema for updating an existing entity; both fields are required."""


class EntityResponse(BaseModel):
    """Schema returned to the client. Timestamps are ISO-8601 UTC."""

    id: UUID
    code: str
    description: str
    create_date: datetime = Field(alias="createDate")
    create_user: str = Field(alias="createUser")
    last_update_date: datetime | None = Field(None, alias="lastUpdateDate")
    last_update_user: str | None = Field(None, alias="lastUpdateUser")
    canceled: bool

    model_config = {"populate_by_name": True}


class EntityPageResponse(BaseModel):
    """One page of entities with paging totals."""

    content: list[EntityResponse]
    page_number: int = Field(alias="pageNumber")
    page_size: int = Field(alias="pageSize")
    total_elements: int = Field(alias="totalElements")
    total_pages: int = Field(alias="totalPages")

    model_config = {"populate_by_name": True}
