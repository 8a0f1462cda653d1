"""Entity CRUD endpoints with paging, allow-listed sorting and logical delete."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status

from app.application.schemas.entity import (
    EntityCreate,
    EntityPageResponse,
    EntityResponse,
    EntityUpdate,
)
from app.application.schemas.error import ErrorResponse
from app.application.services import EntityService
from app.config import get_settings
from app.domain.entities import Entity, Identity, PageRequest
from app.domain.exceptions import FieldIssue, ValidationFailedError
from app.infrastructure.dependencies import get_current_identity, get_entity_service

router = APIRouter(
    prefix="/entities",
    tags=["Entities"],
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
    },
)


def _to_response(entity: Entity) -> EntityResponse:
    """Map an Entity domain record to its API response."""
    return EntityResponse(
        id=entity.id,
        code=entity.code,
        description=entity.description,
        create_date=entity.create_timestamp,
        create_user=entity.create_actor,
        last_update_date=entity.last_update_timestamp,
        last_update_user=entity.last_update_actor,
        canceled=entity.canceled,
    )


@router.get("", response_model=EntityPageResponse)
async def list_entities(
    page: int = Query(0, ge=0, description="Zero-based page index"),
    size: int | None = Query(None, ge=1, description="Page size"),
    sort_by: str = Query("code", alias="sortBy", description="Field to sort by"),
    sort_direction: str = Query("asc", alias="sortDirection", description="asc or desc"),
    include_canceled: bool = Query(
        True, alias="includeCanceled", description="Include logically deleted entities",
    ),
    identity: Identity = Depends(get_current_identity),
    service: EntityService = Depends(get_entity_service),
) -> EntityPageResponse:
    """Retrieve one sorted page of entities."""
    settings = get_settings()
    if size is None:
        size = settings.default_page_size
    if size > settings.max_page_size:
        raise ValidationFailedError(
            "Invalid pagination parameters",
            [FieldIssue("size", f"must not exceed {settings.max_page_size}")],
        )

    page_request = PageRequest(
        page=page,
        size=size,
        sort_field=sort_by,
        sort_direction=sort_direction,
        include_canceled=include_canceled,
    )
    result = await service.list_entities(identity, page_request)
    return EntityPageResponse(
        content=[_to_response(e) for e in result.content],
        page_number=result.page,
        page_size=result.size,
        total_elements=result.total_elements,
        total_pages=result.total_pages,
    )


@router.get(
    "/{entity_id}",
    response_model=EntityResponse,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def get_entity(
    entity_id: UUID,
    identity: Identity = Depends(get_current_identity),
    service: EntityService = Depends(get_entity_service),
) -> EntityResponse:
    """Retrieve a single entity by ID, canceled or not."""
    entity = await service.get_entity(identity, entity_id)
    return _to_response(entity)


@router.post(
    "",
    response_model=EntityResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_403_FORBIDDEN: {"model": ErrorResponse},
        status.HTTP_409_CONFLICT: {"model": ErrorResponse},
    },
)
async def create_entity(
    data: EntityCreate,
    request: Request,
    response: Response,
    identity: Identity = Depends(get_current_identity),
    service: EntityService = Depends(get_entity_service),
) -> EntityResponse:
    """Create a new entity."""
    entity = await service.create_entity(identity, data)
    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{entity.id}"
    return _to_response(entity)


@router.put(
    "/{entity_id}",
    response_model=EntityResponse,
    responses={
        status.HTTP_403_FORBIDDEN: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_409_CONFLICT: {"model": ErrorResponse},
    },
)
async def update_entity(
    entity_id: UUID,
    data: EntityUpdate,
    identity: Identity = Depends(get_current_identity),
    service: EntityService = Depends(get_entity_service),
) -> EntityResponse:
    """Update an existing entity's code and description."""
    entity = await service.update_entity(identity, entity_id, data)
    return _to_response(entity)


@router.delete(
    "/{entity_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        status.HTTP_403_FORBIDDEN: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
async def delete_entity(
    entity_id: UUID,
    identity: Identity = Depends(get_current_identity),
    service: EntityService = Depends(get_entity_service),
) -> None:
    """Logically delete an entity (sets canceled=true)."""
    await service.delete_entity(identity, entity_id)
