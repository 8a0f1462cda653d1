"""Application service (use case) for the Entity lifecycle."""

import logging
from collections.abc import Iterable
from uuid import UUID

from app.application.interfaces import EntityRepository
from app.application.schemas.entity import EntityWrite
from app.domain.entities import (
    CODE_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    Entity,
    Identity,
    Page,
    PageRequest,
)
from app.domain.exceptions import (
    BusinessRuleViolationError,
    DuplicateEntityError,
    EntityNotFoundError,
    FieldIssue,
    ForbiddenError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)

_ENTITY_TYPE = "Entity"


class EntityService:
    """Orchestrates create/get/list/update/logical-delete of entities.

    The acting identity is passed into every call and recorded in the audit
    fields. Depends on the repository port (DI). When ``write_roles`` is
    non-empty, mutations require at least one of those roles.
    """

    def __init__(
        self,
        repository: EntityRepository,
        write_roles: Iterable[str] = (),
    ):
        self._repository = repository
        self._write_roles = tuple(write_roles)

    async def create_entity(self, identity: Identity, data: EntityWrite) -> Entity:
        self._require_write_access(identity)
        code, description = _clean_fields(data)
        entity = Entity(
            code=code,
            description=description,
            create_actor=identity.username,
        )
        try:
            created = await self._repository.save(entity)
        except DuplicateEntityError as exc:
            raise _conflict(exc) from exc
        logger.info("Entity %s created by %s (code=%s)", created.id, identity.username, code)
        return created

    async def get_entity(self, identity: Identity, entity_id: UUID) -> Entity:
        entity = await self._repository.get_by_id(entity_id)
        if entity is None:
            raise EntityNotFoundError(_ENTITY_TYPE, entity_id)
        return entity

    async def list_entities(
        self, identity: Identity, page_request: PageRequest
    ) -> Page[Entity]:
        content, total = await self._repository.find_page(page_request)
        return Page(
            content=content,
            page=page_request.page,
            size=page_request.size,
            total_elements=total,
        )

    async def update_entity(
        self, identity: Identity, entity_id: UUID, data: EntityWrite
    ) -> Entity:
        self._require_write_access(identity)
        code, description = _clean_fields(data)
        entity = await self.get_entity(identity, entity_id)

        entity.apply_changes(code, description, identity.username)
        try:
            updated = await self._repository.update(entity)
        except DuplicateEntityError as exc:
            raise _conflict(exc) from exc
        logger.info("Entity %s updated by %s", entity_id, identity.username)
        return updated

    async def delete_entity(self, identity: Identity, entity_id: UUID) -> None:
        """Logical delete: flag the record canceled, never remove it."""
        self._require_write_access(identity)
        entity = await self.get_entity(identity, entity_id)

        entity.cancel(identity.username)
        await self._repository.update(entity)
        logger.info("Entity %s canceled by %s", entity_id, identity.username)

    def _require_write_access(self, identity: Identity) -> None:
        if self._write_roles and not identity.has_any_role(*self._write_roles):
            raise ForbiddenError(
                f"User '{identity.username}' is not allowed to modify entities"
            )


def _clean_fields(data: EntityWrite) -> tuple[str, str]:
    """Trim code and description, rejecting blank or over-long values."""
    code = (data.code or "").strip()
    description = (data.description or "").strip()

    issues = []
    if not code:
        issues.append(FieldIssue("code", "Code is required"))
    elif len(code) > CODE_MAX_LENGTH:
        issues.append(
            FieldIssue("code", f"Code must not exceed {CODE_MAX_LENGTH} characters")
        )
    if not description:
        issues.append(FieldIssue("description", "Description is required"))
    elif len(description) > DESCRIPTION_MAX_LENGTH:
        issues.append(
            FieldIssue(
                "description",
                f"Description must not exceed {DESCRIPTION_MAX_LENGTH} characters",
            )
        )
    if issues:
        raise ValidationFailedError("Request validation failed", issues)
    return code, description


def _conflict(exc: DuplicateEntityError) -> BusinessRuleViolationError:
    return BusinessRuleViolationError(
        f"Conflict: an active {exc.entity_type.lower()} with {exc.field} "
        f"'{exc.value}' already exists",
        conflict=True,
    )
