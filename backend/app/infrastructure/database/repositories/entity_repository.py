"""Concrete repository implementation for Entity backed by SQLAlchemy."""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces import EntityRepository
from app.domain.entities import Entity, EntitySortField, PageRequest, SortDirection
from app.domain.exceptions import DuplicateEntityError, EntityNotFoundError
from app.infrastructure.database.models import EntityModel

logger = logging.getLogger(__name__)

_UNIQUE_CODE_INDEX = "uq_entities_code_active"

# Allow-listed sort keys → columns. Nothing else is ever placed in ORDER BY.
_SORT_COLUMNS = {
    EntitySortField.CODE: EntityModel.code,
    EntitySortField.DESCRIPTION: EntityModel.description,
    EntitySortField.CREATE_TIMESTAMP: EntityModel.create_date,
    EntitySortField.CREATE_ACTOR: EntityModel.create_user,
    EntitySortField.LAST_UPDATE_TIMESTAMP: EntityModel.last_update_date,
    EntitySortField.LAST_UPDATE_ACTOR: EntityModel.last_update_user,
    EntitySortField.CANCELED: EntityModel.canceled,
}


def _as_utc(value: datetime | None) -> datetime | None:
    """SQLite returns naive datetimes; everything stored is UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _is_code_conflict(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return _UNIQUE_CODE_INDEX in message or (
        "unique" in message and "code" in message
    )


class SQLAlchemyEntityRepository(EntityRepository):
    """Implements the EntityRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: EntityModel) -> Entity:
        """Map ORM model → domain entity."""
        return Entity(
            id=UUID(model.id),
            code=model.code,
            description=model.description,
            create_timestamp=_as_utc(model.create_date),
            create_actor=model.create_user,
            last_update_timestamp=_as_utc(model.last_update_date),
            last_update_actor=model.last_update_user,
            canceled=model.canceled,
        )

    def _to_model(self, entity: Entity) -> EntityModel:
        """Map domain entity → ORM model (for creation)."""
        return EntityModel(
            id=str(entity.id),
            code=entity.code,
            description=entity.description,
            create_date=entity.create_timestamp,
            create_user=entity.create_actor,
            last_update_date=entity.last_update_timestamp,
            last_update_user=entity.last_update_actor,
            canceled=entity.canceled,
        )

    async def _flush(self, entity: Entity) -> None:
        try:
            await self._session.flush()
        except IntegrityError as exc:
            if _is_code_conflict(exc):
                logger.info("Unique code constraint rejected code=%s", entity.code)
                raise DuplicateEntityError("Entity", "code", entity.code) from exc
            raise

    async def save(self, entity: Entity) -> Entity:
        model = self._to_model(entity)
        self._session.add(model)
        await self._flush(entity)
        return self._to_entity(model)

    async def get_by_id(self, entity_id: UUID) -> Entity | None:
        result = await self._session.get(EntityModel, str(entity_id))
        return self._to_entity(result) if result else None

    async def find_page(self, page_request: PageRequest) -> tuple[list[Entity], int]:
        stmt = select(EntityModel)
        count_stmt = select(func.count()).select_from(EntityModel)

        if not page_request.include_canceled:
            stmt = stmt.where(EntityModel.canceled.is_(False))
            count_stmt = count_stmt.where(EntityModel.canceled.is_(False))

        column = _SORT_COLUMNS[page_request.sort_field]
        order = column.desc() if page_request.sort_direction is SortDirection.DESC else column.asc()
        stmt = (
            stmt.order_by(order, EntityModel.id.asc())
            .offset(page_request.offset)
            .limit(page_request.size)
        )

        total = (await self._session.execute(count_stmt)).scalar_one()
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()], total

    async def update(self, entity: Entity) -> Entity:
        model = await self._session.get(EntityModel, str(entity.id))
        if model is None:
            raise EntityNotFoundError("Entity", entity.id)
        model.code = entity.code
        model.description = entity.description
        model.last_update_date = entity.last_update_timestamp
        model.last_update_user = entity.last_update_actor
        model.canceled = entity.canceled
        await self._flush(entity)
        return self._to_entity(model)

    async def exists_by_id(self, entity_id: UUID) -> bool:
        result = await self._session.execute(
            select(func.count())
            .select_from(EntityModel)
            .where(EntityModel.id == str(entity_id))
        )
        return result.scalar_one() > 0
