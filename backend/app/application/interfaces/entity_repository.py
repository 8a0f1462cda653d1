"""Abstract repository interface (port) for Entity persistence."""

from abc import ABC, abstractmethod
from uuid import UUID

from app.domain.entities import Entity, PageRequest


class EntityRepository(ABC):
    """Port for entity persistence: implemented in the infrastructure layer.

    Accepts and returns domain records only. The sort field of a
    PageRequest is already allow-listed by the caller and is not re-checked.
    Implementations raise DuplicateEntityError when a uniqueness constraint
    rejects a write.
    """

    @abstractmethod
    async def save(self, entity: Entity) -> Entity:
        """Insert a new record and return it."""
        ...

    @abstractmethod
    async def get_by_id(self, entity_id: UUID) -> Entity | None:
        """Retrieve a single record by id, canceled or not."""
        ...

    @abstractmethod
    async def find_page(self, page_request: PageRequest) -> tuple[list[Entity], int]:
        """Return one sorted slice and the total number of matching records."""
        ...

    @abstractmethod
    async def update(self, entity: Entity) -> Entity:
        """Write the mutable fields of an existing record."""
        ...

    @abstractmethod
    async def exists_by_id(self, entity_id: UUID) -> bool:
        """Check whether a record with this id exists."""
        ...
