from .entity_repository import SQLAlchemyEntityRepository

__all__ = [
    "SQLAlchemyEntityRepository",
]
