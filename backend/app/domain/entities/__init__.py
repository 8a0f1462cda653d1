from .entity import CODE_MAX_LENGTH, DESCRIPTION_MAX_LENGTH, Entity
from .identity import Identity
from .pagination import EntitySortField, Page, PageRequest, SortDirection

__all__ = [
    "CODE_MAX_LENGTH",
    "DESCRIPTION_MAX_LENGTH",
    "Entity",
    "Identity",
    "EntitySortField",
    "Page",
    "PageRequest",
    "SortDirection",
]
