from .entity import (
    EntityCreate,
    EntityPageResponse,
    EntityResponse,
    EntityUpdate,
    EntityWrite,
)
from .error import ErrorDetail, ErrorResponse

__all__ = [
    "EntityCreate",
    "EntityPageResponse",
    "EntityResponse",
    "EntityUpdate",
    "EntityWrite",
    "ErrorDetail",
    "ErrorResponse",
]
