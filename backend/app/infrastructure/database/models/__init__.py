from .entity import EntityModel

__all__ = [
    "EntityModel",
]
