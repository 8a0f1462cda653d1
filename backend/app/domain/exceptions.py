"""Domain-specific exceptions: framework-independent.

Each class corresponds to one failure kind of the error taxonomy; the
presentation layer maps them to wire codes and HTTP statuses.
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class FieldIssue:
    """A single field-level problem reported by validation."""

    field: str
    issue: str


class DomainError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class EntityNotFoundError(DomainError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: UUID | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class ValidationFailedError(DomainError):
    """Raised when input violates structural field constraints."""

    def __init__(self, message: str, details: list[FieldIssue] | None = None):
        self.details = list(details or [])
        super().__init__(message)


class BusinessRuleViolationError(DomainError):
    """Raised when a domain rule is broken.

    ``conflict`` marks uniqueness/duplication violations, which are
    reported with a 409 status instead of 400.
    """

    def __init__(self, message: str, *, conflict: bool = False):
        self.conflict = conflict
        super().__init__(message)


class DuplicateEntityError(DomainError):
    """Raised by persistence when a uniqueness constraint is violated."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


class ForbiddenError(DomainError):
    """Raised when the authenticated principal lacks a required role."""


class UnauthenticatedError(DomainError):
    """Raised when no valid credential accompanies the request."""
