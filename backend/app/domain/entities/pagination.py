"""Pagination and sorting value objects for entity listing."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from app.domain.exceptions import FieldIssue, ValidationFailedError

T = TypeVar("T")

# Largest row offset a 64-bit SQL integer can carry.
MAX_OFFSET = 2**63 - 1


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, raw: str) -> "SortDirection":
        try:
            return cls(raw.strip().lower())
        except ValueError:
            raise ValidationFailedError(
                f"Invalid sort direction: '{raw}'",
                [FieldIssue("sortDirection", "must be one of: asc, desc")],
            ) from None


class EntitySortField(str, Enum):
    """Allow-list of fields an entity listing may be sorted by.

    Checked before any query is built, so arbitrary names never reach the
    persistence layer.
    """

    CODE = "code"
    DESCRIPTION = "description"
    CREATE_TIMESTAMP = "createTimestamp"
    CREATE_ACTOR = "createActor"
    LAST_UPDATE_TIMESTAMP = "lastUpdateTimestamp"
    LAST_UPDATE_ACTOR = "lastUpdateActor"
    CANCELED = "canceled"

    @classmethod
    def allowed_names(cls) -> list[str]:
        return [member.value for member in cls]

    @classmethod
    def is_valid(cls, name: str) -> bool:
        return name in _SORT_FIELD_LOOKUP

    @classmethod
    def parse(cls, name: str) -> "EntitySortField":
        """Resolve a sort key, accepting wire-record names as aliases.

        Raises ValidationFailedError for anything outside the allow-list.
        """
        if isinstance(name, cls):
            return name
        member = _SORT_FIELD_LOOKUP.get(name)
        if member is None:
            allowed = ", ".join(cls.allowed_names())
            raise ValidationFailedError(
                f"Invalid sort field: '{name}'. Allowed fields: {allowed}",
                [FieldIssue("sortBy", f"must be one of: {allowed}")],
            )
        return member


# Wire-record field names accepted as aliases (case-sensitive).
_SORT_FIELD_ALIASES = {
    "createDate": EntitySortField.CREATE_TIMESTAMP,
    "createUser": EntitySortField.CREATE_ACTOR,
    "lastUpdateDate": EntitySortField.LAST_UPDATE_TIMESTAMP,
    "lastUpdateUser": EntitySortField.LAST_UPDATE_ACTOR,
}

_SORT_FIELD_LOOKUP: dict[str, EntitySortField] = {
    **{member.value: member for member in EntitySortField},
    **_SORT_FIELD_ALIASES,
}


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page index, page size and ordering of a list query."""

    page: int = 0
    size: int = 20
    sort_field: EntitySortField | str = EntitySortField.CODE
    sort_direction: SortDirection | str = SortDirection.ASC
    include_canceled: bool = True

    def __post_init__(self) -> None:
        # Raw strings are resolved here so no unchecked key outlives construction.
        object.__setattr__(self, "sort_field", EntitySortField.parse(self.sort_field))
        if not isinstance(self.sort_direction, SortDirection):
            object.__setattr__(
                self, "sort_direction", SortDirection.parse(self.sort_direction)
            )

        issues = []
        if self.page < 0:
            issues.append(FieldIssue("page", "must be greater than or equal to 0"))
        if self.size <= 0:
            issues.append(FieldIssue("size", "must be greater than 0"))
        elif self.page > 0 and self.page * self.size > MAX_OFFSET:
            issues.append(FieldIssue("page", "is too large for the requested page size"))
        if issues:
            raise ValidationFailedError("Invalid pagination parameters", issues)

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass(frozen=True)
class Page(Generic[T]):
    """One slice of a sorted result set plus the totals needed to page it."""

    content: list[T]
    page: int
    size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        if self.total_elements == 0:
            return 0
        return math.ceil(self.total_elements / self.size)
