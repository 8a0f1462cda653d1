"""Unit tests for the paging value objects and the sort allow-list."""

import pytest

from app.domain.entities import EntitySortField, Page, PageRequest, SortDirection
from app.domain.entities.pagination import MAX_OFFSET
from app.domain.exceptions import ValidationFailedError

ALLOWED = [
    "code",
    "description",
    "createTimestamp",
    "createActor",
    "lastUpdateTimestamp",
    "lastUpdateActor",
    "canceled",
]


@pytest.mark.parametrize("name", ALLOWED)
def test_every_allowed_sort_field_is_accepted(name: str):
    request = PageRequest(page=0, size=20, sort_field=name)
    assert request.sort_field.value == name


@pytest.mark.parametrize(
    "alias, expected",
    [
        ("createDate", EntitySortField.CREATE_TIMESTAMP),
        ("createUser", EntitySortField.CREATE_ACTOR),
        ("lastUpdateDate", EntitySortField.LAST_UPDATE_TIMESTAMP),
        ("lastUpdateUser", EntitySortField.LAST_UPDATE_ACTOR),
    ],
)
def test_wire_field_names_are_aliases(alias: str, expected: EntitySortField):
    assert EntitySortField.parse(alias) is expected


@pytest.mark.parametrize("name", ["password", "id; DROP TABLE entities", "Code", "", "create_date"])
def test_unknown_sort_field_is_rejected(name: str):
    with pytest.raises(ValidationFailedError) as exc_info:
        PageRequest(page=0, size=20, sort_field=name)

    assert exc_info.value.details[0].field == "sortBy"
    assert not EntitySortField.is_valid(name)


def test_sort_direction_is_case_insensitive():
    assert PageRequest(sort_direction="DESC").sort_direction is SortDirection.DESC
    assert PageRequest(sort_direction="asc").sort_direction is SortDirection.ASC


def test_invalid_sort_direction_is_rejected():
    with pytest.raises(ValidationFailedError) as exc_info:
        PageRequest(sort_direction="sideways")
    assert exc_info.value.details[0].field == "sortDirection"


def test_defaults():
    request = PageRequest()
    assert request.page == 0
    assert request.size == 20
    assert request.sort_field is EntitySortField.CODE
    assert request.sort_direction is SortDirection.ASC
    assert request.include_canceled is True


def test_negative_page_and_zero_size_are_rejected():
    with pytest.raises(ValidationFailedError) as exc_info:
        PageRequest(page=-1, size=0)
    assert {d.field for d in exc_info.value.details} == {"page", "size"}


def test_offset():
    assert PageRequest(page=3, size=7).offset == 21


def test_page_beyond_addressable_offset_is_rejected():
    with pytest.raises(ValidationFailedError) as exc_info:
        PageRequest(page=10**17, size=100)
    assert [d.field for d in exc_info.value.details] == ["page"]

    assert PageRequest(page=MAX_OFFSET, size=1).offset == MAX_OFFSET


@pytest.mark.parametrize(
    "total, size, pages",
    [(0, 20, 0), (1, 20, 1), (20, 20, 1), (21, 20, 2), (5, 2, 3)],
)
def test_total_pages(total: int, size: int, pages: int):
    assert Page(content=[], page=0, size=size, total_elements=total).total_pages == pages
