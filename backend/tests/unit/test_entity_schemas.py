"""Unit tests for the Entity request/response DTOs."""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError

from app.application.schemas import EntityCreate, EntityPageResponse, EntityResponse


def test_create_strips_whitespace():
    data = EntityCreate(code="  ABC ", description="\tSome text\n")
    assert data.code == "ABC"
    assert data.description == "Some text"


@pytest.mark.parametrize(
    "payload",
    [
        {"description": "missing code"},
        {"code": "X"},
        {"code": "   ", "description": "blank code"},
        {"code": "X", "description": ""},
        {"code": "C" * 51, "description": "too long"},
        {"code": "X", "description": "D" * 256},
    ],
)
def test_create_rejects_invalid_payloads(payload: dict):
    with pytest.raises(ValidationError):
        EntityCreate(**payload)


def test_length_limits_are_inclusive():
    data = EntityCreate(code="C" * 50, description="D" * 255)
    assert len(data.code) == 50
    assert len(data.description) == 255


def test_length_is_checked_after_trimming():
    data = EntityCreate(code=" " + "C" * 50 + " ", description="ok")
    assert data.code == "C" * 50


def test_response_serializes_wire_names():
    now = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    response = EntityResponse(
        id=uuid4(),
        code="A",
        description="B",
        create_date=now,
        create_user="alice",
        canceled=False,
    )

    body = response.model_dump(mode="json", by_alias=True)

    assert set(body) == {
        "id", "code", "description", "createDate", "createUser",
        "lastUpdateDate", "lastUpdateUser", "canceled",
    }
    assert body["createDate"].startswith("2026-01-02T03:04:05")
    assert body["lastUpdateDate"] is None


def test_page_response_serializes_wire_names():
    body = EntityPageResponse(
        content=[], page_number=0, page_size=20, total_elements=0, total_pages=0,
    ).model_dump(by_alias=True)

    assert body == {
        "content": [], "pageNumber": 0, "pageSize": 20, "totalElements": 0, "totalPages": 0,
    }
