# tests/test_service.py

from __future__ import annotations

import asyncio

import pytest
from fastapi import HTTPException

from core.errors import describe_validation_errors
from resources import service
from resources.repository import GOALS, TASKS, InvalidIdentifierError, StoreError


@pytest.mark.parametrize("raw,expected", [("1", 1), ("42", 42), (" 7 ", 7), (str(2**63 - 1), 2**63 - 1)])
def test_parse_resource_id_accepts_positive_integers(raw: str, expected: int) -> None:
    assert service.parse_resource_id(raw, kind=TASKS) == expected


@pytest.mark.parametrize("raw", ["", "0", "-3", "+3", "abc", "1e3", "١٢", str(2**63)])
def test_parse_resource_id_rejects_everything_else(raw: str) -> None:
    with pytest.raises(InvalidIdentifierError):
        service.parse_resource_id(raw, kind=GOALS)


class _FailingRepo:
    kind = GOALS

    async def list_all(self):
        raise StoreError("connection reset by peer")


def test_store_failure_surfaces_as_500_with_message() -> None:
    with pytest.raises(HTTPException) as excinfo:
        asyncio.run(service.list_resources(_FailingRepo()))
    assert excinfo.value.status_code == 500
    assert excinfo.value.detail == "Goal store operation failed: connection reset by peer"


def test_describe_missing_and_invalid_fields() -> None:
    errors = [
        {"type": "missing", "loc": ("body", "name")},
        {"type": "string_too_short", "loc": ("body", "dueDate")},
        {"type": "string_type", "loc": ("body", "description")},
    ]
    assert describe_validation_errors(errors) == (
        "Missing required fields: name, dueDate; Invalid fields: description"
    )


def test_describe_missing_body() -> None:
    assert describe_validation_errors([{"type": "missing", "loc": ("body",)}]) == "Request body is required."


def test_describe_non_body_errors() -> None:
    assert describe_validation_errors([{"type": "int_parsing", "loc": ("query", "limit")}]) == (
        "Invalid request parameters."
    )
