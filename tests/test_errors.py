"""Tests for the error taxonomy and the HTTP error envelope."""
import pytest

from issuetrack.api.app import validation_details
from issuetrack.errors import (
    AppError,
    ErrorKind,
    conflict,
    forbidden,
    internal_error,
    not_found,
    status_code_for,
    unauthorized,
    validation_error,
)
from tests.helpers import API


@pytest.mark.parametrize(
    "error,status,kind",
    [
        (not_found("Issue"), 404, "NotFoundError"),
        (validation_error("Bad input"), 400, "ValidationError"),
        (unauthorized(), 401, "UnauthorizedError"),
        (forbidden(), 403, "ForbiddenError"),
        (conflict("Taken"), 409, "ConflictError"),
        (internal_error(), 500, "InternalServerError"),
    ],
)
def test_error_kinds_map_to_status(error, status, kind):
    assert error.status_code == status
    assert error.to_dict()["error"] == kind
    assert error.to_dict()["statusCode"] == status


def test_every_kind_has_a_status():
    for kind in ErrorKind:
        assert 400 <= status_code_for(kind) <= 599


def test_not_found_message():
    assert not_found("Workflow state").message == "Workflow state not found"


def test_details_only_when_present():
    assert "details" not in conflict("Taken").to_dict()

    error = validation_error("Bad input", {"title": ["Required"]})
    assert error.to_dict() == {
        "error": "ValidationError",
        "message": "Bad input",
        "statusCode": 400,
        "details": {"title": ["Required"]},
    }


def test_app_error_is_an_exception():
    with pytest.raises(AppError) as exc_info:
        raise forbidden("Nope")
    assert str(exc_info.value) == "Nope"


def test_validation_details_groups_by_field():
    errors = [
        {"loc": ("body", "title"), "msg": "Field required"},
        {"loc": ("body", "labelIds", 0), "msg": "Input should be a valid UUID"},
        {"loc": ("body", "title"), "msg": "Too short"},
        {"loc": ("body", "body"), "msg": "String should have at least 1 character"},
        {"loc": ("query", "pageSize"), "msg": "Too large"},
        {"loc": ("body",), "msg": "Invalid JSON"},
    ]

    assert validation_details(errors) == {
        "title": ["Field required", "Too short"],
        "body": ["String should have at least 1 character"],
        "labelIds.0": ["Input should be a valid UUID"],
        "pageSize": ["Too large"],
        "_root": ["Invalid JSON"],
    }


@pytest.mark.asyncio
async def test_malformed_json_body(client, owner_headers):
    response = await client.post(
        f"{API}/workspaces",
        content=b"{not json",
        headers={**owner_headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "ValidationError"
    assert body["statusCode"] == 400
    assert body["details"]


@pytest.mark.asyncio
async def test_error_envelope_shape(client, owner_headers):
    response = await client.get(f"{API}/workspaces/00000000-0000-0000-0000-000000000000", headers=owner_headers)

    assert response.status_code == 404
    assert response.json() == {
        "error": "NotFoundError",
        "message": "Workspace not found",
        "statusCode": 404,
    }
