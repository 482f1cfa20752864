"""Tests for workspace lifecycle and membership."""
from uuid import uuid4

import pytest

from tests.helpers import API, auth_headers


@pytest.mark.asyncio
async def test_create_workspace(client, owner, owner_headers):
    response = await client.post(
        f"{API}/workspaces", json={"name": "My Workspace!"}, headers=owner_headers
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["name"] == "My Workspace!"
    assert data["slug"] == "my-workspace"
    assert data["ownerId"] == str(owner.id)


@pytest.mark.asyncio
async def test_slugs_are_suffixed_until_unique(client, owner_headers):
    slugs = []
    for _ in range(3):
        response = await client.post(f"{API}/workspaces", json={"name": "Acme"}, headers=owner_headers)
        slugs.append(response.json()["data"]["slug"])

    assert slugs == ["acme", "acme-2", "acme-3"]


@pytest.mark.asyncio
async def test_name_without_usable_characters(client, owner_headers):
    response = await client.post(f"{API}/workspaces", json={"name": "!!!"}, headers=owner_headers)

    assert response.status_code == 201
    assert response.json()["data"]["slug"] == "workspace"


@pytest.mark.asyncio
async def test_list_workspaces_includes_role(client, make_user, add_member, workspace):
    member = await make_user("Member")
    await add_member(member, "admin")

    response = await client.get(f"{API}/workspaces", headers=auth_headers(member))

    assert response.status_code == 200
    data = response.json()["data"]
    assert [(ws["id"], ws["role"]) for ws in data] == [(workspace["id"], "admin")]


@pytest.mark.asyncio
async def test_list_workspaces_excludes_others(client, make_user, workspace):
    stranger = await make_user("Stranger")

    response = await client.get(f"{API}/workspaces", headers=auth_headers(stranger))

    assert response.json()["data"] == []


@pytest.mark.asyncio
async def test_members_listing(client, owner, make_user, add_member, owner_headers, workspace):
    member = await make_user("Member")
    await add_member(member, "member")

    response = await client.get(f"{API}/workspaces/{workspace['id']}/members", headers=owner_headers)

    assert response.status_code == 200
    roles = {item["user"]["name"]: item["role"] for item in response.json()["data"]}
    assert roles == {"Owner": "owner", "Member": "member"}


@pytest.mark.asyncio
async def test_add_member_twice_conflicts(client, make_user, add_member, owner_headers, workspace):
    member = await make_user("Member")
    await add_member(member, "member")

    response = await client.post(
        f"{API}/workspaces/{workspace['id']}/members",
        json={"userId": str(member.id), "role": "admin"},
        headers=owner_headers,
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_add_unknown_user(client, owner_headers, workspace):
    response = await client.post(
        f"{API}/workspaces/{workspace['id']}/members",
        json={"userId": str(uuid4()), "role": "member"},
        headers=owner_headers,
    )

    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


@pytest.mark.asyncio
async def test_owner_role_cannot_be_granted(client, make_user, owner_headers, workspace):
    member = await make_user("Member")

    response = await client.post(
        f"{API}/workspaces/{workspace['id']}/members",
        json={"userId": str(member.id), "role": "owner"},
        headers=owner_headers,
    )

    assert response.status_code == 400
    assert "role" in response.json()["details"]


@pytest.mark.asyncio
async def test_delete_workspace_cascades(client, owner_headers, workspace, team, issues_url):
    await client.post(issues_url, json={"title": "Doomed"}, headers=owner_headers)

    response = await client.delete(f"{API}/workspaces/{workspace['id']}", headers=owner_headers)

    assert response.status_code == 200
    assert response.json() == {"message": "Workspace deleted"}

    gone = await client.get(f"{API}/workspaces/{workspace['id']}", headers=owner_headers)
    assert gone.status_code == 404

    listing = await client.get(f"{API}/workspaces", headers=owner_headers)
    assert listing.json()["data"] == []
