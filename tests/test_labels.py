"""Tests for workspace labels."""
from uuid import uuid4

import pytest

from tests.helpers import API


@pytest.fixture
def labels_url(workspace) -> str:
    return f"{API}/workspaces/{workspace['id']}/labels"


@pytest.mark.asyncio
async def test_label_crud(client, owner_headers, labels_url):
    created = await client.post(
        labels_url,
        json={"name": "bug", "color": "#ff0000", "description": "Something is broken"},
        headers=owner_headers,
    )
    assert created.status_code == 201
    label = created.json()["data"]
    assert label["description"] == "Something is broken"

    fetched = await client.get(f"{labels_url}/{label['id']}", headers=owner_headers)
    assert fetched.json()["data"]["name"] == "bug"

    updated = await client.patch(
        f"{labels_url}/{label['id']}", json={"color": "#00ff00"}, headers=owner_headers
    )
    assert updated.json()["data"]["color"] == "#00ff00"
    assert updated.json()["data"]["name"] == "bug"

    deleted = await client.delete(f"{labels_url}/{label['id']}", headers=owner_headers)
    assert deleted.json() == {"message": "Label deleted"}

    missing = await client.get(f"{labels_url}/{label['id']}", headers=owner_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_labels_are_listed_by_name(client, owner_headers, labels_url):
    for name in ("feature", "bug", "chore"):
        await client.post(labels_url, json={"name": name, "color": "#000000"}, headers=owner_headers)

    response = await client.get(labels_url, headers=owner_headers)

    assert [label["name"] for label in response.json()["data"]] == ["bug", "chore", "feature"]


@pytest.mark.asyncio
async def test_duplicate_label_name_conflicts(client, owner_headers, labels_url):
    await client.post(labels_url, json={"name": "bug", "color": "#ff0000"}, headers=owner_headers)

    response = await client.post(
        labels_url, json={"name": "bug", "color": "#0000ff"}, headers=owner_headers
    )

    assert response.status_code == 409
    assert response.json()["message"] == "A label with this name already exists"


@pytest.mark.asyncio
async def test_label_of_another_workspace_is_hidden(client, owner_headers, labels_url):
    other = await client.post(f"{API}/workspaces", json={"name": "Other"}, headers=owner_headers)
    other_labels = f"{API}/workspaces/{other.json()['data']['id']}/labels"
    created = await client.post(
        other_labels, json={"name": "bug", "color": "#ff0000"}, headers=owner_headers
    )

    response = await client.get(
        f"{labels_url}/{created.json()['data']['id']}", headers=owner_headers
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_unknown_label(client, owner_headers, labels_url):
    response = await client.delete(f"{labels_url}/{uuid4()}", headers=owner_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "Label not found"
