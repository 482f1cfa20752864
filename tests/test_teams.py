"""Tests for teams, team membership and workflow states."""
import pytest

from issuetrack.services.workflow_states import DEFAULT_WORKFLOW_STATES
from tests.helpers import API, auth_headers


# ============================================================================
# Teams
# ============================================================================


@pytest.mark.asyncio
async def test_new_team_gets_default_states(client, owner_headers, workspace, team):
    response = await client.get(
        f"{API}/workspaces/{workspace['id']}/teams/{team['id']}/states", headers=owner_headers
    )

    states = response.json()["data"]
    assert [s["name"] for s in states] == [row["name"] for row in DEFAULT_WORKFLOW_STATES]
    assert [s["type"] for s in states] == [
        "backlog", "unstarted", "started", "started", "completed", "cancelled",
    ]
    assert [s["position"] for s in states] == list(range(6))


@pytest.mark.asyncio
async def test_new_team_counter_starts_at_zero(team):
    assert team["identifier"] == "ENG"
    assert team["issueCounter"] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("identifier", ["E", "ENGINE", "eng", "EN1", "E-G"])
async def test_invalid_team_identifier(client, owner_headers, workspace, identifier):
    response = await client.post(
        f"{API}/workspaces/{workspace['id']}/teams",
        json={"name": "Bad", "identifier": identifier},
        headers=owner_headers,
    )

    assert response.status_code == 400
    assert "identifier" in response.json()["details"]


@pytest.mark.asyncio
async def test_duplicate_identifier_conflicts(client, owner_headers, workspace, team):
    response = await client.post(
        f"{API}/workspaces/{workspace['id']}/teams",
        json={"name": "Another", "identifier": "ENG"},
        headers=owner_headers,
    )

    assert response.status_code == 409
    assert response.json()["message"] == "Identifier already exists in this workspace"


@pytest.mark.asyncio
async def test_same_identifier_in_another_workspace(client, owner_headers, team):
    other = await client.post(f"{API}/workspaces", json={"name": "Other"}, headers=owner_headers)

    response = await client.post(
        f"{API}/workspaces/{other.json()['data']['id']}/teams",
        json={"name": "Engineering", "identifier": "ENG"},
        headers=owner_headers,
    )

    assert response.status_code == 201


@pytest.mark.asyncio
async def test_list_and_rename_team(client, owner_headers, workspace, team):
    teams_url = f"{API}/workspaces/{workspace['id']}/teams"

    renamed = await client.patch(
        f"{teams_url}/{team['id']}", json={"name": "Platform"}, headers=owner_headers
    )
    listing = await client.get(teams_url, headers=owner_headers)

    assert renamed.status_code == 200
    assert renamed.json()["data"]["name"] == "Platform"
    assert [t["name"] for t in listing.json()["data"]] == ["Platform"]


@pytest.mark.asyncio
async def test_delete_team_removes_its_issues(client, owner_headers, workspace, team, issues_url):
    await client.post(issues_url, json={"title": "Doomed"}, headers=owner_headers)

    response = await client.delete(
        f"{API}/workspaces/{workspace['id']}/teams/{team['id']}", headers=owner_headers
    )

    assert response.status_code == 200
    assert response.json() == {"message": "Team deleted"}
    gone = await client.get(issues_url, headers=owner_headers)
    assert gone.status_code == 404


# ============================================================================
# Team members
# ============================================================================


@pytest.mark.asyncio
async def test_creator_is_team_member(client, owner, owner_headers, workspace, team):
    response = await client.get(
        f"{API}/workspaces/{workspace['id']}/teams/{team['id']}/members", headers=owner_headers
    )

    assert [m["userId"] for m in response.json()["data"]] == [str(owner.id)]


@pytest.mark.asyncio
async def test_add_team_member(client, make_user, add_member, owner_headers, workspace, team):
    member = await make_user("Member")
    await add_member(member, "member")
    members_url = f"{API}/workspaces/{workspace['id']}/teams/{team['id']}/members"

    added = await client.post(members_url, json={"userId": str(member.id)}, headers=owner_headers)
    again = await client.post(members_url, json={"userId": str(member.id)}, headers=owner_headers)

    assert added.status_code == 201
    assert again.status_code == 409


@pytest.mark.asyncio
async def test_team_member_must_be_workspace_member(
    client, make_user, owner_headers, workspace, team
):
    outsider = await make_user("Outsider")

    response = await client.post(
        f"{API}/workspaces/{workspace['id']}/teams/{team['id']}/members",
        json={"userId": str(outsider.id)},
        headers=owner_headers,
    )

    assert response.status_code == 403
    assert response.json()["message"] == "User is not a member of this workspace"


@pytest.mark.asyncio
async def test_plain_member_off_team_cannot_add(client, make_user, add_member, workspace, team):
    member = await make_user("Member")
    other = await make_user("Other")
    await add_member(member, "member")
    await add_member(other, "member")

    response = await client.post(
        f"{API}/workspaces/{workspace['id']}/teams/{team['id']}/members",
        json={"userId": str(other.id)},
        headers=auth_headers(member),
    )

    assert response.status_code == 403


# ============================================================================
# Workflow states
# ============================================================================


@pytest.mark.asyncio
async def test_create_state_appends_by_default(client, owner_headers, workspace, team):
    states_url = f"{API}/workspaces/{workspace['id']}/teams/{team['id']}/states"

    response = await client.post(
        states_url,
        json={"name": "QA", "color": "#00ff00", "type": "started"},
        headers=owner_headers,
    )

    assert response.status_code == 201
    assert response.json()["data"]["position"] == 6


@pytest.mark.asyncio
async def test_duplicate_state_name_conflicts(client, owner_headers, workspace, team):
    states_url = f"{API}/workspaces/{workspace['id']}/teams/{team['id']}/states"

    response = await client.post(
        states_url,
        json={"name": "Backlog", "color": "#00ff00", "type": "backlog"},
        headers=owner_headers,
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_update_state(client, owner_headers, workspace, team, states):
    response = await client.patch(
        f"{API}/workspaces/{workspace['id']}/teams/{team['id']}/states/{states['Todo']['id']}",
        json={"name": "To do", "color": "#123456"},
        headers=owner_headers,
    )

    data = response.json()["data"]
    assert response.status_code == 200
    assert data["name"] == "To do"
    assert data["color"] == "#123456"
    assert data["type"] == "unstarted"


@pytest.mark.asyncio
async def test_delete_state_in_use_conflicts(client, owner_headers, workspace, team, states, issues_url):
    await client.post(issues_url, json={"title": "In backlog"}, headers=owner_headers)
    states_url = f"{API}/workspaces/{workspace['id']}/teams/{team['id']}/states"

    in_use = await client.delete(f"{states_url}/{states['Backlog']['id']}", headers=owner_headers)
    unused = await client.delete(f"{states_url}/{states['Canceled']['id']}", headers=owner_headers)

    assert in_use.status_code == 409
    assert unused.status_code == 200
    assert unused.json() == {"message": "Workflow state deleted"}


@pytest.mark.asyncio
async def test_without_backlog_state_creation_fails(
    client, owner_headers, workspace, team, states, issues_url
):
    states_url = f"{API}/workspaces/{workspace['id']}/teams/{team['id']}/states"
    await client.delete(f"{states_url}/{states['Backlog']['id']}", headers=owner_headers)

    response = await client.post(issues_url, json={"title": "Nowhere to go"}, headers=owner_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "No backlog workflow state found for this team"

    # An explicit state still works and the failed attempt consumed no number
    explicit = await client.post(
        issues_url,
        json={"title": "Somewhere", "workflowStateId": states["Todo"]["id"]},
        headers=owner_headers,
    )
    assert explicit.json()["data"]["identifier"] == "ENG-1"


@pytest.mark.asyncio
async def test_state_of_another_team_is_not_found(client, owner_headers, workspace, team, states):
    other = await client.post(
        f"{API}/workspaces/{workspace['id']}/teams",
        json={"name": "Design", "identifier": "DES"},
        headers=owner_headers,
    )

    response = await client.delete(
        f"{API}/workspaces/{workspace['id']}/teams/{other.json()['data']['id']}"
        f"/states/{states['Todo']['id']}",
        headers=owner_headers,
    )

    assert response.status_code == 404
