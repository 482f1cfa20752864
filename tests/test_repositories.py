"""Tests for repositories against a real database session."""
from uuid import uuid4

import pytest
import pytest_asyncio

from issuetrack.models.issue import Issue
from issuetrack.models.workflow import WorkflowStateType
from issuetrack.models.workspace import MemberRole
from issuetrack.repositories import (
    IssueLabelRepository,
    IssueRepository,
    LabelRepository,
    TeamRepository,
    UserRepository,
    WorkflowStateRepository,
    WorkspaceMemberRepository,
    WorkspaceRepository,
)


# ============================================================================
# Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def seeded(database, make_user):
    """A user, a workspace, a team with one backlog state."""
    user = await make_user("Seed")
    async with database.session() as session:
        workspace = await WorkspaceRepository(session).create("Seed", "seed", user.id)
        await WorkspaceMemberRepository(session).create(workspace.id, user.id, MemberRole.OWNER)
        team = await TeamRepository(session).create(workspace.id, "Seed team", "SEED")
        state = await WorkflowStateRepository(session).create(
            team.id, "Backlog", "#000000", WorkflowStateType.BACKLOG, 0
        )
    return {"user": user, "workspace": workspace, "team": team, "state": state}


async def _insert_issue(session, seeded, number: int, sort_order: float):
    return await IssueRepository(session).create(
        team_id=seeded["team"].id,
        number=number,
        identifier=f"SEED-{number}",
        title=f"Issue {number}",
        description=None,
        workflow_state_id=seeded["state"].id,
        priority=0,
        assignee_id=None,
        creator_id=seeded["user"].id,
        due_date=None,
        estimate=None,
        sort_order=sort_order,
    )


# ============================================================================
# Users
# ============================================================================


@pytest.mark.asyncio
async def test_get_user_by_email_ignores_case(database, make_user):
    user = await make_user()

    async with database.session() as session:
        found = await UserRepository(session).get_by_email(user.email.upper())

    assert found is not None
    assert found.id == user.id


# ============================================================================
# Teams
# ============================================================================


@pytest.mark.asyncio
async def test_increment_issue_counter(database, seeded):
    async with database.session() as session:
        repo = TeamRepository(session)
        first = await repo.increment_issue_counter(seeded["team"].id)
        second = await repo.increment_issue_counter(seeded["team"].id)

    assert first.number == 1
    assert second.number == 2
    assert second.team_identifier == "SEED"
    assert second.workspace_id == seeded["workspace"].id


@pytest.mark.asyncio
async def test_increment_counter_of_unknown_team(database):
    async with database.session() as session:
        assert await TeamRepository(session).increment_issue_counter(uuid4()) is None


@pytest.mark.asyncio
async def test_counter_increment_rolls_back(database, seeded):
    with pytest.raises(RuntimeError):
        async with database.session() as session:
            await TeamRepository(session).increment_issue_counter(seeded["team"].id)
            raise RuntimeError("abort")

    async with database.session() as session:
        team = await TeamRepository(session).get_by_id(seeded["team"].id)

    assert team.issue_counter == 0


# ============================================================================
# Workflow states
# ============================================================================


@pytest.mark.asyncio
async def test_state_lookups(database, seeded):
    team_id = seeded["team"].id
    async with database.session() as session:
        repo = WorkflowStateRepository(session)
        started = await repo.create(team_id, "Doing", "#ffffff", WorkflowStateType.STARTED, 1)

        assert (await repo.first_of_type(team_id, WorkflowStateType.BACKLOG)).id == seeded["state"].id
        assert await repo.first_of_type(team_id, WorkflowStateType.COMPLETED) is None
        assert await repo.ids_of_type(team_id, WorkflowStateType.STARTED) == [started.id]
        assert await repo.next_position(team_id) == 2
        assert await repo.get_for_team(started.id, uuid4()) is None
        assert [s.name for s in await repo.list_by_team(team_id)] == ["Backlog", "Doing"]


# ============================================================================
# Issues
# ============================================================================


@pytest.mark.asyncio
async def test_min_sort_order_minus_one(database, seeded):
    team_id = seeded["team"].id
    async with database.session() as session:
        repo = IssueRepository(session)
        assert await repo.min_sort_order_minus_one(team_id) == -1.0

        await _insert_issue(session, seeded, 1, 5.0)
        await _insert_issue(session, seeded, 2, -3.5)

        assert await repo.min_sort_order_minus_one(team_id) == -4.5


@pytest.mark.asyncio
async def test_get_by_identifier_is_scoped_to_team(database, seeded):
    async with database.session() as session:
        await _insert_issue(session, seeded, 1, -1.0)
        repo = IssueRepository(session)

        assert await repo.get_by_identifier(seeded["team"].id, "SEED-1") is not None
        assert await repo.get_by_identifier(uuid4(), "SEED-1") is None


@pytest.mark.asyncio
async def test_count_and_page_share_predicates(database, seeded):
    async with database.session() as session:
        for n in range(1, 6):
            await _insert_issue(session, seeded, n, float(-n))
        repo = IssueRepository(session)
        predicates = [Issue.team_id == seeded["team"].id, Issue.number > 1]

        total = await repo.count(predicates)
        page = await repo.list_page(predicates, order_by=[Issue.number.asc()], limit=2, offset=2)

    assert total == 4
    assert [issue.number for issue in page] == [4, 5]


# ============================================================================
# Labels
# ============================================================================


@pytest.mark.asyncio
async def test_labels_for_issues(database, seeded):
    async with database.session() as session:
        first = await _insert_issue(session, seeded, 1, -1.0)
        second = await _insert_issue(session, seeded, 2, -2.0)
        labels = LabelRepository(session)
        bug = await labels.create(seeded["workspace"].id, "bug", "#ff0000")
        api = await labels.create(seeded["workspace"].id, "api", "#00ff00")
        links = IssueLabelRepository(session)
        await links.attach_many(first.id, [bug.id, api.id])

        mapping = await links.labels_for_issues([first.id, second.id])
        assert await links.issue_ids_with_label(bug.id) == [first.id]
        assert await links.labels_for_issues([]) == {}

    assert [label.name for label in mapping[first.id]] == ["api", "bug"]
    assert mapping[second.id] == []


@pytest.mark.asyncio
async def test_list_in_workspace_filters_foreign_labels(database, seeded, make_user):
    other_owner = await make_user()
    async with database.session() as session:
        other = await WorkspaceRepository(session).create("Other", "other", other_owner.id)
        labels = LabelRepository(session)
        mine = await labels.create(seeded["workspace"].id, "mine", "#000000")
        theirs = await labels.create(other.id, "theirs", "#000000")

        found = await labels.list_in_workspace(seeded["workspace"].id, [mine.id, theirs.id])

    assert [label.id for label in found] == [mine.id]
