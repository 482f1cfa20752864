"""
Repositories for Team and TeamMember.

Besides plain CRUD this is where the per-team issue counter is advanced.
"""

from typing import List, NamedTuple, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from issuetrack.models.team import Team, TeamMember
from issuetrack.models.user import User


class AllocatedNumber(NamedTuple):
    """Result of advancing a team's issue counter."""

    number: int
    team_identifier: str
    workspace_id: UUID


class TeamRepository:
    """
    Repository for managing Team entities.

    Methods that query by ID return None when the team is not found
    rather than raising exceptions.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, workspace_id: UUID, name: str, identifier: str) -> Team:
        """
        Create a new team with its issue counter at zero.

        Raises:
            IntegrityError: If the identifier is taken in the workspace
        """
        team = Team(workspace_id=workspace_id, name=name, identifier=identifier, issue_counter=0)
        self.session.add(team)
        await self.session.flush()
        await self.session.refresh(team)
        return team

    async def get_by_id(self, team_id: UUID) -> Optional[Team]:
        stmt = select(Team).where(Team.id == team_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_in_workspace(self, team_id: UUID, workspace_id: UUID) -> Optional[Team]:
        """
        Retrieve a team only if it belongs to the given workspace.

        Args:
            team_id: The team UUID
            workspace_id: The workspace the team must belong to

        Returns:
            The team if found in that workspace, None otherwise
        """
        stmt = select(Team).where(and_(Team.id == team_id, Team.workspace_id == workspace_id))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_workspace(self, workspace_id: UUID) -> List[Team]:
        stmt = (
            select(Team)
            .where(Team.workspace_id == workspace_id)
            .order_by(Team.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, team: Team, name: Optional[str] = None) -> Team:
        if name is not None:
            team.name = name
        await self.session.flush()
        await self.session.refresh(team)
        return team

    async def delete(self, team: Team) -> None:
        """Delete a team; its issues, states and memberships cascade."""
        await self.session.delete(team)
        await self.session.flush()

    async def increment_issue_counter(self, team_id: UUID) -> Optional[AllocatedNumber]:
        """
        Advance the team's issue counter and read it back in one statement.

        The UPDATE takes the team row's write lock, so concurrent callers in
        other transactions wait until this transaction ends and then see the
        committed value. Two transactions can never read the same number.

        Args:
            team_id: The team UUID

        Returns:
            The allocated number with the team identifier and workspace, or
            None if the team does not exist
        """
        stmt = (
            update(Team)
            .where(Team.id == team_id)
            .values(issue_counter=Team.issue_counter + 1)
            .returning(Team.issue_counter, Team.identifier, Team.workspace_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        row = result.one_or_none()
        if row is None:
            return None
        return AllocatedNumber(number=row[0], team_identifier=row[1], workspace_id=row[2])


class TeamMemberRepository:
    """Repository for team memberships."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, team_id: UUID, user_id: UUID) -> TeamMember:
        """
        Add a user to a team.

        Raises:
            IntegrityError: If the user is already on the team
        """
        member = TeamMember(team_id=team_id, user_id=user_id)
        self.session.add(member)
        await self.session.flush()
        await self.session.refresh(member)
        return member

    async def get(self, team_id: UUID, user_id: UUID) -> Optional[TeamMember]:
        stmt = select(TeamMember).where(
            and_(TeamMember.team_id == team_id, TeamMember.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_with_users(self, team_id: UUID) -> List[Tuple[TeamMember, User]]:
        stmt = (
            select(TeamMember, User)
            .join(User, User.id == TeamMember.user_id)
            .where(TeamMember.team_id == team_id)
            .order_by(TeamMember.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]
