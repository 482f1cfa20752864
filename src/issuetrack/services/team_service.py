"""
Team service.

A new team gets its creator as first member and the default workflow
states, all in the transaction that inserts the team.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from issuetrack.errors import conflict, forbidden, not_found, validation_error
from issuetrack.models.base import Database
from issuetrack.models.team import Team, TeamMember
from issuetrack.models.user import User
from issuetrack.repositories.team import TeamMemberRepository, TeamRepository
from issuetrack.repositories.workspace import WorkspaceMemberRepository
from issuetrack.services.authorization import TeamContext, WorkspaceContext
from issuetrack.services.workflow_states import seed_defaults
from issuetrack.utils.identifier import is_valid_team_identifier

logger = logging.getLogger(__name__)


class TeamService:
    """Service for team CRUD and membership."""

    def __init__(self, db: Database):
        self.db = db

    async def create_team(self, context: WorkspaceContext, name: str, identifier: str) -> Team:
        """
        Create a team in the caller's workspace.

        Args:
            context: Authorized workspace context of the creator
            name: Team name
            identifier: 2-5 uppercase letters, unique in the workspace

        Raises:
            AppError: Validation for a malformed identifier, Conflict if the
                identifier is taken
        """
        if not is_valid_team_identifier(identifier):
            raise validation_error(
                "Identifier must be 2-5 uppercase letters",
                {"identifier": ["Must be 2-5 uppercase letters"]},
            )

        workspace_id = context.workspace.id
        try:
            async with self.db.session() as session:
                teams = TeamRepository(session)
                team = await teams.create(workspace_id, name, identifier)
                await TeamMemberRepository(session).create(team.id, context.user_id)
                await seed_defaults(session, team.id)
        except IntegrityError:
            raise conflict("Identifier already exists in this workspace")

        logger.info(
            f"Created team {identifier}",
            extra={"workspace_id": workspace_id, "team_id": team.id, "user_id": context.user_id},
        )
        return team

    async def list_teams(self, workspace_id: UUID) -> List[Team]:
        async with self.db.session() as session:
            return await TeamRepository(session).list_by_workspace(workspace_id)

    async def update_team(self, team_id: UUID, name: Optional[str] = None) -> Team:
        async with self.db.session() as session:
            repo = TeamRepository(session)
            team = await repo.get_by_id(team_id)
            if team is None:
                raise not_found("Team")
            return await repo.update(team, name=name)

    async def delete_team(self, team_id: UUID) -> None:
        """Delete a team with its issues, states and memberships."""
        async with self.db.session() as session:
            repo = TeamRepository(session)
            team = await repo.get_by_id(team_id)
            if team is None:
                raise not_found("Team")
            await repo.delete(team)

        logger.info(f"Deleted team {team_id}")

    async def add_member(self, context: TeamContext, user_id: UUID) -> TeamMember:
        """
        Add a workspace member to a team.

        The acting user must be a workspace owner/admin or already on the
        team; the target must be a member of the workspace.

        Raises:
            AppError: Forbidden if either membership check fails, Conflict if
                the user is already on the team
        """
        team_id = context.team.id
        try:
            async with self.db.session() as session:
                team_members = TeamMemberRepository(session)
                if not context.workspace.member.can_manage_workspace():
                    if await team_members.get(team_id, context.user_id) is None:
                        raise forbidden("Only team members or workspace admins can add members")

                target = await WorkspaceMemberRepository(session).get(
                    context.workspace.workspace.id, user_id
                )
                if target is None:
                    raise forbidden("User is not a member of this workspace")

                if await team_members.get(team_id, user_id) is not None:
                    raise conflict("User is already a member of this team")
                member = await team_members.create(team_id, user_id)
        except IntegrityError:
            raise conflict("User is already a member of this team")

        logger.info("Added team member", extra={"team_id": team_id, "user_id": user_id})
        return member

    async def list_members(self, team_id: UUID) -> List[Tuple[TeamMember, User]]:
        async with self.db.session() as session:
            return await TeamMemberRepository(session).list_with_users(team_id)
