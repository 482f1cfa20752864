"""
Workspace authorization guard.

Every workspace-scoped operation first resolves the caller's membership and
role here. The guard only reads; a successful check yields a
``WorkspaceContext`` that is handed explicitly to the operation that follows.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional
from uuid import UUID

from issuetrack.errors import forbidden, not_found
from issuetrack.models.base import Database
from issuetrack.models.team import Team
from issuetrack.models.workspace import MemberRole, Workspace, WorkspaceMember
from issuetrack.repositories.team import TeamRepository
from issuetrack.repositories.workspace import WorkspaceMemberRepository, WorkspaceRepository
from issuetrack.utils.observability import record_authorization_denied

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkspaceContext:
    """An authorized caller inside a workspace."""

    workspace: Workspace
    member: WorkspaceMember

    @property
    def user_id(self) -> UUID:
        return self.member.user_id

    @property
    def role(self) -> MemberRole:
        return self.member.role


@dataclass(frozen=True)
class TeamContext:
    """A workspace context narrowed to one of the workspace's teams."""

    workspace: WorkspaceContext
    team: Team

    @property
    def user_id(self) -> UUID:
        return self.workspace.user_id


class AuthorizationGuard:
    """Resolves workspace membership and role for a user."""

    def __init__(self, db: Database):
        self.db = db

    async def authorize(
        self,
        user_id: UUID,
        workspace_id: UUID,
        required_roles: Optional[Iterable[MemberRole]] = None,
    ) -> WorkspaceContext:
        """
        Check that a user may act in a workspace.

        Args:
            user_id: The acting user
            workspace_id: The target workspace
            required_roles: Roles allowed to perform the operation; None
                means any member

        Returns:
            The workspace and the caller's membership

        Raises:
            AppError: NotFound if the workspace does not exist, Forbidden if
                the user is not a member or lacks a required role
        """
        async with self.db.session() as session:
            workspace = await WorkspaceRepository(session).get_by_id(workspace_id)
            if workspace is None:
                raise not_found("Workspace")

            member = await WorkspaceMemberRepository(session).get(workspace_id, user_id)

        if member is None:
            record_authorization_denied("not_member")
            logger.info(
                "Authorization denied: not a member",
                extra={"user_id": user_id, "workspace_id": workspace_id},
            )
            raise forbidden("Not a member of this workspace")

        if required_roles is not None and member.role not in set(required_roles):
            record_authorization_denied("insufficient_role")
            logger.info(
                f"Authorization denied: role {member.role.value} not permitted",
                extra={"user_id": user_id, "workspace_id": workspace_id},
            )
            raise forbidden("Insufficient permissions")

        return WorkspaceContext(workspace=workspace, member=member)

    async def resolve_team(self, context: WorkspaceContext, team_id: UUID) -> TeamContext:
        """
        Resolve a team inside an authorized workspace.

        Team membership is not required; workspace membership is enough.

        Raises:
            AppError: NotFound if the team is not part of the workspace
        """
        async with self.db.session() as session:
            team = await TeamRepository(session).get_in_workspace(team_id, context.workspace.id)

        if team is None:
            raise not_found("Team")
        return TeamContext(workspace=context, team=team)
