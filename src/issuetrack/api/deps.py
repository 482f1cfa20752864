"""
FastAPI dependencies.

Authorization runs as a dependency chain: the bearer token resolves the
user, the guard resolves the workspace membership, and team routes narrow
that to a team. Route handlers receive the resulting context as a plain
argument.
"""
from uuid import UUID

from fastapi import Depends

from issuetrack.api.auth import get_current_user
from issuetrack.api.state import get_database
from issuetrack.models.base import Database
from issuetrack.models.user import User
from issuetrack.models.workspace import MemberRole
from issuetrack.services import (
    AuthorizationGuard,
    CommentService,
    IssueCreationEngine,
    IssueQueryEngine,
    IssueService,
    LabelService,
    TeamContext,
    TeamService,
    UserService,
    WorkflowStateService,
    WorkspaceContext,
    WorkspaceService,
)


def get_guard(db: Database = Depends(get_database)) -> AuthorizationGuard:
    return AuthorizationGuard(db)


def require_workspace_member(*roles: MemberRole):
    """
    Create a dependency that authorizes the caller in ``{workspace_id}``.

    Args:
        *roles: Roles allowed through; none means any member

    Returns:
        Dependency resolving to a WorkspaceContext
    """
    required = roles or None

    async def workspace_checker(
        workspace_id: UUID,
        user: User = Depends(get_current_user),
        guard: AuthorizationGuard = Depends(get_guard),
    ) -> WorkspaceContext:
        return await guard.authorize(user.id, workspace_id, required)

    return workspace_checker


def require_team_member(*roles: MemberRole):
    """Like ``require_workspace_member``, then resolve ``{team_id}`` in that workspace."""
    workspace_dependency = require_workspace_member(*roles)

    async def team_checker(
        team_id: UUID,
        context: WorkspaceContext = Depends(workspace_dependency),
        guard: AuthorizationGuard = Depends(get_guard),
    ) -> TeamContext:
        return await guard.resolve_team(context, team_id)

    return team_checker


require_member = require_workspace_member()
require_admin = require_workspace_member(MemberRole.OWNER, MemberRole.ADMIN)
require_owner = require_workspace_member(MemberRole.OWNER)

require_team = require_team_member()
require_team_admin = require_team_member(MemberRole.OWNER, MemberRole.ADMIN)


# Service providers
def get_user_service(db: Database = Depends(get_database)) -> UserService:
    return UserService(db)


def get_workspace_service(db: Database = Depends(get_database)) -> WorkspaceService:
    return WorkspaceService(db)


def get_team_service(db: Database = Depends(get_database)) -> TeamService:
    return TeamService(db)


def get_workflow_state_service(db: Database = Depends(get_database)) -> WorkflowStateService:
    return WorkflowStateService(db)


def get_label_service(db: Database = Depends(get_database)) -> LabelService:
    return LabelService(db)


def get_issue_service(db: Database = Depends(get_database)) -> IssueService:
    return IssueService(db)


def get_issue_creation_engine(db: Database = Depends(get_database)) -> IssueCreationEngine:
    return IssueCreationEngine(db)


def get_issue_query_engine(db: Database = Depends(get_database)) -> IssueQueryEngine:
    return IssueQueryEngine(db)


def get_comment_service(db: Database = Depends(get_database)) -> CommentService:
    return CommentService(db)
