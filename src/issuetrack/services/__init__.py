"""Services layer for issuetrack.

This module contains the business logic that coordinates repositories
inside database transactions.
"""
from issuetrack.services.authorization import AuthorizationGuard, TeamContext, WorkspaceContext
from issuetrack.services.comment_service import CommentService
from issuetrack.services.issue_creation import IssueCreationEngine, NewIssue
from issuetrack.services.issue_query import (
    IssueFilters,
    IssuePage,
    IssueQueryEngine,
    IssueSort,
    Pagination,
)
from issuetrack.services.issue_service import IssueService
from issuetrack.services.label_service import LabelService
from issuetrack.services.team_service import TeamService
from issuetrack.services.user_service import UserService
from issuetrack.services.workflow_states import WorkflowStateService
from issuetrack.services.workspace_service import WorkspaceService

__all__ = [
    "AuthorizationGuard",
    "WorkspaceContext",
    "TeamContext",
    "IssueCreationEngine",
    "NewIssue",
    "IssueQueryEngine",
    "IssueFilters",
    "IssueSort",
    "Pagination",
    "IssuePage",
    "IssueService",
    "LabelService",
    "TeamService",
    "UserService",
    "WorkflowStateService",
    "WorkspaceService",
    "CommentService",
]
