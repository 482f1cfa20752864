"""Database models for issuetrack."""

from .base import Base, Database, DatabaseConfig, TimestampMixin, UUIDMixin, open_database
from .comment import Comment
from .issue import Issue, IssueLabel
from .label import Label
from .team import Team, TeamMember
from .user import User
from .workflow import WorkflowState, WorkflowStateType
from .workspace import MemberRole, Workspace, WorkspaceMember

__all__ = [
    # Base
    "Base",
    "Database",
    "DatabaseConfig",
    "TimestampMixin",
    "UUIDMixin",
    "open_database",
    # Entities
    "User",
    "Workspace",
    "WorkspaceMember",
    "MemberRole",
    "Team",
    "TeamMember",
    "WorkflowState",
    "WorkflowStateType",
    "Issue",
    "IssueLabel",
    "Label",
    "Comment",
]
