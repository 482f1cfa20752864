"""Repository layer for issuetrack database operations."""

from .comment import CommentRepository
from .issue import IssueRepository
from .label import IssueLabelRepository, LabelRepository
from .team import TeamMemberRepository, TeamRepository
from .user import UserRepository
from .workflow_state import WorkflowStateRepository
from .workspace import WorkspaceMemberRepository, WorkspaceRepository

__all__ = [
    "UserRepository",
    "WorkspaceRepository",
    "WorkspaceMemberRepository",
    "TeamRepository",
    "TeamMemberRepository",
    "WorkflowStateRepository",
    "IssueRepository",
    "LabelRepository",
    "IssueLabelRepository",
    "CommentRepository",
]
