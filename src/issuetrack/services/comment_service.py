"""
Comment service.

Comments are addressed by issue id within a team. Anyone in the workspace
may comment; only the author may edit or delete.
"""

import logging
from typing import List, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from issuetrack.errors import forbidden, not_found
from issuetrack.models.base import Database
from issuetrack.models.comment import Comment
from issuetrack.models.user import User
from issuetrack.repositories.comment import CommentRepository
from issuetrack.repositories.issue import IssueRepository

logger = logging.getLogger(__name__)


async def _require_issue(session: AsyncSession, team_id: UUID, issue_id: UUID) -> None:
    if await IssueRepository(session).get_in_team(issue_id, team_id) is None:
        raise not_found("Issue")


class CommentService:
    """Service for issue comments."""

    def __init__(self, db: Database):
        self.db = db

    async def create_comment(
        self, team_id: UUID, issue_id: UUID, user_id: UUID, body: str
    ) -> Comment:
        async with self.db.session() as session:
            await _require_issue(session, team_id, issue_id)
            comment = await CommentRepository(session).create(issue_id, user_id, body)

        logger.info("Created comment", extra={"issue_id": issue_id, "user_id": user_id})
        return comment

    async def list_comments(self, team_id: UUID, issue_id: UUID) -> List[Tuple[Comment, User]]:
        """
        List an issue's comments, oldest first.

        Raises:
            AppError: NotFound if the issue does not exist in the team
        """
        async with self.db.session() as session:
            await _require_issue(session, team_id, issue_id)
            return await CommentRepository(session).list_with_authors(issue_id)

    async def update_comment(
        self, team_id: UUID, issue_id: UUID, comment_id: UUID, user_id: UUID, body: str
    ) -> Comment:
        """
        Edit a comment.

        Raises:
            AppError: NotFound for an unknown issue or comment, Forbidden if
                ``user_id`` is not the author
        """
        async with self.db.session() as session:
            await _require_issue(session, team_id, issue_id)
            repo = CommentRepository(session)
            comment = await repo.get_for_issue(comment_id, issue_id)
            if comment is None:
                raise not_found("Comment")
            if comment.user_id != user_id:
                raise forbidden("Only the author can edit this comment")
            return await repo.update(comment, body)

    async def delete_comment(
        self, team_id: UUID, issue_id: UUID, comment_id: UUID, user_id: UUID
    ) -> None:
        async with self.db.session() as session:
            await _require_issue(session, team_id, issue_id)
            repo = CommentRepository(session)
            comment = await repo.get_for_issue(comment_id, issue_id)
            if comment is None:
                raise not_found("Comment")
            if comment.user_id != user_id:
                raise forbidden("Only the author can delete this comment")
            await repo.delete(comment)
