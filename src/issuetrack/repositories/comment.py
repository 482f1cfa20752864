"""Repository for Comment CRUD operations."""

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from issuetrack.models.comment import Comment
from issuetrack.models.user import User


class CommentRepository:
    """Repository for managing Comment entities."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, issue_id: UUID, user_id: UUID, body: str) -> Comment:
        comment = Comment(issue_id=issue_id, user_id=user_id, body=body)
        self.session.add(comment)
        await self.session.flush()
        await self.session.refresh(comment)
        return comment

    async def get_for_issue(self, comment_id: UUID, issue_id: UUID) -> Optional[Comment]:
        stmt = select(Comment).where(Comment.id == comment_id, Comment.issue_id == issue_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_with_authors(self, issue_id: UUID) -> List[Tuple[Comment, User]]:
        """
        List an issue's comments, oldest first, with their authors.

        Args:
            issue_id: The issue UUID

        Returns:
            (comment, author) pairs
        """
        stmt = (
            select(Comment, User)
            .join(User, User.id == Comment.user_id)
            .where(Comment.issue_id == issue_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        result = await self.session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]

    async def update(self, comment: Comment, body: str) -> Comment:
        comment.body = body
        await self.session.flush()
        await self.session.refresh(comment)
        return comment

    async def delete(self, comment: Comment) -> None:
        await self.session.delete(comment)
        await self.session.flush()
