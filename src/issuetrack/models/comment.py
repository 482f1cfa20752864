"""Comment model."""

from uuid import UUID

from sqlalchemy import ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, UUIDMixin


class Comment(Base, UUIDMixin, TimestampMixin):
    """
    A comment on an issue.

    Only the author may edit or delete a comment. Comments go away with
    their issue.
    """

    __tablename__ = "comments"

    issue_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("issues.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (Index("ix_comments_issue_created", "issue_id", "created_at"),)

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, issue_id={self.issue_id})>"
