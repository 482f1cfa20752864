"""
Issue models.

- Issue: a unit of work in a team, numbered per team
- IssueLabel: join row attaching a label to an issue
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, UUIDMixin


class Issue(Base, UUIDMixin, TimestampMixin):
    """
    An issue.

    ``number`` comes from the owning team's counter and never changes, so
    ``identifier`` (``"{team.identifier}-{number}"``) is stable and unique.
    ``sort_order`` drives manual ordering; it is not unique.

    Attributes:
        id: Unique issue identifier (UUID)
        team_id: Owning team UUID
        number: Per-team sequential number
        identifier: Human readable key, e.g. ``ENG-12``
        title: Issue title
        description: Optional markdown body
        workflow_state_id: Current workflow state
        priority: 0 (none) .. 4
        assignee_id: Optional assigned user
        creator_id: User who created the issue
        due_date: Optional due date
        estimate: Optional estimate points
        sort_order: Manual ordering key, lower sorts first
    """

    __tablename__ = "issues"

    team_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
    )
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    identifier: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    workflow_state_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("workflow_states.id"),
        nullable=False,
    )
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    assignee_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    creator_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
    )
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    estimate: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    sort_order: Mapped[float] = mapped_column(Float, nullable=False)

    __table_args__ = (
        UniqueConstraint("team_id", "number", name="uq_issue_team_number"),
        Index("ix_issues_team_state", "team_id", "workflow_state_id"),
        Index("ix_issues_assignee", "assignee_id"),
    )

    def __repr__(self) -> str:
        return f"<Issue(id={self.id}, identifier='{self.identifier}', title='{self.title}')>"


class IssueLabel(Base):
    """Attachment of a label to an issue; the composite key allows one row per pair."""

    __tablename__ = "issue_labels"

    issue_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("issues.id", ondelete="CASCADE"),
        primary_key=True,
    )
    label_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("labels.id", ondelete="CASCADE"),
        primary_key=True,
    )

    def __repr__(self) -> str:
        return f"<IssueLabel(issue_id={self.issue_id}, label_id={self.label_id})>"
