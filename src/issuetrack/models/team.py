"""
Team models.

A team lives inside a workspace, owns issues and workflow states, and carries
the short uppercase identifier used in issue identifiers (``ENG-42``).
"""

from uuid import UUID

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, UUIDMixin


class Team(Base, UUIDMixin, TimestampMixin):
    """
    A team within a workspace.

    Attributes:
        id: Unique team identifier (UUID)
        workspace_id: Parent workspace UUID
        name: Human-readable team name
        identifier: 2-5 uppercase letters, unique within the workspace
        issue_counter: Last issue number handed out; only ever incremented
    """

    __tablename__ = "teams"

    workspace_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    identifier: Mapped[str] = mapped_column(String(5), nullable=False)
    issue_counter: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("workspace_id", "identifier", name="uq_team_workspace_identifier"),
    )

    def __repr__(self) -> str:
        return f"<Team(id={self.id}, identifier='{self.identifier}', name='{self.name}')>"


class TeamMember(Base, UUIDMixin, TimestampMixin):
    """Membership of a user in a team."""

    __tablename__ = "team_members"

    team_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (UniqueConstraint("team_id", "user_id", name="uq_team_member_user"),)

    def __repr__(self) -> str:
        return f"<TeamMember(team_id={self.team_id}, user_id={self.user_id})>"
