"""
Workspace and membership models.

This module provides the multi-tenancy layer:
- Workspace: top-level tenant boundary that owns teams and labels
- WorkspaceMember: a user's membership and role inside a workspace
"""

from enum import Enum
from uuid import UUID

from sqlalchemy import Enum as SQLEnum
from sqlalchemy import ForeignKey, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, UUIDMixin


class MemberRole(str, Enum):
    """Roles within a workspace."""

    OWNER = "owner"  # Full control, can delete the workspace
    ADMIN = "admin"  # Can manage settings, members and teams
    MEMBER = "member"  # Can work with teams, issues and labels


class Workspace(Base, UUIDMixin, TimestampMixin):
    """
    A workspace is the tenant boundary.

    Deleting a workspace cascades to its members, teams (and through them
    issues and workflow states) and labels.

    Attributes:
        id: Unique workspace identifier (UUID)
        name: Human-readable workspace name
        slug: URL-friendly identifier, globally unique
        owner_id: User who created the workspace
    """

    __tablename__ = "workspaces"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    owner_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Workspace(id={self.id}, name='{self.name}', slug='{self.slug}')>"


class WorkspaceMember(Base, UUIDMixin, TimestampMixin):
    """
    Membership of a user in a workspace.

    The creator of a workspace gets an ``owner`` row in the same transaction
    as the workspace. Nothing enforces that exactly one owner exists.
    """

    __tablename__ = "workspace_members"

    workspace_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[MemberRole] = mapped_column(
        SQLEnum(
            MemberRole,
            native_enum=False,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
        default=MemberRole.MEMBER,
    )

    __table_args__ = (
        UniqueConstraint("workspace_id", "user_id", name="uq_workspace_member_user"),
        Index("ix_workspace_members_workspace_role", "workspace_id", "role"),
    )

    def __repr__(self) -> str:
        return (
            f"<WorkspaceMember(id={self.id}, workspace_id={self.workspace_id}, "
            f"user_id={self.user_id}, role={self.role.value})>"
        )

    def can_manage_workspace(self) -> bool:
        """Check if this member can manage workspace settings and members."""
        return self.role in (MemberRole.OWNER, MemberRole.ADMIN)
