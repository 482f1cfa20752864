"""
Repositories for Workspace and WorkspaceMember.

This module provides async database operations for the tenancy layer:
workspaces, their slugs, and user memberships with roles.
"""

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from issuetrack.models.user import User
from issuetrack.models.workspace import MemberRole, Workspace, WorkspaceMember


class WorkspaceRepository:
    """
    Repository for managing Workspace entities.

    Methods that query by ID return None when the workspace is not found
    rather than raising exceptions.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, name: str, slug: str, owner_id: UUID) -> Workspace:
        """
        Create a new workspace.

        Args:
            name: Human-readable workspace name
            slug: URL-friendly unique identifier
            owner_id: User creating the workspace

        Returns:
            The newly created workspace

        Raises:
            IntegrityError: If slug already exists
        """
        workspace = Workspace(name=name, slug=slug, owner_id=owner_id)
        self.session.add(workspace)
        await self.session.flush()
        await self.session.refresh(workspace)
        return workspace

    async def get_by_id(self, workspace_id: UUID) -> Optional[Workspace]:
        stmt = select(Workspace).where(Workspace.id == workspace_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_slugs_like(self, base: str) -> List[str]:
        """
        List existing slugs equal to ``base`` or of the form ``base-<suffix>``.

        Args:
            base: Candidate slug

        Returns:
            Matching slugs
        """
        stmt = select(Workspace.slug).where(
            or_(Workspace.slug == base, Workspace.slug.like(f"{base}-%"))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_user(self, user_id: UUID) -> List[Tuple[Workspace, MemberRole]]:
        """
        List the workspaces a user belongs to, with the user's role in each.

        Args:
            user_id: The user UUID

        Returns:
            (workspace, role) pairs ordered by workspace creation time
        """
        stmt = (
            select(Workspace, WorkspaceMember.role)
            .join(WorkspaceMember, WorkspaceMember.workspace_id == Workspace.id)
            .where(WorkspaceMember.user_id == user_id)
            .order_by(Workspace.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]

    async def update(self, workspace: Workspace, name: Optional[str] = None) -> Workspace:
        """
        Update an existing workspace.

        Only provided fields will be updated.

        Args:
            workspace: Loaded workspace
            name: New name (optional)

        Returns:
            The updated workspace
        """
        if name is not None:
            workspace.name = name
        await self.session.flush()
        await self.session.refresh(workspace)
        return workspace

    async def delete(self, workspace: Workspace) -> None:
        """
        Delete a workspace.

        Members, teams, labels and everything under them go with it through
        the foreign key cascades.
        """
        await self.session.delete(workspace)
        await self.session.flush()


class WorkspaceMemberRepository:
    """Repository for workspace memberships."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        workspace_id: UUID,
        user_id: UUID,
        role: MemberRole = MemberRole.MEMBER,
    ) -> WorkspaceMember:
        """
        Add a user to a workspace.

        Raises:
            IntegrityError: If the user is already a member
        """
        member = WorkspaceMember(workspace_id=workspace_id, user_id=user_id, role=role)
        self.session.add(member)
        await self.session.flush()
        await self.session.refresh(member)
        return member

    async def get(self, workspace_id: UUID, user_id: UUID) -> Optional[WorkspaceMember]:
        """
        Retrieve a user's membership in a workspace.

        Args:
            workspace_id: The workspace UUID
            user_id: The user UUID

        Returns:
            The membership if found, None otherwise
        """
        stmt = select(WorkspaceMember).where(
            and_(
                WorkspaceMember.workspace_id == workspace_id,
                WorkspaceMember.user_id == user_id,
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_with_users(self, workspace_id: UUID) -> List[Tuple[WorkspaceMember, User]]:
        stmt = (
            select(WorkspaceMember, User)
            .join(User, User.id == WorkspaceMember.user_id)
            .where(WorkspaceMember.workspace_id == workspace_id)
            .order_by(WorkspaceMember.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]
