"""
Workspace service.

Handles workspace lifecycle and membership. Role checks happen in the
authorization guard before these methods are called.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from issuetrack.errors import conflict, not_found
from issuetrack.models.base import Database
from issuetrack.models.user import User
from issuetrack.models.workspace import MemberRole, Workspace, WorkspaceMember
from issuetrack.repositories.user import UserRepository
from issuetrack.repositories.workspace import WorkspaceMemberRepository, WorkspaceRepository
from issuetrack.utils.slug import generate_slug, generate_unique_slug

logger = logging.getLogger(__name__)


class WorkspaceService:
    """Service for workspace CRUD and membership."""

    def __init__(self, db: Database):
        self.db = db

    async def create_workspace(self, owner_id: UUID, name: str) -> Workspace:
        """
        Create a workspace owned by ``owner_id``.

        The slug is derived from the name and suffixed with ``-2``, ``-3``...
        until unique. The owner membership is written in the same transaction.

        Raises:
            AppError: Conflict if a concurrent creation took the same slug
        """
        base_slug = generate_slug(name)
        try:
            async with self.db.session() as session:
                workspaces = WorkspaceRepository(session)
                taken = await workspaces.list_slugs_like(base_slug)
                slug = generate_unique_slug(base_slug, set(taken))

                workspace = await workspaces.create(name=name, slug=slug, owner_id=owner_id)
                await WorkspaceMemberRepository(session).create(
                    workspace.id, owner_id, MemberRole.OWNER
                )
        except IntegrityError:
            raise conflict("A workspace with this slug already exists, try again")

        logger.info(
            f"Created workspace {workspace.slug}",
            extra={"workspace_id": workspace.id, "user_id": owner_id},
        )
        return workspace

    async def list_workspaces(self, user_id: UUID) -> List[Tuple[Workspace, MemberRole]]:
        async with self.db.session() as session:
            return await WorkspaceRepository(session).list_for_user(user_id)

    async def update_workspace(self, workspace_id: UUID, name: Optional[str] = None) -> Workspace:
        async with self.db.session() as session:
            repo = WorkspaceRepository(session)
            workspace = await repo.get_by_id(workspace_id)
            if workspace is None:
                raise not_found("Workspace")
            return await repo.update(workspace, name=name)

    async def delete_workspace(self, workspace_id: UUID) -> None:
        """Delete a workspace and everything in it."""
        async with self.db.session() as session:
            repo = WorkspaceRepository(session)
            workspace = await repo.get_by_id(workspace_id)
            if workspace is None:
                raise not_found("Workspace")
            await repo.delete(workspace)

        logger.info(f"Deleted workspace {workspace_id}")

    async def add_member(
        self, workspace_id: UUID, user_id: UUID, role: MemberRole
    ) -> WorkspaceMember:
        """
        Add an existing user to a workspace.

        Raises:
            AppError: NotFound if the user does not exist, Conflict if the
                user is already a member
        """
        try:
            async with self.db.session() as session:
                if await UserRepository(session).get_by_id(user_id) is None:
                    raise not_found("User")

                members = WorkspaceMemberRepository(session)
                if await members.get(workspace_id, user_id) is not None:
                    raise conflict("User is already a member")
                member = await members.create(workspace_id, user_id, role)
        except IntegrityError:
            raise conflict("User is already a member")

        logger.info(
            f"Added member with role {role.value}",
            extra={"workspace_id": workspace_id, "user_id": user_id},
        )
        return member

    async def list_members(self, workspace_id: UUID) -> List[Tuple[WorkspaceMember, User]]:
        async with self.db.session() as session:
            return await WorkspaceMemberRepository(session).list_with_users(workspace_id)
