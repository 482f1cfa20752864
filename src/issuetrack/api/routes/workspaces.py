"""Workspace endpoints: lifecycle and membership."""
import logging
from typing import List

from fastapi import APIRouter, Depends, status

from issuetrack.api.auth import get_current_user
from issuetrack.api.deps import get_workspace_service, require_admin, require_member, require_owner
from issuetrack.api.models import (
    DataResponse,
    MessageResponse,
    UserSummary,
    WorkspaceCreate,
    WorkspaceMemberCreate,
    WorkspaceMemberResponse,
    WorkspaceResponse,
    WorkspaceUpdate,
    WorkspaceWithRoleResponse,
)
from issuetrack.models.user import User
from issuetrack.models.workspace import MemberRole
from issuetrack.services import WorkspaceContext, WorkspaceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workspaces", tags=["workspaces"])


@router.post(
    "",
    response_model=DataResponse[WorkspaceResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create workspace",
)
async def create_workspace(
    body: WorkspaceCreate,
    user: User = Depends(get_current_user),
    workspaces: WorkspaceService = Depends(get_workspace_service),
) -> DataResponse[WorkspaceResponse]:
    """Create a workspace; the caller becomes its owner."""
    workspace = await workspaces.create_workspace(user.id, body.name)
    return DataResponse(data=WorkspaceResponse.model_validate(workspace))


@router.get(
    "",
    response_model=DataResponse[List[WorkspaceWithRoleResponse]],
    summary="List my workspaces",
)
async def list_workspaces(
    user: User = Depends(get_current_user),
    workspaces: WorkspaceService = Depends(get_workspace_service),
) -> DataResponse[List[WorkspaceWithRoleResponse]]:
    rows = await workspaces.list_workspaces(user.id)
    return DataResponse(
        data=[
            WorkspaceWithRoleResponse(**WorkspaceResponse.model_validate(ws).model_dump(), role=role)
            for ws, role in rows
        ]
    )


@router.get("/{workspace_id}", response_model=DataResponse[WorkspaceResponse])
async def get_workspace(
    context: WorkspaceContext = Depends(require_member),
) -> DataResponse[WorkspaceResponse]:
    return DataResponse(data=WorkspaceResponse.model_validate(context.workspace))


@router.patch("/{workspace_id}", response_model=DataResponse[WorkspaceResponse])
async def update_workspace(
    body: WorkspaceUpdate,
    context: WorkspaceContext = Depends(require_admin),
    workspaces: WorkspaceService = Depends(get_workspace_service),
) -> DataResponse[WorkspaceResponse]:
    """Rename a workspace (owner or admin)."""
    workspace = await workspaces.update_workspace(context.workspace.id, name=body.name)
    return DataResponse(data=WorkspaceResponse.model_validate(workspace))


@router.delete("/{workspace_id}", response_model=MessageResponse)
async def delete_workspace(
    context: WorkspaceContext = Depends(require_owner),
    workspaces: WorkspaceService = Depends(get_workspace_service),
) -> MessageResponse:
    """Delete a workspace and everything in it (owner only)."""
    await workspaces.delete_workspace(context.workspace.id)
    return MessageResponse(message="Workspace deleted")


@router.post(
    "/{workspace_id}/members",
    response_model=DataResponse[WorkspaceMemberResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_member(
    body: WorkspaceMemberCreate,
    context: WorkspaceContext = Depends(require_admin),
    workspaces: WorkspaceService = Depends(get_workspace_service),
) -> DataResponse[WorkspaceMemberResponse]:
    """Add an existing user to the workspace (owner or admin)."""
    member = await workspaces.add_member(
        context.workspace.id, body.user_id, MemberRole(body.role)
    )
    return DataResponse(data=WorkspaceMemberResponse.model_validate(member))


@router.get(
    "/{workspace_id}/members",
    response_model=DataResponse[List[WorkspaceMemberResponse]],
)
async def list_members(
    context: WorkspaceContext = Depends(require_member),
    workspaces: WorkspaceService = Depends(get_workspace_service),
) -> DataResponse[List[WorkspaceMemberResponse]]:
    rows = await workspaces.list_members(context.workspace.id)
    members = []
    for member, user in rows:
        response = WorkspaceMemberResponse.model_validate(member)
        response.user = UserSummary.model_validate(user)
        members.append(response)
    return DataResponse(data=members)
