"""Team endpoints, scoped to a workspace."""
from typing import List

from fastapi import APIRouter, Depends, status

from issuetrack.api.deps import get_team_service, require_member, require_team, require_team_admin
from issuetrack.api.models import (
    DataResponse,
    MessageResponse,
    TeamCreate,
    TeamMemberCreate,
    TeamMemberResponse,
    TeamResponse,
    TeamUpdate,
    UserSummary,
)
from issuetrack.services import TeamContext, TeamService, WorkspaceContext


router = APIRouter(prefix="/workspaces/{workspace_id}/teams", tags=["teams"])


@router.post(
    "",
    response_model=DataResponse[TeamResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create team",
)
async def create_team(
    body: TeamCreate,
    context: WorkspaceContext = Depends(require_member),
    teams: TeamService = Depends(get_team_service),
) -> DataResponse[TeamResponse]:
    """Create a team with the default workflow states; the caller joins it."""
    team = await teams.create_team(context, body.name, body.identifier)
    return DataResponse(data=TeamResponse.model_validate(team))


@router.get("", response_model=DataResponse[List[TeamResponse]])
async def list_teams(
    context: WorkspaceContext = Depends(require_member),
    teams: TeamService = Depends(get_team_service),
) -> DataResponse[List[TeamResponse]]:
    rows = await teams.list_teams(context.workspace.id)
    return DataResponse(data=[TeamResponse.model_validate(team) for team in rows])


@router.get("/{team_id}", response_model=DataResponse[TeamResponse])
async def get_team(context: TeamContext = Depends(require_team)) -> DataResponse[TeamResponse]:
    return DataResponse(data=TeamResponse.model_validate(context.team))


@router.patch("/{team_id}", response_model=DataResponse[TeamResponse])
async def update_team(
    body: TeamUpdate,
    context: TeamContext = Depends(require_team),
    teams: TeamService = Depends(get_team_service),
) -> DataResponse[TeamResponse]:
    team = await teams.update_team(context.team.id, name=body.name)
    return DataResponse(data=TeamResponse.model_validate(team))


@router.delete("/{team_id}", response_model=MessageResponse)
async def delete_team(
    context: TeamContext = Depends(require_team_admin),
    teams: TeamService = Depends(get_team_service),
) -> MessageResponse:
    """Delete a team with its issues (owner or admin)."""
    await teams.delete_team(context.team.id)
    return MessageResponse(message="Team deleted")


@router.post(
    "/{team_id}/members",
    response_model=DataResponse[TeamMemberResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_team_member(
    body: TeamMemberCreate,
    context: TeamContext = Depends(require_team),
    teams: TeamService = Depends(get_team_service),
) -> DataResponse[TeamMemberResponse]:
    member = await teams.add_member(context, body.user_id)
    return DataResponse(data=TeamMemberResponse.model_validate(member))


@router.get("/{team_id}/members", response_model=DataResponse[List[TeamMemberResponse]])
async def list_team_members(
    context: TeamContext = Depends(require_team),
    teams: TeamService = Depends(get_team_service),
) -> DataResponse[List[TeamMemberResponse]]:
    rows = await teams.list_members(context.team.id)
    members = []
    for member, user in rows:
        response = TeamMemberResponse.model_validate(member)
        response.user = UserSummary.model_validate(user)
        members.append(response)
    return DataResponse(data=members)
