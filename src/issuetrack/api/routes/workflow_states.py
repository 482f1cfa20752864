"""Workflow state endpoints, scoped to a team."""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from issuetrack.api.deps import get_workflow_state_service, require_team
from issuetrack.api.models import (
    DataResponse,
    MessageResponse,
    WorkflowStateCreate,
    WorkflowStateResponse,
    WorkflowStateUpdate,
)
from issuetrack.services import TeamContext, WorkflowStateService

router = APIRouter(
    prefix="/workspaces/{workspace_id}/teams/{team_id}/states",
    tags=["workflow-states"],
)


@router.get("", response_model=DataResponse[List[WorkflowStateResponse]])
async def list_states(
    context: TeamContext = Depends(require_team),
    states: WorkflowStateService = Depends(get_workflow_state_service),
) -> DataResponse[List[WorkflowStateResponse]]:
    """List the team's workflow states by position."""
    rows = await states.list_states(context.team.id)
    return DataResponse(data=[WorkflowStateResponse.model_validate(s) for s in rows])


@router.post(
    "",
    response_model=DataResponse[WorkflowStateResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_state(
    body: WorkflowStateCreate,
    context: TeamContext = Depends(require_team),
    states: WorkflowStateService = Depends(get_workflow_state_service),
) -> DataResponse[WorkflowStateResponse]:
    state = await states.create_state(
        context.team.id, body.name, body.color, body.type, body.position
    )
    return DataResponse(data=WorkflowStateResponse.model_validate(state))


@router.patch("/{state_id}", response_model=DataResponse[WorkflowStateResponse])
async def update_state(
    state_id: UUID,
    body: WorkflowStateUpdate,
    context: TeamContext = Depends(require_team),
    states: WorkflowStateService = Depends(get_workflow_state_service),
) -> DataResponse[WorkflowStateResponse]:
    state = await states.update_state(
        context.team.id,
        state_id,
        name=body.name,
        color=body.color,
        type=body.type,
        position=body.position,
    )
    return DataResponse(data=WorkflowStateResponse.model_validate(state))


@router.delete("/{state_id}", response_model=MessageResponse)
async def delete_state(
    state_id: UUID,
    context: TeamContext = Depends(require_team),
    states: WorkflowStateService = Depends(get_workflow_state_service),
) -> MessageResponse:
    """Delete a state no issue is in."""
    await states.delete_state(context.team.id, state_id)
    return MessageResponse(message="Workflow state deleted")
