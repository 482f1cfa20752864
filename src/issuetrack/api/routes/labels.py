"""Label endpoints, scoped to a workspace."""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from issuetrack.api.deps import get_label_service, require_member
from issuetrack.api.models import (
    DataResponse,
    LabelCreate,
    LabelResponse,
    LabelUpdate,
    MessageResponse,
)
from issuetrack.services import LabelService, WorkspaceContext

router = APIRouter(prefix="/workspaces/{workspace_id}/labels", tags=["labels"])


@router.post(
    "",
    response_model=DataResponse[LabelResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_label(
    body: LabelCreate,
    context: WorkspaceContext = Depends(require_member),
    labels: LabelService = Depends(get_label_service),
) -> DataResponse[LabelResponse]:
    label = await labels.create_label(
        context.workspace.id, body.name, body.color, body.description
    )
    return DataResponse(data=LabelResponse.model_validate(label))


@router.get("", response_model=DataResponse[List[LabelResponse]])
async def list_labels(
    context: WorkspaceContext = Depends(require_member),
    labels: LabelService = Depends(get_label_service),
) -> DataResponse[List[LabelResponse]]:
    rows = await labels.list_labels(context.workspace.id)
    return DataResponse(data=[LabelResponse.model_validate(label) for label in rows])


@router.get("/{label_id}", response_model=DataResponse[LabelResponse])
async def get_label(
    label_id: UUID,
    context: WorkspaceContext = Depends(require_member),
    labels: LabelService = Depends(get_label_service),
) -> DataResponse[LabelResponse]:
    label = await labels.get_label(context.workspace.id, label_id)
    return DataResponse(data=LabelResponse.model_validate(label))


@router.patch("/{label_id}", response_model=DataResponse[LabelResponse])
async def update_label(
    label_id: UUID,
    body: LabelUpdate,
    context: WorkspaceContext = Depends(require_member),
    labels: LabelService = Depends(get_label_service),
) -> DataResponse[LabelResponse]:
    label = await labels.update_label(
        context.workspace.id,
        label_id,
        name=body.name,
        color=body.color,
        description=body.description,
    )
    return DataResponse(data=LabelResponse.model_validate(label))


@router.delete("/{label_id}", response_model=MessageResponse)
async def delete_label(
    label_id: UUID,
    context: WorkspaceContext = Depends(require_member),
    labels: LabelService = Depends(get_label_service),
) -> MessageResponse:
    await labels.delete_label(context.workspace.id, label_id)
    return MessageResponse(message="Label deleted")
