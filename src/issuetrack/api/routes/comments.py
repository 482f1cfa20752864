"""Comment endpoints, addressed by issue id."""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from issuetrack.api.deps import get_comment_service, require_team
from issuetrack.api.models import (
    CommentCreate,
    CommentResponse,
    CommentUpdate,
    DataResponse,
    MessageResponse,
    UserSummary,
)
from issuetrack.services import CommentService, TeamContext

router = APIRouter(
    prefix="/workspaces/{workspace_id}/teams/{team_id}/issues/{issue_id}/comments",
    tags=["comments"],
)


@router.post(
    "",
    response_model=DataResponse[CommentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    issue_id: UUID,
    body: CommentCreate,
    context: TeamContext = Depends(require_team),
    comments: CommentService = Depends(get_comment_service),
) -> DataResponse[CommentResponse]:
    comment = await comments.create_comment(context.team.id, issue_id, context.user_id, body.body)
    return DataResponse(data=CommentResponse.model_validate(comment))


@router.get("", response_model=DataResponse[List[CommentResponse]])
async def list_comments(
    issue_id: UUID,
    context: TeamContext = Depends(require_team),
    comments: CommentService = Depends(get_comment_service),
) -> DataResponse[List[CommentResponse]]:
    """List comments oldest first, each with its author."""
    rows = await comments.list_comments(context.team.id, issue_id)
    data = []
    for comment, author in rows:
        response = CommentResponse.model_validate(comment)
        response.user = UserSummary.model_validate(author)
        data.append(response)
    return DataResponse(data=data)


@router.patch("/{comment_id}", response_model=DataResponse[CommentResponse])
async def update_comment(
    issue_id: UUID,
    comment_id: UUID,
    body: CommentUpdate,
    context: TeamContext = Depends(require_team),
    comments: CommentService = Depends(get_comment_service),
) -> DataResponse[CommentResponse]:
    """Edit a comment; only its author may."""
    comment = await comments.update_comment(
        context.team.id, issue_id, comment_id, context.user_id, body.body
    )
    return DataResponse(data=CommentResponse.model_validate(comment))


@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    issue_id: UUID,
    comment_id: UUID,
    context: TeamContext = Depends(require_team),
    comments: CommentService = Depends(get_comment_service),
) -> MessageResponse:
    """Delete a comment; only its author may."""
    await comments.delete_comment(context.team.id, issue_id, comment_id, context.user_id)
    return MessageResponse(message="Comment deleted")
