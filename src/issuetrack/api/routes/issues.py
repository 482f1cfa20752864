"""Issue endpoints, scoped to a team and addressed by identifier."""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from issuetrack.api.deps import (
    get_issue_creation_engine,
    get_issue_query_engine,
    get_issue_service,
    require_team,
)
from issuetrack.api.models import (
    DataResponse,
    IssueCreate,
    IssueDetailResponse,
    IssueLabelAttach,
    IssueResponse,
    IssueUpdate,
    LabelSummary,
    MessageResponse,
    PageResponse,
)
from issuetrack.models.workflow import WorkflowStateType
from issuetrack.services import (
    IssueCreationEngine,
    IssueFilters,
    IssueQueryEngine,
    IssueService,
    IssueSort,
    NewIssue,
    Pagination,
    TeamContext,
)
from issuetrack.services.issue_query import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    SortDirection,
    SortField,
)

router = APIRouter(
    prefix="/workspaces/{workspace_id}/teams/{team_id}/issues",
    tags=["issues"],
)


@router.post(
    "",
    response_model=DataResponse[IssueResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create issue",
)
async def create_issue(
    body: IssueCreate,
    context: TeamContext = Depends(require_team),
    engine: IssueCreationEngine = Depends(get_issue_creation_engine),
) -> DataResponse[IssueResponse]:
    """
    Create an issue.

    The issue gets the team's next number, starts in the requested state or
    the team's backlog state, and sorts above every existing issue.
    """
    issue = await engine.create_issue(context.team.id, context.user_id, NewIssue(**body.model_dump()))
    return DataResponse(data=IssueResponse.model_validate(issue))


@router.get("", response_model=PageResponse[IssueResponse], summary="List issues")
async def list_issues(
    context: TeamContext = Depends(require_team),
    workflow_state_id: Optional[UUID] = Query(default=None, alias="workflowStateId"),
    priority: Optional[int] = Query(default=None, ge=0, le=4),
    assignee_id: Optional[UUID] = Query(default=None, alias="assigneeId"),
    state_type: Optional[WorkflowStateType] = Query(default=None, alias="stateType"),
    label_id: Optional[UUID] = Query(default=None, alias="labelId"),
    sort: SortField = Query(default=SortField.SORT_ORDER),
    order: SortDirection = Query(default=SortDirection.ASC),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, alias="pageSize"),
    engine: IssueQueryEngine = Depends(get_issue_query_engine),
) -> PageResponse[IssueResponse]:
    """List the team's issues with filters, sorting and pagination."""
    result = await engine.list_issues(
        context.team.id,
        IssueFilters(
            workflow_state_id=workflow_state_id,
            priority=priority,
            assignee_id=assignee_id,
            state_type=state_type,
            label_id=label_id,
        ),
        IssueSort(field=sort, direction=order),
        Pagination(page=page, page_size=page_size),
    )
    return PageResponse(
        data=[IssueResponse.model_validate(issue) for issue in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        has_more=result.has_more,
    )


@router.get("/{identifier}", response_model=DataResponse[IssueDetailResponse])
async def get_issue(
    identifier: str,
    context: TeamContext = Depends(require_team),
    issues: IssueService = Depends(get_issue_service),
) -> DataResponse[IssueDetailResponse]:
    """Get an issue by identifier, e.g. ``ENG-12``, with its labels."""
    issue, labels = await issues.get_issue(context.team.id, identifier)
    detail = IssueDetailResponse.model_validate(issue)
    detail.labels = [LabelSummary.model_validate(label) for label in labels]
    return DataResponse(data=detail)


@router.patch("/{identifier}", response_model=DataResponse[IssueResponse])
async def update_issue(
    identifier: str,
    body: IssueUpdate,
    context: TeamContext = Depends(require_team),
    issues: IssueService = Depends(get_issue_service),
) -> DataResponse[IssueResponse]:
    """Update the fields present in the body; explicit nulls clear optional fields."""
    issue = await issues.update_issue(context, identifier, body.model_dump(exclude_unset=True))
    return DataResponse(data=IssueResponse.model_validate(issue))


@router.delete("/{identifier}", response_model=MessageResponse)
async def delete_issue(
    identifier: str,
    context: TeamContext = Depends(require_team),
    issues: IssueService = Depends(get_issue_service),
) -> MessageResponse:
    await issues.delete_issue(context.team.id, identifier)
    return MessageResponse(message="Issue deleted")


@router.post(
    "/{identifier}/labels",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def attach_label(
    identifier: str,
    body: IssueLabelAttach,
    context: TeamContext = Depends(require_team),
    issues: IssueService = Depends(get_issue_service),
) -> MessageResponse:
    await issues.attach_label(context, identifier, body.label_id)
    return MessageResponse(message="Label attached")


@router.delete("/{identifier}/labels/{label_id}", response_model=MessageResponse)
async def detach_label(
    identifier: str,
    label_id: UUID,
    context: TeamContext = Depends(require_team),
    issues: IssueService = Depends(get_issue_service),
) -> MessageResponse:
    await issues.detach_label(context.team.id, identifier, label_id)
    return MessageResponse(message="Label detached")
