"""Pydantic models for API request/response validation."""
from datetime import datetime, timezone
from typing import Generic, List, Literal, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from issuetrack.models.workflow import WorkflowStateType
from issuetrack.models.workspace import MemberRole

T = TypeVar("T")


class ApiModel(BaseModel):
    """Base for every API model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# Envelopes
class DataResponse(ApiModel, Generic[T]):
    """Single-resource or list envelope."""

    data: T


class PageResponse(ApiModel, Generic[T]):
    """Paginated list envelope."""

    data: List[T]
    total: int
    page: int
    page_size: int
    has_more: bool


class MessageResponse(ApiModel):
    message: str


class ErrorResponse(ApiModel):
    """Error envelope returned for every failed request."""

    error: str = Field(..., description="Error kind, e.g. NotFoundError")
    message: str = Field(..., description="Human-readable message")
    status_code: int = Field(..., description="HTTP status code")
    details: Optional[dict[str, list[str]]] = Field(
        default=None, description="Per-field messages"
    )


# Users & auth
class RegisterRequest(ApiModel):
    email: EmailStr
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., min_length=8, max_length=72)
    name: str = Field(..., min_length=1, max_length=100)


class LoginRequest(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)


class UserSummary(ApiModel):
    id: UUID
    name: str
    email: str


class UserResponse(UserSummary):
    is_active: bool
    created_at: datetime


class TokenResponse(ApiModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token lifetime in seconds")
    user: UserResponse


# Workspaces
class WorkspaceCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=50)


class WorkspaceUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)


class WorkspaceResponse(ApiModel):
    id: UUID
    name: str
    slug: str
    owner_id: UUID
    created_at: datetime
    updated_at: datetime


class WorkspaceWithRoleResponse(WorkspaceResponse):
    role: MemberRole


class WorkspaceMemberCreate(ApiModel):
    user_id: UUID
    role: Literal["admin", "member"]


class WorkspaceMemberResponse(ApiModel):
    id: UUID
    workspace_id: UUID
    user_id: UUID
    role: MemberRole
    created_at: datetime
    updated_at: datetime
    user: Optional[UserSummary] = None


# Teams
class TeamCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=50)
    identifier: str = Field(..., min_length=1)


class TeamUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)


class TeamResponse(ApiModel):
    id: UUID
    workspace_id: UUID
    name: str
    identifier: str
    issue_counter: int
    created_at: datetime
    updated_at: datetime


class TeamMemberCreate(ApiModel):
    user_id: UUID


class TeamMemberResponse(ApiModel):
    id: UUID
    team_id: UUID
    user_id: UUID
    created_at: datetime
    user: Optional[UserSummary] = None


# Workflow states
class WorkflowStateCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=50)
    color: str = Field(..., min_length=1, max_length=20)
    type: WorkflowStateType
    position: Optional[int] = Field(default=None, ge=0)


class WorkflowStateUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    color: Optional[str] = Field(default=None, min_length=1, max_length=20)
    type: Optional[WorkflowStateType] = None
    position: Optional[int] = Field(default=None, ge=0)


class WorkflowStateResponse(ApiModel):
    id: UUID
    team_id: UUID
    name: str
    color: str
    type: WorkflowStateType
    position: int
    created_at: datetime
    updated_at: datetime


# Labels
class LabelCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=50)
    color: str = Field(..., min_length=1, max_length=20)
    description: Optional[str] = Field(default=None, max_length=200)


class LabelUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    color: Optional[str] = Field(default=None, min_length=1, max_length=20)
    description: Optional[str] = Field(default=None, max_length=200)


class LabelSummary(ApiModel):
    id: UUID
    name: str
    color: str


class LabelResponse(LabelSummary):
    workspace_id: UUID
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# Issues
class IssueCreate(ApiModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    workflow_state_id: Optional[UUID] = None
    priority: int = Field(default=0, ge=0, le=4)
    assignee_id: Optional[UUID] = None
    due_date: Optional[datetime] = None
    estimate: Optional[int] = Field(default=None, ge=0)
    label_ids: List[UUID] = Field(default_factory=list)

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _to_naive_utc(v)

    @field_validator("label_ids")
    @classmethod
    def reject_duplicate_labels(cls, v: List[UUID]) -> List[UUID]:
        if len(set(v)) != len(v):
            raise ValueError("Label ids must be unique")
        return v


# Fields that may be omitted from an update but never set to null
_NON_NULLABLE_UPDATE_FIELDS = ("title", "workflow_state_id", "priority", "sort_order")


class IssueUpdate(ApiModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = None
    workflow_state_id: Optional[UUID] = None
    priority: Optional[int] = Field(default=None, ge=0, le=4)
    assignee_id: Optional[UUID] = None
    due_date: Optional[datetime] = None
    estimate: Optional[int] = Field(default=None, ge=0)
    sort_order: Optional[float] = None

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _to_naive_utc(v)

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "IssueUpdate":
        for name in _NON_NULLABLE_UPDATE_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self


class IssueResponse(ApiModel):
    id: UUID
    team_id: UUID
    number: int
    identifier: str
    title: str
    description: Optional[str] = None
    workflow_state_id: UUID
    priority: int
    assignee_id: Optional[UUID] = None
    creator_id: UUID
    due_date: Optional[datetime] = None
    estimate: Optional[int] = None
    sort_order: float
    created_at: datetime
    updated_at: datetime


class IssueDetailResponse(IssueResponse):
    labels: List[LabelSummary] = Field(default_factory=list)


class IssueLabelAttach(ApiModel):
    label_id: UUID


# Comments
class CommentCreate(ApiModel):
    body: str = Field(..., min_length=1)


class CommentUpdate(ApiModel):
    body: str = Field(..., min_length=1)


class CommentResponse(ApiModel):
    id: UUID
    issue_id: UUID
    user_id: UUID
    body: str
    created_at: datetime
    updated_at: datetime
    user: Optional[UserSummary] = None


# Health
class HealthCheckResponse(ApiModel):
    status: str
    db: str
    version: str
    uptime_seconds: float
