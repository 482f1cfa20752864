"""
Issue query engine.

Lists a team's issues with conjunctive filters, one sort key and page based
pagination. Filters are turned into an explicit list of predicates; the
same list drives the count query and the page query, so ``total`` always
describes the filtered set.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy import ColumnElement
from sqlalchemy.ext.asyncio import AsyncSession

from issuetrack.errors import validation_error
from issuetrack.models.base import Database
from issuetrack.models.issue import Issue
from issuetrack.models.workflow import WorkflowStateType
from issuetrack.repositories.issue import IssueRepository
from issuetrack.repositories.label import IssueLabelRepository
from issuetrack.repositories.workflow_state import WorkflowStateRepository

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


class SortField(str, Enum):
    SORT_ORDER = "sortOrder"
    CREATED_AT = "createdAt"
    PRIORITY = "priority"
    DUE_DATE = "dueDate"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


_SORT_COLUMNS = {
    SortField.SORT_ORDER: Issue.sort_order,
    SortField.CREATED_AT: Issue.created_at,
    SortField.PRIORITY: Issue.priority,
    SortField.DUE_DATE: Issue.due_date,
}


@dataclass
class IssueFilters:
    """Optional filters; every filter that is set must match."""

    workflow_state_id: Optional[UUID] = None
    priority: Optional[int] = None
    assignee_id: Optional[UUID] = None
    state_type: Optional[WorkflowStateType] = None
    label_id: Optional[UUID] = None


@dataclass
class IssueSort:
    field: SortField = SortField.SORT_ORDER
    direction: SortDirection = SortDirection.ASC

    def order_by(self) -> List[Any]:
        """ORDER BY clauses; issue number breaks ties so pages are stable."""
        column = _SORT_COLUMNS[self.field]
        primary = column.desc() if self.direction == SortDirection.DESC else column.asc()
        return [primary, Issue.number.asc()]


@dataclass
class Pagination:
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        details = {}
        if self.page < 1:
            details["page"] = ["Must be at least 1"]
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            details["pageSize"] = [f"Must be between 1 and {MAX_PAGE_SIZE}"]
        if details:
            raise validation_error("Invalid pagination", details)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass
class IssuePage:
    items: List[Issue] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    has_more: bool = False


def has_more(offset: int, returned: int, total: int) -> bool:
    """Whether rows remain after a page that started at ``offset``."""
    return offset + returned < total


async def build_predicates(
    session: AsyncSession, team_id: UUID, filters: IssueFilters
) -> Optional[List[ColumnElement[bool]]]:
    """
    Translate filters into SQL predicates.

    ``state_type`` and ``label_id`` are resolved through sub-lookups first.
    When a sub-lookup finds nothing, no issue can match.

    Returns:
        The predicate list, or None when the result is known to be empty
    """
    predicates: List[ColumnElement[bool]] = [Issue.team_id == team_id]

    if filters.workflow_state_id is not None:
        predicates.append(Issue.workflow_state_id == filters.workflow_state_id)

    if filters.priority is not None:
        predicates.append(Issue.priority == filters.priority)

    if filters.assignee_id is not None:
        predicates.append(Issue.assignee_id == filters.assignee_id)

    if filters.state_type is not None:
        state_ids = await WorkflowStateRepository(session).ids_of_type(team_id, filters.state_type)
        if not state_ids:
            return None
        predicates.append(Issue.workflow_state_id.in_(state_ids))

    if filters.label_id is not None:
        issue_ids = await IssueLabelRepository(session).issue_ids_with_label(filters.label_id)
        if not issue_ids:
            return None
        predicates.append(Issue.id.in_(issue_ids))

    return predicates


class IssueQueryEngine:
    """Read-only listing of a team's issues."""

    def __init__(self, db: Database):
        self.db = db

    async def list_issues(
        self,
        team_id: UUID,
        filters: Optional[IssueFilters] = None,
        sort: Optional[IssueSort] = None,
        pagination: Optional[Pagination] = None,
    ) -> IssuePage:
        """
        List one page of a team's issues.

        Args:
            team_id: Team whose issues are listed
            filters: Conjunctive filters (default: none)
            sort: Sort key and direction (default: sortOrder ascending)
            pagination: Page and page size (default: 1 and 50)

        Returns:
            The page with the total count of matching issues
        """
        filters = filters or IssueFilters()
        sort = sort or IssueSort()
        pagination = pagination or Pagination()

        async with self.db.session() as session:
            predicates = await build_predicates(session, team_id, filters)
            if predicates is None:
                return IssuePage(page=pagination.page, page_size=pagination.page_size)

            repo = IssueRepository(session)
            total = await repo.count(predicates)
            items = await repo.list_page(
                predicates,
                order_by=sort.order_by(),
                limit=pagination.page_size,
                offset=pagination.offset,
            )

        logger.debug(f"Listed {len(items)} of {total} issues for team {team_id}")
        return IssuePage(
            items=items,
            total=total,
            page=pagination.page,
            page_size=pagination.page_size,
            has_more=has_more(pagination.offset, len(items), total),
        )
