"""
Repository for Issue operations.

Filtering is expressed by the caller as a list of SQLAlchemy predicates;
the same list feeds both the page query and the count query.
"""

from datetime import datetime
from typing import Any, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import ColumnElement, and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from issuetrack.models.issue import Issue


class IssueRepository:
    """
    Repository for managing Issue entities.

    Methods that query by ID return None when the issue is not found
    rather than raising exceptions.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        team_id: UUID,
        number: int,
        identifier: str,
        title: str,
        workflow_state_id: UUID,
        creator_id: UUID,
        sort_order: float,
        description: Optional[str] = None,
        priority: int = 0,
        assignee_id: Optional[UUID] = None,
        due_date: Optional[datetime] = None,
        estimate: Optional[int] = None,
    ) -> Issue:
        """
        Insert an issue whose number and identifier were already allocated.

        Raises:
            IntegrityError: If the number or identifier is already taken
        """
        issue = Issue(
            team_id=team_id,
            number=number,
            identifier=identifier,
            title=title,
            description=description,
            workflow_state_id=workflow_state_id,
            priority=priority,
            assignee_id=assignee_id,
            creator_id=creator_id,
            due_date=due_date,
            estimate=estimate,
            sort_order=sort_order,
        )
        self.session.add(issue)
        await self.session.flush()
        await self.session.refresh(issue)
        return issue

    async def get_by_id(self, issue_id: UUID) -> Optional[Issue]:
        stmt = select(Issue).where(Issue.id == issue_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_in_team(self, issue_id: UUID, team_id: UUID) -> Optional[Issue]:
        stmt = select(Issue).where(and_(Issue.id == issue_id, Issue.team_id == team_id))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_identifier(self, team_id: UUID, identifier: str) -> Optional[Issue]:
        """
        Retrieve an issue by its human readable identifier within a team.

        Args:
            team_id: The team UUID
            identifier: Identifier such as ``ENG-12``

        Returns:
            The issue if found in that team, None otherwise
        """
        stmt = select(Issue).where(and_(Issue.team_id == team_id, Issue.identifier == identifier))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def min_sort_order_minus_one(self, team_id: UUID) -> float:
        """
        Compute a sort order strictly below every issue in the team.

        Returns ``-1.0`` for a team without issues.
        """
        stmt = select(func.coalesce(func.min(Issue.sort_order), 0.0) - 1).where(
            Issue.team_id == team_id
        )
        result = await self.session.execute(stmt)
        return float(result.scalar_one())

    async def count(self, predicates: Sequence[ColumnElement[bool]]) -> int:
        stmt = select(func.count()).select_from(Issue).where(*predicates)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def list_page(
        self,
        predicates: Sequence[ColumnElement[bool]],
        order_by: Sequence[Any],
        limit: int,
        offset: int,
    ) -> List[Issue]:
        """
        Fetch one page of issues.

        Args:
            predicates: Conjunctive filter expressions
            order_by: ORDER BY clauses, applied in sequence
            limit: Page size
            offset: Rows to skip

        Returns:
            Issues of the requested page
        """
        stmt = select(Issue).where(*predicates).order_by(*order_by).limit(limit).offset(offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, issue: Issue, fields: dict) -> Issue:
        """
        Apply a partial update.

        Args:
            issue: Loaded issue
            fields: Attribute names mapped to new values; explicit ``None``
                clears nullable columns

        Returns:
            The updated issue
        """
        for name, value in fields.items():
            setattr(issue, name, value)
        await self.session.flush()
        await self.session.refresh(issue)
        return issue

    async def delete(self, issue: Issue) -> None:
        """Delete an issue; comments and label links cascade."""
        await self.session.delete(issue)
        await self.session.flush()
