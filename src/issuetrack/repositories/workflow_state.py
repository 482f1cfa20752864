"""Repository for WorkflowState CRUD operations."""

from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from issuetrack.models.issue import Issue
from issuetrack.models.workflow import WorkflowState, WorkflowStateType


class WorkflowStateRepository:
    """
    Repository for managing WorkflowState entities.

    Methods that query by ID return None when the state is not found
    rather than raising exceptions.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        team_id: UUID,
        name: str,
        color: str,
        type: WorkflowStateType,
        position: int,
    ) -> WorkflowState:
        """
        Create a workflow state.

        Raises:
            IntegrityError: If the name is already used in the team
        """
        state = WorkflowState(team_id=team_id, name=name, color=color, type=type, position=position)
        self.session.add(state)
        await self.session.flush()
        await self.session.refresh(state)
        return state

    async def create_many(self, team_id: UUID, rows: Iterable[dict]) -> List[WorkflowState]:
        """
        Insert several states for a team in one flush.

        Args:
            team_id: The owning team UUID
            rows: Dicts with ``name``, ``color``, ``type`` and ``position``

        Returns:
            The created states, in input order
        """
        states = [WorkflowState(team_id=team_id, **row) for row in rows]
        self.session.add_all(states)
        await self.session.flush()
        return states

    async def get_by_id(self, state_id: UUID) -> Optional[WorkflowState]:
        stmt = select(WorkflowState).where(WorkflowState.id == state_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_team(self, state_id: UUID, team_id: UUID) -> Optional[WorkflowState]:
        """
        Retrieve a state only if it belongs to the given team.

        Returns:
            The state if found in that team, None otherwise
        """
        stmt = select(WorkflowState).where(
            and_(WorkflowState.id == state_id, WorkflowState.team_id == team_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_team(self, team_id: UUID) -> List[WorkflowState]:
        stmt = (
            select(WorkflowState)
            .where(WorkflowState.team_id == team_id)
            .order_by(WorkflowState.position.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def first_of_type(
        self, team_id: UUID, state_type: WorkflowStateType
    ) -> Optional[WorkflowState]:
        """
        Retrieve the lowest-positioned state of a type in a team.

        Args:
            team_id: The team UUID
            state_type: State category to look for

        Returns:
            The state if the team has one of that type, None otherwise
        """
        stmt = (
            select(WorkflowState)
            .where(and_(WorkflowState.team_id == team_id, WorkflowState.type == state_type))
            .order_by(WorkflowState.position.asc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def ids_of_type(self, team_id: UUID, state_type: WorkflowStateType) -> List[UUID]:
        stmt = select(WorkflowState.id).where(
            and_(WorkflowState.team_id == team_id, WorkflowState.type == state_type)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def next_position(self, team_id: UUID) -> int:
        """Return the position after the team's last state."""
        stmt = select(func.coalesce(func.max(WorkflowState.position), -1) + 1).where(
            WorkflowState.team_id == team_id
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def count_issues(self, state_id: UUID) -> int:
        """Count the issues currently in a state."""
        stmt = select(func.count()).select_from(Issue).where(Issue.workflow_state_id == state_id)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def update(
        self,
        state: WorkflowState,
        name: Optional[str] = None,
        color: Optional[str] = None,
        type: Optional[WorkflowStateType] = None,
        position: Optional[int] = None,
    ) -> WorkflowState:
        """
        Update a workflow state. Only provided fields will be updated.

        Raises:
            IntegrityError: If the new name is already used in the team
        """
        if name is not None:
            state.name = name
        if color is not None:
            state.color = color
        if type is not None:
            state.type = type
        if position is not None:
            state.position = position
        await self.session.flush()
        await self.session.refresh(state)
        return state

    async def delete(self, state: WorkflowState) -> None:
        await self.session.delete(state)
        await self.session.flush()
