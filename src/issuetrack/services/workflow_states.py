"""
Workflow state registry.

Seeds the default states of a new team, resolves the state a new issue
starts in, checks that a state belongs to a team, and manages a team's
custom states. The module-level helpers take the caller's session so they
run inside the caller's transaction.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from issuetrack.errors import conflict, not_found, validation_error
from issuetrack.models.base import Database
from issuetrack.models.workflow import WorkflowState, WorkflowStateType
from issuetrack.repositories.workflow_state import WorkflowStateRepository

logger = logging.getLogger(__name__)

# Seeded for every new team, in position order
DEFAULT_WORKFLOW_STATES = (
    {"name": "Backlog", "color": "#bec2c8", "type": WorkflowStateType.BACKLOG, "position": 0},
    {"name": "Todo", "color": "#e2e2e2", "type": WorkflowStateType.UNSTARTED, "position": 1},
    {"name": "In Progress", "color": "#f2c94c", "type": WorkflowStateType.STARTED, "position": 2},
    {"name": "In Review", "color": "#5e6ad2", "type": WorkflowStateType.STARTED, "position": 3},
    {"name": "Done", "color": "#4cb782", "type": WorkflowStateType.COMPLETED, "position": 4},
    {"name": "Canceled", "color": "#95a2b3", "type": WorkflowStateType.CANCELLED, "position": 5},
)


async def seed_defaults(session: AsyncSession, team_id: UUID) -> List[WorkflowState]:
    """
    Insert the six default states for a team.

    Runs in the caller's transaction so a failed team creation leaves no
    orphan states behind.
    """
    states = await WorkflowStateRepository(session).create_many(
        team_id, [dict(row) for row in DEFAULT_WORKFLOW_STATES]
    )
    logger.debug(f"Seeded {len(states)} workflow states for team {team_id}")
    return states


async def resolve_default(session: AsyncSession, team_id: UUID) -> WorkflowState:
    """
    Return the state new issues start in: the team's backlog state.

    Raises:
        AppError: Validation if the team has no backlog state
    """
    state = await WorkflowStateRepository(session).first_of_type(
        team_id, WorkflowStateType.BACKLOG
    )
    if state is None:
        raise validation_error("No backlog workflow state found for this team")
    return state


async def validate_belongs_to_team(
    session: AsyncSession, state_id: UUID, team_id: UUID
) -> WorkflowState:
    """
    Load a state and check it belongs to the team.

    Raises:
        AppError: NotFound if the state does not exist or belongs elsewhere
    """
    state = await WorkflowStateRepository(session).get_for_team(state_id, team_id)
    if state is None:
        raise not_found("Workflow state")
    return state


class WorkflowStateService:
    """Service for a team's workflow state CRUD."""

    def __init__(self, db: Database):
        self.db = db

    async def list_states(self, team_id: UUID) -> List[WorkflowState]:
        async with self.db.session() as session:
            return await WorkflowStateRepository(session).list_by_team(team_id)

    async def create_state(
        self,
        team_id: UUID,
        name: str,
        color: str,
        type: WorkflowStateType,
        position: Optional[int] = None,
    ) -> WorkflowState:
        """
        Create a custom state for a team.

        Args:
            team_id: The owning team
            name: Name, unique within the team
            color: Display color
            type: State category
            position: Display position; appended after the last state if None

        Raises:
            AppError: Conflict if the name is already used in the team
        """
        try:
            async with self.db.session() as session:
                repo = WorkflowStateRepository(session)
                if position is None:
                    position = await repo.next_position(team_id)
                state = await repo.create(team_id, name, color, type, position)
        except IntegrityError:
            raise conflict(f"A workflow state named '{name}' already exists in this team")

        logger.info(f"Created workflow state {state.id} ({name}) in team {team_id}")
        return state

    async def update_state(
        self,
        team_id: UUID,
        state_id: UUID,
        name: Optional[str] = None,
        color: Optional[str] = None,
        type: Optional[WorkflowStateType] = None,
        position: Optional[int] = None,
    ) -> WorkflowState:
        """
        Update a state. Only provided fields change.

        Raises:
            AppError: NotFound if the state is not in the team, Conflict if
                the new name is already used
        """
        try:
            async with self.db.session() as session:
                state = await validate_belongs_to_team(session, state_id, team_id)
                return await WorkflowStateRepository(session).update(
                    state, name=name, color=color, type=type, position=position
                )
        except IntegrityError:
            raise conflict(f"A workflow state named '{name}' already exists in this team")

    async def delete_state(self, team_id: UUID, state_id: UUID) -> None:
        """
        Delete a state that no issue is in.

        Raises:
            AppError: NotFound if the state is not in the team, Conflict if
                issues still use it
        """
        async with self.db.session() as session:
            state = await validate_belongs_to_team(session, state_id, team_id)
            repo = WorkflowStateRepository(session)
            in_use = await repo.count_issues(state.id)
            if in_use:
                raise conflict(
                    f"Workflow state is used by {in_use} issue(s); move them before deleting"
                )
            await repo.delete(state)

        logger.info(f"Deleted workflow state {state_id} from team {team_id}")
