"""
Issue creation transaction.

Creating an issue allocates the next number from the team's counter, picks
its workflow state, places it at the top of the team's manual ordering and
attaches its labels. All of it happens in one database transaction: any
failure rolls back every write, the counter increment included, so numbers
are never burned by failed creations and never handed out twice.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from issuetrack.errors import AppError, conflict, not_found
from issuetrack.models.base import Database
from issuetrack.models.issue import Issue
from issuetrack.repositories.issue import IssueRepository
from issuetrack.repositories.label import IssueLabelRepository, LabelRepository
from issuetrack.repositories.team import TeamRepository
from issuetrack.repositories.user import UserRepository
from issuetrack.services.workflow_states import resolve_default, validate_belongs_to_team
from issuetrack.utils.identifier import format_issue_identifier
from issuetrack.utils.observability import record_issue_created, record_issue_creation_failure

logger = logging.getLogger(__name__)


@dataclass
class NewIssue:
    """Caller-supplied fields of an issue to create."""

    title: str
    description: Optional[str] = None
    workflow_state_id: Optional[UUID] = None
    priority: int = 0
    assignee_id: Optional[UUID] = None
    due_date: Optional[datetime] = None
    estimate: Optional[int] = None
    label_ids: List[UUID] = field(default_factory=list)


class IssueCreationEngine:
    """Creates issues atomically with per-team sequential numbers."""

    def __init__(self, db: Database):
        self.db = db

    async def create_issue(self, team_id: UUID, creator_id: UUID, fields: NewIssue) -> Issue:
        """
        Create an issue in a team.

        Steps, all in one transaction:

        1. Increment the team's counter and read it back in one statement
        2. Build the identifier ``{team.identifier}-{number}``
        3. Validate the requested state, or fall back to the backlog state
        4. Compute a sort order below every existing issue in the team
        5. Insert the issue
        6. Attach the requested labels
        7. Return the inserted issue

        The caller must already have authorized the creator against the
        team's workspace.

        Args:
            team_id: Team to create the issue in
            creator_id: User creating the issue
            fields: Issue fields

        Returns:
            The created issue

        Raises:
            AppError: NotFound for a missing team, workflow state or label;
                NotFound for an unknown assignee; Validation for a missing
                backlog state; Conflict if a uniqueness constraint is hit
        """
        try:
            async with self.db.session() as session:
                # Must stay the first statement of the transaction; it takes
                # the write lock that serializes creations in the same team.
                allocated = await TeamRepository(session).increment_issue_counter(team_id)
                if allocated is None:
                    raise not_found("Team")

                identifier = format_issue_identifier(allocated.team_identifier, allocated.number)

                if fields.workflow_state_id is not None:
                    state = await validate_belongs_to_team(
                        session, fields.workflow_state_id, team_id
                    )
                else:
                    state = await resolve_default(session, team_id)

                if fields.assignee_id is not None:
                    if await UserRepository(session).get_by_id(fields.assignee_id) is None:
                        raise not_found("User")

                label_ids = list(fields.label_ids)
                if label_ids:
                    found = await LabelRepository(session).list_in_workspace(
                        allocated.workspace_id, label_ids
                    )
                    if len(found) != len(set(label_ids)):
                        raise not_found("Label")

                issues = IssueRepository(session)
                sort_order = await issues.min_sort_order_minus_one(team_id)

                issue = await issues.create(
                    team_id=team_id,
                    number=allocated.number,
                    identifier=identifier,
                    title=fields.title,
                    description=fields.description,
                    workflow_state_id=state.id,
                    priority=fields.priority,
                    assignee_id=fields.assignee_id,
                    creator_id=creator_id,
                    due_date=fields.due_date,
                    estimate=fields.estimate,
                    sort_order=sort_order,
                )

                if label_ids:
                    await IssueLabelRepository(session).attach_many(issue.id, label_ids)
        except IntegrityError as exc:
            record_issue_creation_failure("ConflictError")
            logger.warning(f"Issue creation in team {team_id} hit a constraint: {exc.orig}")
            raise conflict("Issue conflicts with an existing record")
        except AppError as exc:
            record_issue_creation_failure(exc.kind.value)
            raise

        record_issue_created()
        logger.info(
            f"Created issue {issue.identifier}",
            extra={"team_id": team_id, "issue_id": issue.id, "user_id": creator_id},
        )
        return issue
