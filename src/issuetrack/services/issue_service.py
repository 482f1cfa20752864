"""
Issue service.

Reads, updates and deletes issues addressed by their identifier, and
attaches and detaches labels. Creation lives in ``issue_creation`` and
listing in ``issue_query``.
"""

import logging
from typing import Any, Dict, List, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from issuetrack.errors import conflict, not_found, validation_error
from issuetrack.models.base import Database
from issuetrack.models.issue import Issue
from issuetrack.models.label import Label
from issuetrack.repositories.issue import IssueRepository
from issuetrack.repositories.label import IssueLabelRepository, LabelRepository
from issuetrack.repositories.user import UserRepository
from issuetrack.services.authorization import TeamContext
from issuetrack.services.workflow_states import validate_belongs_to_team

logger = logging.getLogger(__name__)

# Columns a partial update may touch
UPDATABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "workflow_state_id",
        "priority",
        "assignee_id",
        "due_date",
        "estimate",
        "sort_order",
    }
)


async def _load_issue(session: AsyncSession, team_id: UUID, identifier: str) -> Issue:
    issue = await IssueRepository(session).get_by_identifier(team_id, identifier)
    if issue is None:
        raise not_found("Issue")
    return issue


class IssueService:
    """Service for issue reads, updates and label attachments."""

    def __init__(self, db: Database):
        self.db = db

    async def get_issue(self, team_id: UUID, identifier: str) -> Tuple[Issue, List[Label]]:
        """
        Retrieve an issue and its labels.

        Raises:
            AppError: NotFound if the team has no issue with that identifier
        """
        async with self.db.session() as session:
            issue = await _load_issue(session, team_id, identifier)
            labels = await IssueLabelRepository(session).labels_for_issues([issue.id])
        return issue, labels[issue.id]

    async def update_issue(
        self, context: TeamContext, identifier: str, fields: Dict[str, Any]
    ) -> Issue:
        """
        Apply a partial update to an issue.

        Args:
            context: Authorized team context
            identifier: Issue identifier, e.g. ``ENG-3``
            fields: Column names mapped to new values; only keys present are
                changed

        Raises:
            AppError: NotFound for an unknown issue or a workflow state of
                another team or an unknown assignee
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise validation_error(f"Cannot update fields: {', '.join(sorted(unknown))}")

        team_id = context.team.id
        async with self.db.session() as session:
            issue = await _load_issue(session, team_id, identifier)

            if fields.get("workflow_state_id") is not None:
                await validate_belongs_to_team(session, fields["workflow_state_id"], team_id)

            if fields.get("assignee_id") is not None:
                if await UserRepository(session).get_by_id(fields["assignee_id"]) is None:
                    raise not_found("User")

            issue = await IssueRepository(session).update(issue, fields)

        logger.info(
            f"Updated issue {identifier}: {', '.join(sorted(fields))}",
            extra={"team_id": team_id, "issue_id": issue.id},
        )
        return issue

    async def delete_issue(self, team_id: UUID, identifier: str) -> None:
        """Delete an issue with its comments and label attachments."""
        async with self.db.session() as session:
            issue = await _load_issue(session, team_id, identifier)
            await IssueRepository(session).delete(issue)

        logger.info(f"Deleted issue {identifier}", extra={"team_id": team_id})

    async def attach_label(self, context: TeamContext, identifier: str, label_id: UUID) -> None:
        """
        Attach a workspace label to an issue.

        Raises:
            AppError: NotFound for an unknown issue or a label outside the
                workspace, Conflict if the label is already attached
        """
        try:
            async with self.db.session() as session:
                issue = await _load_issue(session, context.team.id, identifier)
                label = await LabelRepository(session).get_in_workspace(
                    label_id, context.workspace.workspace.id
                )
                if label is None:
                    raise not_found("Label")

                links = IssueLabelRepository(session)
                if await links.get(issue.id, label_id) is not None:
                    raise conflict("Label is already attached to this issue")
                await links.attach(issue.id, label_id)
        except IntegrityError:
            raise conflict("Label is already attached to this issue")

    async def detach_label(self, team_id: UUID, identifier: str, label_id: UUID) -> None:
        """
        Detach a label from an issue.

        Raises:
            AppError: NotFound for an unknown issue or a label that is not attached
        """
        async with self.db.session() as session:
            issue = await _load_issue(session, team_id, identifier)
            links = IssueLabelRepository(session)
            link = await links.get(issue.id, label_id)
            if link is None:
                raise not_found("Issue label")
            await links.detach(link)
