"""
Repositories for Label and IssueLabel.

Labels are workspace-wide; IssueLabel rows attach them to issues.
"""

from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from issuetrack.models.issue import IssueLabel
from issuetrack.models.label import Label


class LabelRepository:
    """
    Repository for managing Label entities.

    Methods that query by ID return None when the label is not found
    rather than raising exceptions.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        workspace_id: UUID,
        name: str,
        color: str,
        description: Optional[str] = None,
    ) -> Label:
        """
        Create a label.

        Raises:
            IntegrityError: If the name is already used in the workspace
        """
        label = Label(workspace_id=workspace_id, name=name, color=color, description=description)
        self.session.add(label)
        await self.session.flush()
        await self.session.refresh(label)
        return label

    async def get_in_workspace(self, label_id: UUID, workspace_id: UUID) -> Optional[Label]:
        stmt = select(Label).where(and_(Label.id == label_id, Label.workspace_id == workspace_id))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_in_workspace(self, workspace_id: UUID, label_ids: Iterable[UUID]) -> List[Label]:
        """
        Retrieve the subset of ``label_ids`` that belong to a workspace.

        Args:
            workspace_id: The workspace UUID
            label_ids: Candidate label UUIDs

        Returns:
            Labels that exist in the workspace; missing ids are simply absent
        """
        ids = list(label_ids)
        if not ids:
            return []
        stmt = select(Label).where(and_(Label.workspace_id == workspace_id, Label.id.in_(ids)))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_workspace(self, workspace_id: UUID) -> List[Label]:
        stmt = select(Label).where(Label.workspace_id == workspace_id).order_by(Label.name.asc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(
        self,
        label: Label,
        name: Optional[str] = None,
        color: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Label:
        """
        Update a label. Only provided fields will be updated.

        Raises:
            IntegrityError: If the new name is already used in the workspace
        """
        if name is not None:
            label.name = name
        if color is not None:
            label.color = color
        if description is not None:
            label.description = description
        await self.session.flush()
        await self.session.refresh(label)
        return label

    async def delete(self, label: Label) -> None:
        """Delete a label; it is detached from every issue by cascade."""
        await self.session.delete(label)
        await self.session.flush()


class IssueLabelRepository:
    """Repository for label attachments."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def attach(self, issue_id: UUID, label_id: UUID) -> IssueLabel:
        """
        Attach a label to an issue.

        Raises:
            IntegrityError: If the label is already attached
        """
        link = IssueLabel(issue_id=issue_id, label_id=label_id)
        self.session.add(link)
        await self.session.flush()
        return link

    async def attach_many(self, issue_id: UUID, label_ids: Iterable[UUID]) -> None:
        self.session.add_all(IssueLabel(issue_id=issue_id, label_id=label_id) for label_id in label_ids)
        await self.session.flush()

    async def get(self, issue_id: UUID, label_id: UUID) -> Optional[IssueLabel]:
        stmt = select(IssueLabel).where(
            and_(IssueLabel.issue_id == issue_id, IssueLabel.label_id == label_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def detach(self, link: IssueLabel) -> None:
        await self.session.delete(link)
        await self.session.flush()

    async def issue_ids_with_label(self, label_id: UUID) -> List[UUID]:
        stmt = select(IssueLabel.issue_id).where(IssueLabel.label_id == label_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def labels_for_issues(self, issue_ids: Iterable[UUID]) -> Dict[UUID, List[Label]]:
        """
        Load the labels of several issues in one query.

        Args:
            issue_ids: Issue UUIDs

        Returns:
            Mapping of issue id to its labels ordered by name; issues without
            labels map to an empty list
        """
        ids = list(issue_ids)
        labels: Dict[UUID, List[Label]] = {issue_id: [] for issue_id in ids}
        if not ids:
            return labels
        stmt = (
            select(IssueLabel.issue_id, Label)
            .join(Label, Label.id == IssueLabel.label_id)
            .where(IssueLabel.issue_id.in_(ids))
            .order_by(Label.name.asc())
        )
        result = await self.session.execute(stmt)
        for issue_id, label in result.all():
            labels[issue_id].append(label)
        return labels
