"""Label service: workspace-wide label CRUD."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from issuetrack.errors import conflict, not_found
from issuetrack.models.base import Database
from issuetrack.models.label import Label
from issuetrack.repositories.label import LabelRepository

logger = logging.getLogger(__name__)


class LabelService:
    """Service for labels of a workspace."""

    def __init__(self, db: Database):
        self.db = db

    async def create_label(
        self,
        workspace_id: UUID,
        name: str,
        color: str,
        description: Optional[str] = None,
    ) -> Label:
        """
        Create a label.

        Raises:
            AppError: Conflict if the workspace already has a label with that name
        """
        try:
            async with self.db.session() as session:
                label = await LabelRepository(session).create(workspace_id, name, color, description)
        except IntegrityError:
            raise conflict("A label with this name already exists")

        logger.info(f"Created label {name}", extra={"workspace_id": workspace_id})
        return label

    async def list_labels(self, workspace_id: UUID) -> List[Label]:
        async with self.db.session() as session:
            return await LabelRepository(session).list_by_workspace(workspace_id)

    async def get_label(self, workspace_id: UUID, label_id: UUID) -> Label:
        async with self.db.session() as session:
            label = await LabelRepository(session).get_in_workspace(label_id, workspace_id)
        if label is None:
            raise not_found("Label")
        return label

    async def update_label(
        self,
        workspace_id: UUID,
        label_id: UUID,
        name: Optional[str] = None,
        color: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Label:
        """
        Update a label. Only provided fields change.

        Raises:
            AppError: NotFound if the label is not in the workspace, Conflict
                if the new name is taken
        """
        try:
            async with self.db.session() as session:
                repo = LabelRepository(session)
                label = await repo.get_in_workspace(label_id, workspace_id)
                if label is None:
                    raise not_found("Label")
                return await repo.update(label, name=name, color=color, description=description)
        except IntegrityError:
            raise conflict("A label with this name already exists")

    async def delete_label(self, workspace_id: UUID, label_id: UUID) -> None:
        async with self.db.session() as session:
            repo = LabelRepository(session)
            label = await repo.get_in_workspace(label_id, workspace_id)
            if label is None:
                raise not_found("Label")
            await repo.delete(label)
