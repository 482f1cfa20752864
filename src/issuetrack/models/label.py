"""Label model: workspace-wide tags that can be attached to issues."""

from typing import Optional
from uuid import UUID

from sqlalchemy import ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, UUIDMixin


class Label(Base, UUIDMixin, TimestampMixin):
    """A label, unique by name within its workspace."""

    __tablename__ = "labels"

    workspace_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    color: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    __table_args__ = (UniqueConstraint("workspace_id", "name", name="uq_label_workspace_name"),)

    def __repr__(self) -> str:
        return f"<Label(id={self.id}, name='{self.name}')>"
