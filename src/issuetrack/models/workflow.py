"""
Workflow state model.

Each team has an ordered set of named states. ``type`` is a closed category
used for filtering and defaults; ``position`` only orders states for display.
"""

from enum import Enum
from uuid import UUID

from sqlalchemy import Enum as SQLEnum
from sqlalchemy import ForeignKey, Index, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, UUIDMixin


class WorkflowStateType(str, Enum):
    """Workflow state categories, in lifecycle order."""

    BACKLOG = "backlog"
    UNSTARTED = "unstarted"
    STARTED = "started"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class WorkflowState(Base, UUIDMixin, TimestampMixin):
    """
    A named, typed status an issue can occupy.

    Attributes:
        id: Unique state identifier (UUID)
        team_id: Owning team UUID
        name: Display name, unique within the team
        color: Display color (hex string)
        type: State category
        position: Display ordering
    """

    __tablename__ = "workflow_states"

    team_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    color: Mapped[str] = mapped_column(String(20), nullable=False)
    type: Mapped[WorkflowStateType] = mapped_column(
        SQLEnum(
            WorkflowStateType,
            native_enum=False,
            values_callable=lambda types: [t.value for t in types],
        ),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("team_id", "name", name="uq_workflow_state_team_name"),
        Index("ix_workflow_states_team_type", "team_id", "type"),
    )

    def __repr__(self) -> str:
        return (
            f"<WorkflowState(id={self.id}, name='{self.name}', "
            f"type={self.type.value}, position={self.position})>"
        )
