"""Task SQLAlchemy model for work items ordered within status columns."""

import uuid
from enum import Enum

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String, Text, Uuid

from ..database import Base
from ..utils.dates import utcnow


class TaskStatus(str, Enum):
    """Kanban column a task lives in."""

    BACKLOG = "BACKLOG"
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    IN_REVIEW = "IN_REVIEW"
    DONE = "DONE"


class Task(Base):
    """
    Task model representing a unit of work within a project.

    Tasks are the lowest level of the hierarchy: Workspace > Project > Task.
    The workspace id is denormalized onto the task so that a (workspace,
    status) bucket can be queried without a join.

    Attributes:
        id: Unique identifier (UUID)
        workspace_id: FK to the owning workspace
        project_id: FK to the parent project
        assignee_id: FK to the assigned Member (not User)
        name: Task name
        description: Free-form description
        status: One of TaskStatus
        due_date: When the task is due
        position: Sparse ordering key within the (workspace, status) bucket
        created_at: Timestamp when task was created
        updated_at: Timestamp when task was last updated
    """

    __tablename__ = "Tasks"
    __allow_unmapped__ = True
    __table_args__ = (
        Index("ix_Tasks_workspace_status_position", "workspace_id", "status", "position"),
    )

    # Primary key - UUID
    id = Column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )

    # Foreign keys
    workspace_id = Column(
        Uuid,
        ForeignKey("Workspaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    project_id = Column(
        Uuid,
        ForeignKey("Projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assignee_id = Column(
        Uuid,
        ForeignKey("Members.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Task details
    name = Column(
        String(500),
        nullable=False,
    )
    description = Column(
        Text,
        nullable=True,
    )
    status = Column(
        String(20),
        nullable=False,
        default=TaskStatus.TODO.value,
    )
    due_date = Column(
        DateTime,
        nullable=True,
    )

    # Ordering
    position = Column(
        Float,
        nullable=False,
        default=1000.0,
    )

    # Timestamps
    created_at = Column(
        DateTime,
        default=utcnow,
        nullable=False,
        index=True,
    )
    updated_at = Column(
        DateTime,
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation of Task."""
        return f"<Task(id={self.id}, name={self.name[:30]}, status={self.status})>"
