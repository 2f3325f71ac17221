"""Project SQLAlchemy model."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid

from ..database import Base
from ..utils.dates import utcnow


class Project(Base):
    """
    Project model grouping tasks inside a workspace.

    Attributes:
        id: Unique identifier (UUID)
        workspace_id: FK to the owning workspace
        name: Project name
        image_url: Opaque reference to the project image (optional)
        created_at: Timestamp when project was created
        updated_at: Timestamp when project was last updated
    """

    __tablename__ = "Projects"
    __allow_unmapped__ = True

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

    # Project details
    name = Column(
        String(255),
        nullable=False,
    )
    image_url = Column(
        String(2048),
        nullable=True,
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
        """String representation of Project."""
        return f"<Project(id={self.id}, name={self.name})>"
