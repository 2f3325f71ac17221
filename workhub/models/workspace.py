"""Workspace SQLAlchemy model - the top-level tenant boundary."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid

from ..database import Base
from ..utils.dates import utcnow


class Workspace(Base):
    """
    Workspace model representing a tenant.

    Workspaces are the top of the hierarchy: Workspace > Project > Task.
    Members, projects and tasks all carry the workspace id so every access
    check can be resolved to a single membership lookup.

    Attributes:
        id: Unique identifier (UUID)
        name: Workspace name
        user_id: FK to the user who created the workspace
        image_url: Opaque reference to the workspace image (optional)
        invite_code: The single active join code
        created_at: Timestamp when workspace was created
        updated_at: Timestamp when workspace was last updated
    """

    __tablename__ = "Workspaces"
    __allow_unmapped__ = True

    # Primary key - UUID
    id = Column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )

    # Creator
    user_id = Column(
        Uuid,
        ForeignKey("Users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Workspace details
    name = Column(
        String(255),
        nullable=False,
    )
    image_url = Column(
        String(2048),
        nullable=True,
    )
    invite_code = Column(
        String(32),
        nullable=False,
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
        """String representation of Workspace."""
        return f"<Workspace(id={self.id}, name={self.name})>"
