"""User SQLAlchemy model for authentication and identity lookups."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Column, DateTime, String, Uuid
from sqlalchemy.orm import relationship

from ..database import Base
from ..utils.dates import utcnow

if TYPE_CHECKING:
    from .member import Member


class User(Base):
    """
    User model representing people who can sign in.

    Users are the identity provider for the tracker: tasks and members only
    store ids, and names/emails are resolved from here on read.

    Attributes:
        id: Unique identifier (UUID)
        email: User's email address (unique)
        password_hash: Hashed password for authentication
        name: User's display name
        created_at: Timestamp when user was created
        updated_at: Timestamp when user was last updated
    """

    __tablename__ = "Users"
    __allow_unmapped__ = True

    # Primary key - UUID
    id = Column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )

    # Authentication fields
    email = Column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    password_hash = Column(
        String(255),
        nullable=False,
    )

    # Profile fields
    name = Column(
        String(100),
        nullable=True,
    )

    # Timestamps
    created_at = Column(
        DateTime,
        default=utcnow,
        nullable=False,
    )
    updated_at = Column(
        DateTime,
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    # Relationships
    memberships = relationship(
        "Member",
        back_populates="user",
        passive_deletes=True,
        lazy="noload",
    )

    def __repr__(self) -> str:
        """String representation of User."""
        return f"<User(id={self.id}, email={self.email})>"
