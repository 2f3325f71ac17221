"""Member SQLAlchemy model for user-workspace enrollment with a role."""

import uuid
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from ..database import Base
from ..utils.dates import utcnow

if TYPE_CHECKING:
    from .user import User


class MemberRole(str, Enum):
    """Workspace role. Exactly two tiers."""

    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class Member(Base):
    """
    Member model linking a user to a workspace.

    At most one Member exists per (workspace, user) pair. The workspace
    creator is enrolled as ADMIN when the workspace is created; everyone else
    joins as MEMBER through the invite code.

    Attributes:
        id: Unique identifier (UUID), also used as the task assignee id
        workspace_id: FK to the workspace
        user_id: FK to the member user
        role: ADMIN or MEMBER
        created_at: Timestamp when membership was created
    """

    __tablename__ = "Members"
    __allow_unmapped__ = True
    __table_args__ = (
        UniqueConstraint("workspace_id", "user_id", name="uq_members_workspace_user"),
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
    user_id = Column(
        Uuid,
        ForeignKey("Users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Membership details
    role = Column(
        String(20),
        nullable=False,
        default=MemberRole.MEMBER.value,
    )

    # Timestamps
    created_at = Column(
        DateTime,
        default=utcnow,
        nullable=False,
    )

    # Relationships
    user = relationship(
        "User",
        back_populates="memberships",
        lazy="joined",
    )

    @property
    def is_admin(self) -> bool:
        """Whether this membership carries the ADMIN role."""
        return self.role == MemberRole.ADMIN.value

    def __repr__(self) -> str:
        """String representation of Member."""
        return f"<Member(id={self.id}, workspace_id={self.workspace_id}, user_id={self.user_id}, role={self.role})>"
