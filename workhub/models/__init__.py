"""SQLAlchemy ORM models package."""

from .member import Member, MemberRole
from .project import Project
from .task import Task, TaskStatus
from .user import User
from .workspace import Workspace

__all__ = [
    "Member",
    "MemberRole",
    "Project",
    "Task",
    "TaskStatus",
    "User",
    "Workspace",
]
