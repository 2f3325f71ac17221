"""Pydantic schemas package for request/response validation."""

from .analytics import AnalyticsResponse
from .member import (
    MemberResponse,
    MemberUpdate,
    MemberWithUser,
)
from .project import ProjectResponse
from .task import (
    TaskBulkUpdate,
    TaskCreate,
    TaskMove,
    TaskPositionUpdate,
    TaskResponse,
    TaskUpdate,
    TaskWithRelations,
)
from .user import (
    UserCreate,
    UserResponse,
)
from .workspace import (
    DeletedResponse,
    JoinWorkspaceRequest,
    WorkspaceInfo,
    WorkspaceResponse,
)

__all__ = [
    # Analytics schemas
    "AnalyticsResponse",
    # Member schemas
    "MemberResponse",
    "MemberUpdate",
    "MemberWithUser",
    # Project schemas
    "ProjectResponse",
    # Task schemas
    "TaskBulkUpdate",
    "TaskCreate",
    "TaskMove",
    "TaskPositionUpdate",
    "TaskResponse",
    "TaskUpdate",
    "TaskWithRelations",
    # User schemas
    "UserCreate",
    "UserResponse",
    # Workspace schemas
    "DeletedResponse",
    "JoinWorkspaceRequest",
    "WorkspaceInfo",
    "WorkspaceResponse",
]
