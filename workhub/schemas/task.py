"""Pydantic schemas for Task model validation.

Request bodies accept both snake_case field names and the camelCase names
used by the web client (``workspaceId``, ``projectId``, ``asigneeId``,
``dueDate``). Responses are always snake_case.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..models.task import TaskStatus
from .member import MemberWithUser
from .project import ProjectResponse


class TaskCreate(BaseModel):
    """Schema for creating a new task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Task name",
        examples=["Write release notes"],
    )
    status: TaskStatus = Field(
        ...,
        description="Status column",
        examples=["BACKLOG"],
    )
    workspace_id: UUID = Field(
        ...,
        validation_alias=AliasChoices("workspace_id", "workspaceId"),
        description="ID of the owning workspace",
    )
    project_id: UUID = Field(
        ...,
        validation_alias=AliasChoices("project_id", "projectId"),
        description="ID of the parent project",
    )
    due_date: datetime = Field(
        ...,
        validation_alias=AliasChoices("due_date", "dueDate"),
        description="When the task is due",
    )
    assignee_id: Optional[UUID] = Field(
        None,
        validation_alias=AliasChoices("assignee_id", "asigneeId", "assigneeId"),
        description="Member ID of the assignee",
    )
    description: Optional[str] = Field(
        None,
        description="Detailed description",
    )


class TaskUpdate(BaseModel):
    """Schema for updating a task. Only provided fields are changed."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(
        None,
        min_length=1,
        max_length=500,
    )
    status: Optional[TaskStatus] = None
    project_id: Optional[UUID] = Field(
        None,
        validation_alias=AliasChoices("project_id", "projectId"),
    )
    due_date: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("due_date", "dueDate"),
    )
    assignee_id: Optional[UUID] = Field(
        None,
        validation_alias=AliasChoices("assignee_id", "asigneeId", "assigneeId"),
    )
    description: Optional[str] = None
    position: Optional[float] = Field(
        None,
        gt=0,
        description="Explicit position; defaults to the end of the new column on status change",
    )


class TaskMove(BaseModel):
    """Schema for moving a task between status columns and/or within a column.

    Supports Kanban-style drag-and-drop:
    - Moving to a different status column (changes status)
    - Reordering within the same column (changes position)
    - Both at once

    Position calculation:
    - Provide position directly, OR
    - Provide before_task_id and/or after_task_id to compute a position
      between the two neighbours, OR
    - Provide neither to append to the end of the column
    """

    status: Optional[TaskStatus] = Field(
        None,
        description="Target status column (defaults to the current one)",
    )
    before_task_id: Optional[UUID] = Field(
        None,
        description="Task that should end up directly above the moved task",
    )
    after_task_id: Optional[UUID] = Field(
        None,
        description="Task that should end up directly below the moved task",
    )
    position: Optional[float] = Field(
        None,
        gt=0,
        description="Explicit position",
    )


class TaskPositionUpdate(BaseModel):
    """One entry of a bulk kanban update."""

    id: UUID = Field(
        ...,
        validation_alias=AliasChoices("id", "$id"),
    )
    status: TaskStatus
    position: float = Field(
        ...,
        gt=0,
    )


class TaskBulkUpdate(BaseModel):
    """Schema for persisting a kanban board after drag-and-drop."""

    tasks: List[TaskPositionUpdate] = Field(
        ...,
        min_length=1,
        max_length=100,
    )


class TaskResponse(BaseModel):
    """Schema for task response (foreign keys only)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Unique task identifier")
    workspace_id: UUID
    project_id: UUID
    assignee_id: Optional[UUID] = None
    name: str
    description: Optional[str] = None
    status: TaskStatus
    due_date: Optional[datetime] = None
    position: float
    created_at: datetime
    updated_at: datetime


class TaskWithRelations(TaskResponse):
    """Task with its project and assignee resolved on read."""

    project: Optional[ProjectResponse] = None
    assignee: Optional[MemberWithUser] = None
