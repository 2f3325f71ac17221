"""Tasks API endpoints.

Tasks live in a project and are ordered inside (workspace, status) columns
by a sparse position key. Any member of the workspace can read and modify
its tasks.

Listing and single-task reads return tasks enriched with their project and
assignee (including the assignee's name and email).
"""

import logging
from datetime import datetime
from typing import Annotated, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models.member import Member
from ..models.project import Project
from ..models.task import Task, TaskStatus
from ..models.user import User
from ..schemas.task import (
    TaskBulkUpdate,
    TaskCreate,
    TaskMove,
    TaskResponse,
    TaskUpdate,
    TaskWithRelations,
)
from ..schemas.workspace import DeletedResponse
from ..services.auth_service import get_current_user
from ..services.lifecycle_service import delete_task
from ..services.membership_service import MembershipService, unauthorized
from ..services.position_service import move_task, next_position
from ..services.task_helpers import enrich_tasks
from ..utils.dates import to_naive_utc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])


# ============================================================================
# Helper Functions
# ============================================================================


async def verify_project_in_workspace(
    db: AsyncSession,
    project_id: UUID,
    workspace_id: UUID,
) -> Project:
    """The project must exist and belong to the task's workspace."""
    result = await db.execute(select(Project).where(Project.id == project_id))
    project = result.scalar_one_or_none()
    if project is None or project.workspace_id != workspace_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Project does not belong to this workspace",
        )
    return project


async def verify_assignee_in_workspace(
    db: AsyncSession,
    assignee_id: UUID,
    workspace_id: UUID,
) -> Member:
    """The assignee must be a membership record of the task's workspace."""
    result = await db.execute(select(Member).where(Member.id == assignee_id))
    assignee = result.scalar_one_or_none()
    if assignee is None or assignee.workspace_id != workspace_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Assignee is not a member of this workspace",
        )
    return assignee


# ============================================================================
# Task CRUD
# ============================================================================


@router.get(
    "",
    response_model=List[TaskWithRelations],
    summary="List tasks",
    description="List tasks of a workspace, newest first, with optional filters.",
    responses={
        200: {"description": "Tasks retrieved successfully"},
        401: {"description": "Not a member of the workspace"},
    },
)
async def list_tasks(
    current_user: Annotated[User, Depends(get_current_user)],
    workspace_id: UUID = Query(..., alias="workspaceId"),
    project_id: Optional[UUID] = Query(None, alias="projectId", description="Filter by project"),
    task_status: Optional[TaskStatus] = Query(None, alias="status", description="Filter by status"),
    assignee_id: Optional[UUID] = Query(None, alias="asigneeId", description="Filter by assignee"),
    due_date: Optional[datetime] = Query(None, alias="dueDate", description="Exact due date"),
    search: Optional[str] = Query(None, description="Case-insensitive search in task name"),
    db: AsyncSession = Depends(get_db),
) -> List[TaskWithRelations]:
    await MembershipService(db).require_member(workspace_id, current_user)

    query = select(Task).where(Task.workspace_id == workspace_id)
    if project_id:
        query = query.where(Task.project_id == project_id)
    if task_status:
        query = query.where(Task.status == task_status.value)
    if assignee_id:
        query = query.where(Task.assignee_id == assignee_id)
    if due_date:
        query = query.where(Task.due_date == to_naive_utc(due_date))
    if search:
        pattern = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        query = query.where(Task.name.ilike(f"%{pattern}%", escape="\\"))

    query = query.order_by(Task.created_at.desc(), Task.id.desc())
    result = await db.execute(query)
    return await enrich_tasks(db, result.scalars().all())


@router.post(
    "",
    response_model=TaskResponse,
    summary="Create a new task",
    description="Create a task at the end of its status column.",
    responses={
        200: {"description": "Task created successfully"},
        400: {"description": "Project or assignee outside the workspace"},
        401: {"description": "Not a member of the workspace"},
    },
)
async def create_task(
    task_data: TaskCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> TaskResponse:
    """
    Create a new task.

    - **name**: Task name
    - **status**: Status column
    - **workspaceId** / **projectId**: Where the task lives
    - **dueDate**: When the task is due
    - **asigneeId**: Optional member ID of the assignee
    """
    workspace_id = task_data.workspace_id
    await MembershipService(db).require_member(workspace_id, current_user)
    await verify_project_in_workspace(db, task_data.project_id, workspace_id)
    if task_data.assignee_id is not None:
        await verify_assignee_in_workspace(db, task_data.assignee_id, workspace_id)

    position = await next_position(db, workspace_id, task_data.status)

    task = Task(
        workspace_id=workspace_id,
        project_id=task_data.project_id,
        assignee_id=task_data.assignee_id,
        name=task_data.name,
        description=task_data.description,
        status=task_data.status.value,
        due_date=to_naive_utc(task_data.due_date),
        position=position,
    )
    db.add(task)
    await db.commit()
    await db.refresh(task)

    logger.info(f"Task {task.id} created in workspace {workspace_id} at position {position}")
    return task


@router.post(
    "/bulk-update",
    response_model=List[TaskResponse],
    summary="Bulk update task positions",
    description="Persist status and position of many tasks after a kanban drag-and-drop.",
    responses={
        200: {"description": "Tasks updated successfully"},
        401: {"description": "A task is missing or in a workspace you are not a member of"},
    },
)
async def bulk_update_tasks(
    bulk_data: TaskBulkUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> List[TaskResponse]:
    task_ids = [entry.id for entry in bulk_data.tasks]
    result = await db.execute(select(Task).where(Task.id.in_(task_ids)))
    tasks = {task.id: task for task in result.scalars().all()}
    if len(tasks) != len(set(task_ids)):
        raise unauthorized()

    service = MembershipService(db)
    for workspace_id in {task.workspace_id for task in tasks.values()}:
        await service.require_member(workspace_id, current_user)

    for entry in bulk_data.tasks:
        task = tasks[entry.id]
        task.status = entry.status.value
        task.position = entry.position

    await db.commit()

    updated = [tasks[entry.id] for entry in bulk_data.tasks]
    for task in updated:
        await db.refresh(task)
    logger.info(f"Bulk updated {len(updated)} tasks for user {current_user.id}")
    return updated


@router.get(
    "/{task_id}",
    response_model=TaskWithRelations,
    summary="Get a task by ID",
    responses={
        200: {"description": "Task retrieved successfully"},
        401: {"description": "Not a member or task does not exist"},
    },
)
async def get_task(
    task_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> TaskWithRelations:
    task, _ = await MembershipService(db).resolve_task(task_id, current_user)
    enriched = await enrich_tasks(db, [task])
    return enriched[0]


@router.patch(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Update a task",
    description=(
        "Update any subset of task fields. Changing the status without an "
        "explicit position moves the task to the end of the new column."
    ),
    responses={
        200: {"description": "Task updated successfully"},
        400: {"description": "Project or assignee outside the workspace"},
        401: {"description": "Not a member or task does not exist"},
    },
)
async def update_task(
    task_id: UUID,
    task_data: TaskUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> TaskResponse:
    task, _ = await MembershipService(db).resolve_task(task_id, current_user)
    update_data = task_data.model_dump(exclude_unset=True)

    if update_data.get("project_id") is not None:
        await verify_project_in_workspace(db, update_data["project_id"], task.workspace_id)
    if update_data.get("assignee_id") is not None:
        await verify_assignee_in_workspace(db, update_data["assignee_id"], task.workspace_id)

    new_status = update_data.pop("status", None)
    new_position = update_data.pop("position", None)
    if new_status is not None and new_status.value != task.status and new_position is None:
        new_position = await next_position(db, task.workspace_id, new_status)
    if new_status is not None:
        task.status = new_status.value
    if new_position is not None:
        task.position = new_position

    for field, value in update_data.items():
        if field in ("name", "project_id", "due_date") and value is None:
            continue
        if field == "due_date":
            value = to_naive_utc(value)
        setattr(task, field, value)

    await db.commit()
    await db.refresh(task)
    return task


@router.delete(
    "/{task_id}",
    response_model=DeletedResponse,
    summary="Delete a task",
    responses={
        200: {"description": "Task deleted successfully"},
        401: {"description": "Not a member or task does not exist"},
        500: {"description": "Deletion failed"},
    },
)
async def delete_task_endpoint(
    task_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> DeletedResponse:
    await MembershipService(db).resolve_task(task_id, current_user)
    await delete_task(db, task_id)
    return DeletedResponse(id=task_id)


@router.post(
    "/{task_id}/move",
    response_model=TaskResponse,
    summary="Move a task",
    description="Move a task to another status column and/or between two neighbours.",
    responses={
        200: {"description": "Task moved successfully"},
        400: {"description": "Invalid neighbours"},
        401: {"description": "Not a member or task does not exist"},
    },
)
async def move_task_endpoint(
    task_id: UUID,
    move_data: TaskMove,
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> TaskResponse:
    task, _ = await MembershipService(db).resolve_task(task_id, current_user)
    await move_task(
        db,
        task,
        target_status=move_data.status,
        before_task_id=move_data.before_task_id,
        after_task_id=move_data.after_task_id,
        position=move_data.position,
    )
    await db.commit()
    await db.refresh(task)
    return task
