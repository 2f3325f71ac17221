"""Position allocator for manual task ordering within status columns.

Tasks are ordered inside a (workspace, status) bucket by a sparse float key.
New tasks go to the end of their bucket at ``max + POSITION_STEP``. Moving a
task between two neighbours takes the midpoint of their keys, so a reorder
touches a single row. Repeated insertion between the same pair halves the
gap each time; once it falls below REBALANCE_THRESHOLD the bucket is
renumbered to POSITION_STEP, 2 * POSITION_STEP, ... in its current order.

Allocation is "read max, then insert" without a lock. Two concurrent inserts
can receive the same key; sorting then falls back to created_at and id.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.task import Task, TaskStatus

logger = logging.getLogger(__name__)

POSITION_STEP = 1000.0
REBALANCE_THRESHOLD = 0.001


def bucket_order():
    """Stable sort order for tasks inside a bucket."""
    return (Task.position.asc(), Task.created_at.asc(), Task.id.asc())


async def next_position(
    db: AsyncSession,
    workspace_id: UUID,
    task_status: TaskStatus,
) -> float:
    """
    Position for a task appended to the end of a bucket.

    Returns:
        Current maximum position + POSITION_STEP, or POSITION_STEP when the
        bucket is empty
    """
    result = await db.execute(
        select(func.max(Task.position)).where(
            Task.workspace_id == workspace_id,
            Task.status == TaskStatus(task_status).value,
        )
    )
    current_max = result.scalar()
    if current_max is None:
        return POSITION_STEP
    return float(current_max) + POSITION_STEP


def position_between(before: Optional[float], after: Optional[float]) -> Optional[float]:
    """
    Key strictly between two neighbours.

    Args:
        before: Position of the task that will sit directly above, if any
        after: Position of the task that will sit directly below, if any

    Returns:
        The new position, or None when the neighbours are too close (or out
        of order) and the bucket needs rebalancing first
    """
    if before is None and after is None:
        return POSITION_STEP
    if after is None:
        return before + POSITION_STEP
    if before is None:
        # Keep keys positive: halve towards zero
        if after <= REBALANCE_THRESHOLD:
            return None
        return after / 2
    if after - before < REBALANCE_THRESHOLD:
        return None
    return (before + after) / 2


async def list_bucket(
    db: AsyncSession,
    workspace_id: UUID,
    task_status: TaskStatus,
) -> List[Task]:
    """All tasks of a bucket in display order."""
    result = await db.execute(
        select(Task)
        .where(
            Task.workspace_id == workspace_id,
            Task.status == TaskStatus(task_status).value,
        )
        .order_by(*bucket_order())
    )
    return list(result.scalars().all())


async def rebalance_bucket(
    db: AsyncSession,
    workspace_id: UUID,
    task_status: TaskStatus,
) -> List[Task]:
    """
    Renumber a bucket to evenly spaced positions, keeping its order.

    Changes are flushed, not committed; the caller owns the commit.
    """
    tasks = await list_bucket(db, workspace_id, task_status)
    for index, task in enumerate(tasks, start=1):
        task.position = index * POSITION_STEP
    await db.flush()

    logger.info(
        f"Rebalanced {len(tasks)} tasks in bucket {workspace_id}/{TaskStatus(task_status).value}"
    )
    return tasks


async def _neighbour(
    db: AsyncSession,
    task_id: Optional[UUID],
    workspace_id: UUID,
    task_status: TaskStatus,
) -> Optional[Task]:
    """Load a neighbour task and check it sits in the target bucket."""
    if task_id is None:
        return None
    result = await db.execute(select(Task).where(Task.id == task_id))
    neighbour = result.scalar_one_or_none()
    if (
        neighbour is None
        or neighbour.workspace_id != workspace_id
        or neighbour.status != TaskStatus(task_status).value
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Neighbour task not found in the target column",
        )
    return neighbour


async def _adjacent(db: AsyncSession, neighbour: Task, moved: Task, step: int) -> Optional[Task]:
    """
    Task directly below (step=1) or above (step=-1) a neighbour in its bucket.

    The moved task is left out, since it is about to leave its current slot.
    """
    bucket = [
        t
        for t in await list_bucket(db, neighbour.workspace_id, TaskStatus(neighbour.status))
        if t.id != moved.id
    ]
    index = next(i for i, t in enumerate(bucket) if t.id == neighbour.id) + step
    if 0 <= index < len(bucket):
        return bucket[index]
    return None


async def move_task(
    db: AsyncSession,
    task: Task,
    target_status: Optional[TaskStatus] = None,
    before_task_id: Optional[UUID] = None,
    after_task_id: Optional[UUID] = None,
    position: Optional[float] = None,
) -> Task:
    """
    Move a task within its bucket or into another status column.

    With an explicit position that key is used as-is. With neighbours, the
    key is placed between them (rebalancing the bucket once if the gap has
    collapsed). When only one neighbour is given, the other side is the task
    currently adjacent to it. With neither, the task is appended to the end
    of the column.

    Changes are flushed, not committed; the caller owns the commit.

    Raises:
        HTTPException: 400 if a neighbour is missing, outside the target
            column, or is the moved task itself
    """
    new_status = TaskStatus(target_status or task.status)

    if task.id in (before_task_id, after_task_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A task cannot be its own neighbour",
        )

    if position is not None:
        new_position = float(position)
    elif before_task_id is None and after_task_id is None:
        if new_status.value == task.status:
            new_position = task.position
        else:
            new_position = await next_position(db, task.workspace_id, new_status)
    else:
        before = await _neighbour(db, before_task_id, task.workspace_id, new_status)
        after = await _neighbour(db, after_task_id, task.workspace_id, new_status)
        # A single neighbour is paired with whatever currently sits next to it
        if after is None:
            after = await _adjacent(db, before, task, step=1)
        elif before is None:
            before = await _adjacent(db, after, task, step=-1)
        new_position = position_between(
            before.position if before else None,
            after.position if after else None,
        )
        if new_position is None:
            await rebalance_bucket(db, task.workspace_id, new_status)
            new_position = position_between(
                before.position if before else None,
                after.position if after else None,
            )
        if new_position is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Neighbour tasks are not adjacent",
            )

    task.status = new_status.value
    task.position = new_position
    await db.flush()
    return task
