"""Analytics engine: month-over-month task count deltas.

For a workspace or a project and an as-of instant, five task predicates are
counted for tasks created this calendar month and last calendar month:

- all tasks           (created_at strictly inside the range)
- assigned to caller  (created_at strictly inside the range)
- incomplete          (status != DONE, range bounds inclusive)
- complete            (status == DONE, range bounds inclusive)
- overdue             (status != DONE and due_date < now, bounds inclusive)

The strict/inclusive split differs per metric and must be kept exactly as
listed. Each metric is its own pair of count queries. Differences are plain
subtraction, overdue included.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.task import Task, TaskStatus
from ..schemas.analytics import AnalyticsResponse
from ..utils.dates import month_range, previous_month, to_naive_utc, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyticsScope:
    """Which tasks the analytics are computed over."""

    workspace_id: Optional[UUID] = None
    project_id: Optional[UUID] = None

    def __post_init__(self):
        if (self.workspace_id is None) == (self.project_id is None):
            raise ValueError("Exactly one of workspace_id or project_id is required")

    def condition(self):
        if self.project_id is not None:
            return Task.project_id == self.project_id
        return Task.workspace_id == self.workspace_id


@dataclass(frozen=True)
class MonthWindow:
    """Inclusive bounds of a calendar month."""

    start: datetime
    end: datetime

    def strict(self):
        """created_at strictly between start and end."""
        return (Task.created_at > self.start, Task.created_at < self.end)

    def inclusive(self):
        """created_at between start and end, bounds included."""
        return (Task.created_at >= self.start, Task.created_at <= self.end)


def month_windows(now: datetime) -> tuple[MonthWindow, MonthWindow]:
    """(this month, last month) windows for an as-of instant."""
    this_start, this_end = month_range(now)
    last_start, last_end = month_range(previous_month(now))
    return MonthWindow(this_start, this_end), MonthWindow(last_start, last_end)


async def _count(db: AsyncSession, *conditions) -> int:
    result = await db.execute(select(func.count(Task.id)).where(*conditions))
    return result.scalar() or 0


async def compute_analytics(
    db: AsyncSession,
    scope: AnalyticsScope,
    member_id: UUID,
    now: Optional[datetime] = None,
) -> AnalyticsResponse:
    """
    Compute the ten analytics fields for a scope.

    Args:
        db: Database session
        scope: Workspace or project to count tasks in
        member_id: Membership id of the caller (for the "assigned" metric)
        now: As-of instant, defaults to the current UTC time

    Returns:
        AnalyticsResponse with counts for this month and differences
        against last month
    """
    now = to_naive_utc(now) if now is not None else utcnow()
    this_month, last_month = month_windows(now)
    in_scope = scope.condition()
    not_done = Task.status != TaskStatus.DONE.value
    done = Task.status == TaskStatus.DONE.value
    overdue = Task.due_date < now

    task_count = await _count(db, in_scope, *this_month.strict())
    last_task_count = await _count(db, in_scope, *last_month.strict())

    assigned = Task.assignee_id == member_id
    assigned_task_count = await _count(db, in_scope, assigned, *this_month.strict())
    last_assigned_task_count = await _count(db, in_scope, assigned, *last_month.strict())

    incomplete_task_count = await _count(db, in_scope, not_done, *this_month.inclusive())
    last_incomplete_task_count = await _count(db, in_scope, not_done, *last_month.inclusive())

    complete_task_count = await _count(db, in_scope, done, *this_month.inclusive())
    last_complete_task_count = await _count(db, in_scope, done, *last_month.inclusive())

    overdue_task_count = await _count(db, in_scope, not_done, overdue, *this_month.inclusive())
    last_overdue_task_count = await _count(
        db, in_scope, not_done, overdue, *last_month.inclusive()
    )

    logger.debug(
        f"Analytics for {scope} as of {now.isoformat()}: "
        f"{task_count} tasks this month, {last_task_count} last month"
    )

    return AnalyticsResponse(
        task_count=task_count,
        task_difference=task_count - last_task_count,
        assigned_task_count=assigned_task_count,
        assigned_task_difference=assigned_task_count - last_assigned_task_count,
        complete_task_count=complete_task_count,
        complete_task_difference=complete_task_count - last_complete_task_count,
        incomplete_task_count=incomplete_task_count,
        incomplete_task_difference=incomplete_task_count - last_incomplete_task_count,
        overdue_task_count=overdue_task_count,
        overdue_task_difference=overdue_task_count - last_overdue_task_count,
    )
