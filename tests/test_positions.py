"""Tests for the position allocator."""

from datetime import timedelta
from uuid import uuid4

import pytest
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from workhub.models.project import Project
from workhub.models.task import Task, TaskStatus
from workhub.models.workspace import Workspace
from workhub.services.position_service import (
    POSITION_STEP,
    REBALANCE_THRESHOLD,
    list_bucket,
    move_task,
    next_position,
    position_between,
    rebalance_bucket,
)
from workhub.utils.dates import utcnow


async def _add_task(
    db: AsyncSession,
    workspace: Workspace,
    project: Project,
    position: float,
    status: TaskStatus = TaskStatus.TODO,
    name: str = "Task",
) -> Task:
    task = Task(
        id=uuid4(),
        workspace_id=workspace.id,
        project_id=project.id,
        name=name,
        status=status.value,
        due_date=utcnow() + timedelta(days=1),
        position=position,
    )
    db.add(task)
    await db.commit()
    return task


class TestPositionBetween:
    """Tests for the pure midpoint helper."""

    def test_empty_bucket(self):
        assert position_between(None, None) == POSITION_STEP

    def test_append_after_last(self):
        assert position_between(3000.0, None) == 3000.0 + POSITION_STEP

    def test_insert_before_first(self):
        assert position_between(None, 1000.0) == 500.0

    def test_midpoint(self):
        assert position_between(1000.0, 2000.0) == 1500.0

    def test_collapsed_gap_needs_rebalance(self):
        """Gaps under the threshold return None."""
        assert position_between(1000.0, 1000.0 + REBALANCE_THRESHOLD / 2) is None
        assert position_between(2000.0, 1000.0) is None
        assert position_between(None, REBALANCE_THRESHOLD / 2) is None

    def test_repeated_halving_hits_threshold(self):
        """Inserting at the same spot eventually asks for a rebalance."""
        before, after = 1000.0, 2000.0
        for _ in range(60):
            middle = position_between(before, after)
            if middle is None:
                break
            after = middle
        else:
            pytest.fail("gap never collapsed")
        assert after - before < REBALANCE_THRESHOLD


@pytest.mark.asyncio
class TestNextPosition:
    """Tests for end-of-column allocation."""

    async def test_empty_bucket_starts_at_step(
        self, db_session: AsyncSession, test_workspace: Workspace
    ):
        assert await next_position(db_session, test_workspace.id, TaskStatus.TODO) == 1000.0

    async def test_appends_after_max(
        self, db_session: AsyncSession, test_workspace: Workspace, test_project: Project
    ):
        """The new key is the bucket maximum plus one step."""
        await _add_task(db_session, test_workspace, test_project, 1000.0)
        await _add_task(db_session, test_workspace, test_project, 4500.0)
        await _add_task(db_session, test_workspace, test_project, 9000.0, TaskStatus.DONE)

        assert await next_position(db_session, test_workspace.id, TaskStatus.TODO) == 5500.0
        assert await next_position(db_session, test_workspace.id, TaskStatus.DONE) == 10000.0
        assert await next_position(db_session, test_workspace.id, TaskStatus.BACKLOG) == 1000.0


@pytest.mark.asyncio
class TestMoveTask:
    """Tests for moving tasks between and within columns."""

    async def test_move_between_neighbours(
        self, db_session: AsyncSession, test_workspace: Workspace, test_project: Project
    ):
        first = await _add_task(db_session, test_workspace, test_project, 1000.0, name="a")
        second = await _add_task(db_session, test_workspace, test_project, 2000.0, name="b")
        moved = await _add_task(db_session, test_workspace, test_project, 3000.0, name="c")

        await move_task(db_session, moved, before_task_id=first.id, after_task_id=second.id)

        assert moved.position == 1500.0
        order = [t.name for t in await list_bucket(db_session, test_workspace.id, TaskStatus.TODO)]
        assert order == ["a", "c", "b"]

    async def test_move_below_task_with_follower(
        self, db_session: AsyncSession, test_workspace: Workspace, test_project: Project
    ):
        """Only the task above is named; the move lands between it and its follower."""
        first = await _add_task(db_session, test_workspace, test_project, 1000.0, name="a")
        await _add_task(db_session, test_workspace, test_project, 2000.0, name="b")
        moved = await _add_task(db_session, test_workspace, test_project, 3000.0, name="c")

        await move_task(db_session, moved, before_task_id=first.id)

        assert moved.position == 1500.0
        order = [t.name for t in await list_bucket(db_session, test_workspace.id, TaskStatus.TODO)]
        assert order == ["a", "c", "b"]

    async def test_move_above_task_with_predecessor(
        self, db_session: AsyncSession, test_workspace: Workspace, test_project: Project
    ):
        """Only the task below is named; the move lands between it and its predecessor."""
        await _add_task(db_session, test_workspace, test_project, 600.0, name="a")
        second = await _add_task(db_session, test_workspace, test_project, 1000.0, name="b")
        moved = await _add_task(db_session, test_workspace, test_project, 3000.0, name="c")

        await move_task(db_session, moved, after_task_id=second.id)

        assert moved.position == 800.0
        order = [t.name for t in await list_bucket(db_session, test_workspace.id, TaskStatus.TODO)]
        assert order == ["a", "c", "b"]

    async def test_move_to_other_column_appends(
        self, db_session: AsyncSession, test_workspace: Workspace, test_project: Project
    ):
        """Without neighbours a column change goes to the end of the new column."""
        await _add_task(db_session, test_workspace, test_project, 7000.0, TaskStatus.DONE)
        task = await _add_task(db_session, test_workspace, test_project, 1000.0)

        await move_task(db_session, task, target_status=TaskStatus.DONE)

        assert task.status == TaskStatus.DONE.value
        assert task.position == 8000.0

    async def test_collapsed_gap_triggers_rebalance(
        self, db_session: AsyncSession, test_workspace: Workspace, test_project: Project
    ):
        """A move into a collapsed gap renumbers the column first."""
        first = await _add_task(db_session, test_workspace, test_project, 1000.0, name="a")
        second = await _add_task(db_session, test_workspace, test_project, 1000.0005, name="b")
        moved = await _add_task(
            db_session, test_workspace, test_project, 1000.0, TaskStatus.BACKLOG, name="c"
        )

        await move_task(
            db_session,
            moved,
            target_status=TaskStatus.TODO,
            before_task_id=first.id,
            after_task_id=second.id,
        )

        assert first.position == 1000.0
        assert second.position == 2000.0
        assert moved.position == 1500.0
        order = [t.name for t in await list_bucket(db_session, test_workspace.id, TaskStatus.TODO)]
        assert order == ["a", "c", "b"]

    async def test_neighbour_in_other_column_rejected(
        self, db_session: AsyncSession, test_workspace: Workspace, test_project: Project
    ):
        other = await _add_task(db_session, test_workspace, test_project, 1000.0, TaskStatus.DONE)
        task = await _add_task(db_session, test_workspace, test_project, 1000.0)

        with pytest.raises(HTTPException) as exc_info:
            await move_task(db_session, task, before_task_id=other.id)

        assert exc_info.value.status_code == 400

    async def test_self_neighbour_rejected(
        self, db_session: AsyncSession, test_workspace: Workspace, test_project: Project
    ):
        task = await _add_task(db_session, test_workspace, test_project, 1000.0)

        with pytest.raises(HTTPException) as exc_info:
            await move_task(db_session, task, after_task_id=task.id)

        assert exc_info.value.status_code == 400

    async def test_rebalance_keeps_order(
        self, db_session: AsyncSession, test_workspace: Workspace, test_project: Project
    ):
        for i, position in enumerate((0.5, 0.5004, 0.5008)):
            await _add_task(db_session, test_workspace, test_project, position, name=str(i))

        tasks = await rebalance_bucket(db_session, test_workspace.id, TaskStatus.TODO)

        assert [t.name for t in tasks] == ["0", "1", "2"]
        assert [t.position for t in tasks] == [1000.0, 2000.0, 3000.0]
