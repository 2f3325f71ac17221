"""Hierarchy lifecycle manager for Workspace > Project > Task > Member.

Creation:
- A workspace and its creator's ADMIN membership are written in one commit.
- Projects are created under a workspace the caller already belongs to.

Deletion is a sequence of individually committed steps, not a transaction:
- Project: every task of the project, then the project.
- Workspace: every project (running the project sequence for each), then
  every member, then the workspace.

Each step is recorded as a StepResult tagged DELETED, ALREADY_ABSENT or
FAILED. Deleting a row that is already gone is ALREADY_ABSENT rather than an
error, so re-running an interrupted delete picks up where it stopped. A
failing step raises LifecycleError naming the stage; rows deleted by earlier
steps stay deleted.

Authorization is the caller's job and happens once at the entry point.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.member import Member, MemberRole
from ..models.project import Project
from ..models.task import Task
from ..models.user import User
from ..models.workspace import Workspace
from .invite_code_service import generate_invite_code

logger = logging.getLogger(__name__)


class LifecycleStage(str, Enum):
    """Named steps of the cascading delete sequences."""

    LIST_TASKS = "list_tasks"
    DELETE_TASK = "delete_task"
    DELETE_PROJECT = "delete_project"
    LIST_PROJECTS = "list_projects"
    LIST_MEMBERS = "list_members"
    DELETE_MEMBER = "delete_member"
    DELETE_WORKSPACE = "delete_workspace"


class StepOutcome(str, Enum):
    """Result of a single lifecycle step."""

    DELETED = "deleted"
    ALREADY_ABSENT = "already_absent"
    FAILED = "failed"


@dataclass(frozen=True)
class StepResult:
    """Outcome of one step in a delete sequence."""

    stage: LifecycleStage
    entity_id: Optional[UUID]
    outcome: StepOutcome
    error: Optional[str] = None


@dataclass
class LifecycleReport:
    """Ordered record of every step a delete sequence performed."""

    root_id: UUID
    root_kind: str
    steps: List[StepResult] = field(default_factory=list)

    def add(self, step: StepResult) -> None:
        self.steps.append(step)

    def count(self, stage: LifecycleStage, outcome: StepOutcome = StepOutcome.DELETED) -> int:
        """Number of steps of a stage that ended with the given outcome."""
        return sum(1 for s in self.steps if s.stage == stage and s.outcome == outcome)

    @property
    def failed(self) -> bool:
        return any(s.outcome == StepOutcome.FAILED for s in self.steps)


class LifecycleError(Exception):
    """A cascading delete step failed; earlier steps are not rolled back."""

    def __init__(
        self,
        stage: LifecycleStage,
        entity_id: Optional[UUID],
        details: str,
        report: Optional[LifecycleReport] = None,
    ):
        self.stage = stage
        self.entity_id = entity_id
        self.details = details
        self.report = report
        super().__init__(f"{stage.value} failed for {entity_id}: {details}")


# ============================================================================
# Creation
# ============================================================================


async def create_workspace(
    db: AsyncSession,
    user: User,
    name: str,
    image_url: Optional[str] = None,
) -> Workspace:
    """
    Create a workspace and enroll its creator as ADMIN.

    Both rows are flushed and committed together, so a workspace never exists
    without its first member.
    """
    workspace = Workspace(
        name=name,
        user_id=user.id,
        image_url=image_url,
        invite_code=generate_invite_code(),
    )
    db.add(workspace)
    await db.flush()

    db.add(
        Member(
            workspace_id=workspace.id,
            user_id=user.id,
            role=MemberRole.ADMIN.value,
        )
    )
    await db.commit()
    await db.refresh(workspace)

    logger.info(f"Workspace {workspace.id} created by user {user.id}")
    return workspace


async def create_project(
    db: AsyncSession,
    workspace_id: UUID,
    name: str,
    image_url: Optional[str] = None,
) -> Project:
    """Create a project inside a workspace the caller already belongs to."""
    project = Project(
        workspace_id=workspace_id,
        name=name,
        image_url=image_url,
    )
    db.add(project)
    await db.commit()
    await db.refresh(project)

    logger.info(f"Project {project.id} created in workspace {workspace_id}")
    return project


# ============================================================================
# Deletion steps
# ============================================================================


async def _list_ids(
    db: AsyncSession,
    statement,
    stage: LifecycleStage,
    parent_id: UUID,
    report: LifecycleReport,
) -> List[UUID]:
    """Run a listing step. An empty result is valid."""
    try:
        result = await db.execute(statement)
    except SQLAlchemyError as e:
        await db.rollback()
        report.add(StepResult(stage, parent_id, StepOutcome.FAILED, str(e)))
        logger.error(f"Lifecycle step {stage.value} failed for {parent_id}: {e}")
        raise LifecycleError(stage, parent_id, str(e), report) from e
    return [row[0] for row in result.all()]


async def _delete_row(
    db: AsyncSession,
    model,
    entity_id: UUID,
    stage: LifecycleStage,
    report: LifecycleReport,
) -> StepResult:
    """Delete one row and commit immediately."""
    try:
        result = await db.execute(
            delete(model)
            .where(model.id == entity_id)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        step = StepResult(stage, entity_id, StepOutcome.FAILED, str(e))
        report.add(step)
        logger.error(f"Lifecycle step {stage.value} failed for {entity_id}: {e}")
        raise LifecycleError(stage, entity_id, str(e), report) from e

    outcome = StepOutcome.DELETED if result.rowcount else StepOutcome.ALREADY_ABSENT
    step = StepResult(stage, entity_id, outcome)
    report.add(step)
    logger.debug(f"Lifecycle step {stage.value} {entity_id}: {outcome.value}")
    return step


async def delete_task(db: AsyncSession, task_id: UUID) -> StepResult:
    """Delete a single task."""
    report = LifecycleReport(root_id=task_id, root_kind="task")
    return await _delete_row(db, Task, task_id, LifecycleStage.DELETE_TASK, report)


async def delete_project(
    db: AsyncSession,
    project_id: UUID,
    report: Optional[LifecycleReport] = None,
) -> LifecycleReport:
    """
    Delete every task of a project, then the project.

    Args:
        db: Database session
        project_id: Project to delete
        report: Report to append to when running as part of a workspace delete

    Raises:
        LifecycleError: If any step fails
    """
    report = report or LifecycleReport(root_id=project_id, root_kind="project")
    logger.info(f"Deleting project {project_id}")

    task_ids = await _list_ids(
        db,
        select(Task.id).where(Task.project_id == project_id),
        LifecycleStage.LIST_TASKS,
        project_id,
        report,
    )
    for task_id in task_ids:
        await _delete_row(db, Task, task_id, LifecycleStage.DELETE_TASK, report)

    await _delete_row(db, Project, project_id, LifecycleStage.DELETE_PROJECT, report)

    logger.info(f"Project {project_id} deleted ({len(task_ids)} tasks)")
    return report


async def delete_workspace(db: AsyncSession, workspace_id: UUID) -> LifecycleReport:
    """
    Delete a workspace and everything under it.

    Order: tasks of each project, each project, members, the workspace.

    Raises:
        LifecycleError: If any step fails
    """
    report = LifecycleReport(root_id=workspace_id, root_kind="workspace")
    logger.info(f"Deleting workspace {workspace_id}")

    project_ids = await _list_ids(
        db,
        select(Project.id).where(Project.workspace_id == workspace_id),
        LifecycleStage.LIST_PROJECTS,
        workspace_id,
        report,
    )
    for project_id in project_ids:
        await delete_project(db, project_id, report)

    member_ids = await _list_ids(
        db,
        select(Member.id).where(Member.workspace_id == workspace_id),
        LifecycleStage.LIST_MEMBERS,
        workspace_id,
        report,
    )
    for member_id in member_ids:
        await _delete_row(db, Member, member_id, LifecycleStage.DELETE_MEMBER, report)

    await _delete_row(db, Workspace, workspace_id, LifecycleStage.DELETE_WORKSPACE, report)

    logger.info(
        f"Workspace {workspace_id} deleted ({len(project_ids)} projects, "
        f"{report.count(LifecycleStage.DELETE_TASK)} tasks, {len(member_ids)} members)"
    )
    return report
