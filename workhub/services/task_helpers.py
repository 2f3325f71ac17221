"""Shared helper functions for task and member responses.

Stored rows only hold foreign keys. Projects and assignees are joined here on
read, with one query per related table for the whole page of tasks.
"""

from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.member import Member
from ..models.project import Project
from ..models.task import Task
from ..schemas.member import MemberWithUser
from ..schemas.project import ProjectResponse
from ..schemas.task import TaskResponse, TaskWithRelations


def get_member_with_user(member: Member) -> MemberWithUser:
    """Convert a Member (with its joined User) to MemberWithUser."""
    user = member.user
    return MemberWithUser(
        id=member.id,
        workspace_id=member.workspace_id,
        user_id=member.user_id,
        role=member.role,
        created_at=member.created_at,
        name=user.name if user else None,
        email=user.email if user else None,
    )


async def enrich_tasks(db: AsyncSession, tasks: Iterable[Task]) -> List[TaskWithRelations]:
    """Attach project and assignee objects to each task."""
    tasks = list(tasks)
    project_ids = {task.project_id for task in tasks}
    assignee_ids = {task.assignee_id for task in tasks if task.assignee_id}

    projects: Dict[UUID, Project] = {}
    if project_ids:
        result = await db.execute(select(Project).where(Project.id.in_(project_ids)))
        projects = {project.id: project for project in result.scalars().all()}

    assignees: Dict[UUID, Member] = {}
    if assignee_ids:
        result = await db.execute(select(Member).where(Member.id.in_(assignee_ids)))
        assignees = {member.id: member for member in result.unique().scalars().all()}

    enriched = []
    for task in tasks:
        project: Optional[Project] = projects.get(task.project_id)
        assignee: Optional[Member] = assignees.get(task.assignee_id)
        enriched.append(
            TaskWithRelations(
                **TaskResponse.model_validate(task).model_dump(),
                project=ProjectResponse.model_validate(project) if project else None,
                assignee=get_member_with_user(assignee) if assignee else None,
            )
        )
    return enriched
