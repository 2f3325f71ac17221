"""Membership directory: the single source of truth for access control.

Every endpoint that reads or mutates a Workspace, Project or Task resolves
the owning workspace of its target and asks this service for the caller's
membership before doing anything else.

Permission Model:
- ADMIN: everything a MEMBER can do, plus workspace edit/delete, invite code
  rotation and member role management
- MEMBER: read the workspace, create/edit/delete projects and tasks

Failures are always a bare 401 "Unauthorized". A missing entity reached
through a membership lookup is reported the same way so callers cannot
probe which ids exist.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.member import Member, MemberRole
from ..models.project import Project
from ..models.task import Task
from ..models.user import User

logger = logging.getLogger(__name__)

UNAUTHORIZED_DETAIL = "Unauthorized"


def unauthorized() -> HTTPException:
    """Build the generic authorization failure."""
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=UNAUTHORIZED_DETAIL,
    )


class MembershipService:
    """
    Resolves (workspace, user) memberships and enforces role gates.

    Args:
        db: SQLAlchemy async database session
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_membership(
        self,
        workspace_id: UUID,
        user_id: UUID,
    ) -> Optional[Member]:
        """
        Look up the membership of a user in a workspace.

        Returns:
            The Member record, or None if the user does not belong to it.
        """
        result = await self.db.execute(
            select(Member).where(
                Member.workspace_id == workspace_id,
                Member.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def require_member(self, workspace_id: UUID, user: User) -> Member:
        """Return the caller's membership or raise 401."""
        member = await self.find_membership(workspace_id, user.id)
        if member is None:
            logger.debug(f"User {user.id} is not a member of workspace {workspace_id}")
            raise unauthorized()
        return member

    async def require_admin(self, workspace_id: UUID, user: User) -> Member:
        """Return the caller's ADMIN membership or raise 401."""
        member = await self.require_member(workspace_id, user)
        if member.role != MemberRole.ADMIN.value:
            logger.debug(f"User {user.id} lacks ADMIN in workspace {workspace_id}")
            raise unauthorized()
        return member

    async def resolve_project(self, project_id: UUID, user: User) -> tuple[Project, Member]:
        """
        Load a project and check membership of its workspace.

        Raises:
            HTTPException: 401 if the project does not exist or the caller is
                not a member of its workspace
        """
        result = await self.db.execute(select(Project).where(Project.id == project_id))
        project = result.scalar_one_or_none()
        if project is None:
            raise unauthorized()
        member = await self.require_member(project.workspace_id, user)
        return project, member

    async def resolve_task(self, task_id: UUID, user: User) -> tuple[Task, Member]:
        """
        Load a task and check membership of its workspace.

        Raises:
            HTTPException: 401 if the task does not exist or the caller is
                not a member of its workspace
        """
        result = await self.db.execute(select(Task).where(Task.id == task_id))
        task = result.scalar_one_or_none()
        if task is None:
            raise unauthorized()
        member = await self.require_member(task.workspace_id, user)
        return task, member

    async def resolve_member(self, member_id: UUID, user: User) -> tuple[Member, Member]:
        """
        Load a membership record and the caller's own membership in the same workspace.

        Returns:
            (target member, caller member)
        """
        result = await self.db.execute(select(Member).where(Member.id == member_id))
        target = result.scalar_one_or_none()
        if target is None:
            raise unauthorized()
        caller = await self.require_member(target.workspace_id, user)
        return target, caller
