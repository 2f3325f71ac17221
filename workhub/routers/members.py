"""Workspace member management API endpoints.

Access Control:
- List members: any member of the workspace
- Change role: ADMIN only
- Remove member: ADMIN, or the member removing themself (leaving)

A workspace always keeps at least one member: the only remaining member can
neither be removed nor downgraded.
"""

import logging
from typing import Annotated, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models.member import Member, MemberRole
from ..models.user import User
from ..schemas.member import MemberResponse, MemberUpdate, MemberWithUser
from ..schemas.workspace import DeletedResponse
from ..services.auth_service import get_current_user
from ..services.membership_service import MembershipService, unauthorized
from ..services.task_helpers import get_member_with_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/members", tags=["Members"])


async def _member_count(db: AsyncSession, workspace_id: UUID) -> int:
    result = await db.execute(
        select(func.count(Member.id)).where(Member.workspace_id == workspace_id)
    )
    return result.scalar() or 0


@router.get(
    "",
    response_model=List[MemberWithUser],
    summary="List workspace members",
    description="Members of a workspace with their name and email, oldest first.",
    responses={
        200: {"description": "Members retrieved successfully"},
        401: {"description": "Not a member of the workspace"},
    },
)
async def list_members(
    current_user: Annotated[User, Depends(get_current_user)],
    workspace_id: UUID = Query(..., alias="workspaceId"),
    db: AsyncSession = Depends(get_db),
) -> List[MemberWithUser]:
    await MembershipService(db).require_member(workspace_id, current_user)

    result = await db.execute(
        select(Member)
        .where(Member.workspace_id == workspace_id)
        .order_by(Member.created_at.asc(), Member.id.asc())
    )
    return [get_member_with_user(m) for m in result.unique().scalars().all()]


@router.patch(
    "/{member_id}",
    response_model=MemberResponse,
    summary="Change a member's role",
    responses={
        200: {"description": "Role updated"},
        400: {"description": "Cannot downgrade the only member"},
        401: {"description": "Not an ADMIN of the member's workspace"},
    },
)
async def update_member_role(
    member_id: UUID,
    update_data: MemberUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> MemberResponse:
    service = MembershipService(db)
    target, caller = await service.resolve_member(member_id, current_user)
    if not caller.is_admin:
        raise unauthorized()

    if (
        update_data.role == MemberRole.MEMBER
        and await _member_count(db, target.workspace_id) == 1
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot downgrade the only member",
        )

    target.role = update_data.role.value
    await db.commit()
    await db.refresh(target)

    logger.info(
        f"Member {member_id} role set to {target.role} by user {current_user.id}"
    )
    return target


@router.delete(
    "/{member_id}",
    response_model=DeletedResponse,
    summary="Remove a member",
    description="Remove a member from a workspace. Members may remove themselves.",
    responses={
        200: {"description": "Member removed"},
        400: {"description": "Cannot remove the only member"},
        401: {"description": "Not an ADMIN and not removing yourself"},
    },
)
async def remove_member(
    member_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> DeletedResponse:
    service = MembershipService(db)
    target, caller = await service.resolve_member(member_id, current_user)
    if caller.id != target.id and not caller.is_admin:
        raise unauthorized()

    if await _member_count(db, target.workspace_id) == 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot remove the only member",
        )

    await db.delete(target)
    await db.commit()

    logger.info(f"Member {member_id} removed by user {current_user.id}")
    return DeletedResponse(id=member_id)
