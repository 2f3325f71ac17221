"""Workspaces API endpoints.

Workspaces sit at the top of the Workspace > Project > Task hierarchy.
Creating one enrolls the caller as ADMIN; everyone else joins through the
workspace's invite code.

Access Control:
- Create/List: any authenticated user (list shows only own workspaces)
- Get/Info/Analytics: any member
- Update/Delete/Reset invite code: ADMIN only
- Join: any authenticated user holding the active code
"""

import logging
from datetime import datetime
from typing import Annotated, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Form, Query, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models.member import Member
from ..models.user import User
from ..models.workspace import Workspace
from ..schemas.analytics import AnalyticsResponse
from ..schemas.workspace import (
    DeletedResponse,
    JoinWorkspaceRequest,
    WorkspaceInfo,
    WorkspaceResponse,
)
from ..services.analytics_service import AnalyticsScope, compute_analytics
from ..services.auth_service import get_current_user
from ..services.invite_code_service import join_workspace, rotate_invite_code
from ..services.lifecycle_service import create_workspace, delete_workspace
from ..services.membership_service import MembershipService, unauthorized
from ..utils.forms import clean_image, clean_name, form_has_field

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/workspaces", tags=["Workspaces"])


async def _load_workspace(db: AsyncSession, workspace_id: UUID) -> Workspace:
    result = await db.execute(select(Workspace).where(Workspace.id == workspace_id))
    workspace = result.scalar_one_or_none()
    if workspace is None:
        raise unauthorized()
    return workspace


# ============================================================================
# Workspace CRUD
# ============================================================================


@router.post(
    "",
    response_model=WorkspaceResponse,
    summary="Create a new workspace",
    description="Create a workspace and become its first ADMIN member.",
    responses={
        200: {"description": "Workspace created successfully"},
        400: {"description": "Validation error"},
        401: {"description": "Not authenticated"},
    },
)
async def create_workspace_endpoint(
    current_user: Annotated[User, Depends(get_current_user)],
    name: str = Form(...),
    image: Optional[str] = Form(None),
    db: AsyncSession = Depends(get_db),
) -> WorkspaceResponse:
    workspace = await create_workspace(
        db,
        user=current_user,
        name=clean_name(name),
        image_url=clean_image(image),
    )
    return workspace


@router.get(
    "",
    response_model=List[WorkspaceResponse],
    summary="List my workspaces",
    description="List every workspace the current user is a member of, newest first.",
    responses={
        200: {"description": "Workspaces retrieved successfully"},
        401: {"description": "Not authenticated"},
    },
)
async def list_workspaces(
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> List[WorkspaceResponse]:
    result = await db.execute(
        select(Workspace)
        .join(Member, Member.workspace_id == Workspace.id)
        .where(Member.user_id == current_user.id)
        .order_by(Workspace.created_at.desc(), Workspace.id.desc())
    )
    return list(result.scalars().all())


@router.get(
    "/{workspace_id}",
    response_model=WorkspaceResponse,
    summary="Get a workspace by ID",
    responses={
        200: {"description": "Workspace retrieved successfully"},
        401: {"description": "Not a member or workspace does not exist"},
    },
)
async def get_workspace(
    workspace_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> WorkspaceResponse:
    await MembershipService(db).require_member(workspace_id, current_user)
    return await _load_workspace(db, workspace_id)


@router.get(
    "/{workspace_id}/info",
    response_model=WorkspaceInfo,
    summary="Get workspace summary",
    description="Name and image of a workspace. Requires membership.",
    responses={
        200: {"description": "Workspace summary retrieved successfully"},
        401: {"description": "Not a member or workspace does not exist"},
    },
)
async def get_workspace_info(
    workspace_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> WorkspaceInfo:
    await MembershipService(db).require_member(workspace_id, current_user)
    workspace = await _load_workspace(db, workspace_id)
    return WorkspaceInfo.model_validate(workspace)


@router.patch(
    "/{workspace_id}",
    response_model=WorkspaceResponse,
    summary="Update a workspace",
    description=(
        "Rename a workspace and/or replace its image. Only ADMIN members can "
        "update. An empty image value clears the current image."
    ),
    responses={
        200: {"description": "Workspace updated successfully"},
        400: {"description": "Validation error"},
        401: {"description": "Not an ADMIN of this workspace"},
    },
)
async def update_workspace(
    workspace_id: UUID,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    name: Optional[str] = Form(None),
    image: Optional[str] = Form(None),
    db: AsyncSession = Depends(get_db),
) -> WorkspaceResponse:
    await MembershipService(db).require_admin(workspace_id, current_user)
    workspace = await _load_workspace(db, workspace_id)

    if name is not None:
        workspace.name = clean_name(name)
    if await form_has_field(request, "image"):
        workspace.image_url = clean_image(image)

    await db.commit()
    await db.refresh(workspace)
    logger.info(f"Workspace {workspace_id} updated by user {current_user.id}")
    return workspace


@router.delete(
    "/{workspace_id}",
    response_model=DeletedResponse,
    summary="Delete a workspace",
    description=(
        "Delete a workspace with all of its projects, tasks and members. "
        "Only ADMIN members can delete."
    ),
    responses={
        200: {"description": "Workspace deleted successfully"},
        401: {"description": "Not an ADMIN of this workspace"},
        500: {"description": "A deletion step failed; earlier steps stay applied"},
    },
)
async def delete_workspace_endpoint(
    workspace_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> DeletedResponse:
    await MembershipService(db).require_admin(workspace_id, current_user)
    await delete_workspace(db, workspace_id)
    return DeletedResponse(id=workspace_id)


# ============================================================================
# Invite codes
# ============================================================================


@router.post(
    "/{workspace_id}/reset-invite-code",
    response_model=WorkspaceResponse,
    summary="Rotate the invite code",
    description="Replace the invite code. The previous code stops working immediately.",
    responses={
        200: {"description": "Invite code rotated"},
        401: {"description": "Not an ADMIN of this workspace"},
    },
)
async def reset_invite_code(
    workspace_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> WorkspaceResponse:
    await MembershipService(db).require_admin(workspace_id, current_user)
    workspace = await _load_workspace(db, workspace_id)
    return await rotate_invite_code(db, workspace)


@router.post(
    "/{workspace_id}/join",
    response_model=WorkspaceResponse,
    summary="Join a workspace",
    description="Become a MEMBER of a workspace using its current invite code.",
    responses={
        200: {"description": "Joined successfully"},
        400: {"description": "Already a member, or the invite code does not match"},
        401: {"description": "Not authenticated"},
    },
)
async def join_workspace_endpoint(
    workspace_id: UUID,
    join_data: JoinWorkspaceRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> WorkspaceResponse:
    return await join_workspace(db, workspace_id, join_data.code, current_user)


# ============================================================================
# Analytics
# ============================================================================


@router.get(
    "/{workspace_id}/analytics",
    response_model=AnalyticsResponse,
    summary="Workspace analytics",
    description="Task counts for this calendar month and the change since last month.",
    responses={
        200: {"description": "Analytics computed"},
        401: {"description": "Not a member or workspace does not exist"},
    },
)
async def get_workspace_analytics(
    workspace_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    as_of: Optional[datetime] = Query(None, description="Compute as of this instant (UTC)"),
    db: AsyncSession = Depends(get_db),
) -> AnalyticsResponse:
    member = await MembershipService(db).require_member(workspace_id, current_user)
    return await compute_analytics(
        db,
        AnalyticsScope(workspace_id=workspace_id),
        member_id=member.id,
        now=as_of,
    )
