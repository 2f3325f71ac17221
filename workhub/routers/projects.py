"""Projects API endpoints.

Projects group tasks inside a workspace. Any member of the workspace can
create, rename and delete its projects.
"""

import logging
from datetime import datetime
from typing import Annotated, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Form, Query, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models.project import Project
from ..models.user import User
from ..schemas.analytics import AnalyticsResponse
from ..schemas.project import ProjectResponse
from ..schemas.workspace import DeletedResponse
from ..services.analytics_service import AnalyticsScope, compute_analytics
from ..services.auth_service import get_current_user
from ..services.lifecycle_service import create_project, delete_project
from ..services.membership_service import MembershipService
from ..utils.forms import clean_image, clean_name, form_has_field

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["Projects"])


@router.post(
    "",
    response_model=ProjectResponse,
    summary="Create a new project",
    responses={
        200: {"description": "Project created successfully"},
        400: {"description": "Validation error"},
        401: {"description": "Not a member of the workspace"},
    },
)
async def create_project_endpoint(
    current_user: Annotated[User, Depends(get_current_user)],
    name: str = Form(...),
    workspace_id: UUID = Form(..., alias="workspaceId"),
    image: Optional[str] = Form(None),
    db: AsyncSession = Depends(get_db),
) -> ProjectResponse:
    """
    Create a project in a workspace.

    - **name**: Project name
    - **workspaceId**: Workspace the project belongs to
    - **image**: Optional image reference
    """
    await MembershipService(db).require_member(workspace_id, current_user)
    return await create_project(
        db,
        workspace_id=workspace_id,
        name=clean_name(name),
        image_url=clean_image(image),
    )


@router.get(
    "",
    response_model=List[ProjectResponse],
    summary="List projects of a workspace",
    description="Projects of a workspace, newest first.",
    responses={
        200: {"description": "Projects retrieved successfully"},
        401: {"description": "Not a member of the workspace"},
    },
)
async def list_projects(
    current_user: Annotated[User, Depends(get_current_user)],
    workspace_id: UUID = Query(..., alias="workspaceId"),
    db: AsyncSession = Depends(get_db),
) -> List[ProjectResponse]:
    await MembershipService(db).require_member(workspace_id, current_user)

    result = await db.execute(
        select(Project)
        .where(Project.workspace_id == workspace_id)
        .order_by(Project.created_at.desc(), Project.id.desc())
    )
    return list(result.scalars().all())


@router.get(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Get a project by ID",
    responses={
        200: {"description": "Project retrieved successfully"},
        401: {"description": "Not a member or project does not exist"},
    },
)
async def get_project(
    project_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> ProjectResponse:
    project, _ = await MembershipService(db).resolve_project(project_id, current_user)
    return project


@router.patch(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Update a project",
    description="Rename a project and/or replace its image. An empty image value clears it.",
    responses={
        200: {"description": "Project updated successfully"},
        400: {"description": "Validation error"},
        401: {"description": "Not a member or project does not exist"},
    },
)
async def update_project(
    project_id: UUID,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    name: Optional[str] = Form(None),
    image: Optional[str] = Form(None),
    db: AsyncSession = Depends(get_db),
) -> ProjectResponse:
    project, _ = await MembershipService(db).resolve_project(project_id, current_user)

    if name is not None:
        project.name = clean_name(name)
    if await form_has_field(request, "image"):
        project.image_url = clean_image(image)

    await db.commit()
    await db.refresh(project)
    return project


@router.delete(
    "/{project_id}",
    response_model=DeletedResponse,
    summary="Delete a project",
    description="Delete a project and every task in it.",
    responses={
        200: {"description": "Project deleted successfully"},
        401: {"description": "Not a member or project does not exist"},
        500: {"description": "A deletion step failed; earlier steps stay applied"},
    },
)
async def delete_project_endpoint(
    project_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> DeletedResponse:
    await MembershipService(db).resolve_project(project_id, current_user)
    await delete_project(db, project_id)
    logger.info(f"Project {project_id} deleted by user {current_user.id}")
    return DeletedResponse(id=project_id)


@router.get(
    "/{project_id}/analytics",
    response_model=AnalyticsResponse,
    summary="Project analytics",
    description="Task counts for this calendar month and the change since last month.",
    responses={
        200: {"description": "Analytics computed"},
        401: {"description": "Not a member or project does not exist"},
    },
)
async def get_project_analytics(
    project_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    as_of: Optional[datetime] = Query(None, description="Compute as of this instant (UTC)"),
    db: AsyncSession = Depends(get_db),
) -> AnalyticsResponse:
    project, member = await MembershipService(db).resolve_project(project_id, current_user)
    return await compute_analytics(
        db,
        AnalyticsScope(project_id=project.id),
        member_id=member.id,
        now=as_of,
    )
