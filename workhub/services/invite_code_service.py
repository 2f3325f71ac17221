"""Invite code manager for workspace join codes.

Each workspace carries exactly one active code. Rotation replaces it
outright, so previously distributed codes stop working immediately.
Codes are short and not secret; they are drawn uniformly from an
alphanumeric alphabet and carry no information about the workspace.
"""

import logging
import secrets
import string
from typing import Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..models.member import Member, MemberRole
from ..models.user import User
from ..models.workspace import Workspace
from .membership_service import MembershipService

logger = logging.getLogger(__name__)

INVITE_CODE_ALPHABET = string.ascii_letters + string.digits

ALREADY_MEMBER_DETAIL = "Already a member"
INVALID_CODE_DETAIL = "Invalid invite code"


def generate_invite_code(length: Optional[int] = None) -> str:
    """
    Draw a random alphanumeric code.

    ``secrets.choice`` picks each character uniformly, so there is no modulo
    bias towards the start of the alphabet.

    Args:
        length: Number of characters, defaults to settings.invite_code_length
    """
    if length is None:
        length = settings.invite_code_length
    if length < 1:
        raise ValueError("Invite code length must be positive")
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))


async def rotate_invite_code(db: AsyncSession, workspace: Workspace) -> Workspace:
    """
    Replace the workspace's invite code.

    The caller must already have passed the ADMIN check.
    """
    previous = workspace.invite_code
    new_code = generate_invite_code()
    while new_code == previous:
        new_code = generate_invite_code()

    workspace.invite_code = new_code
    await db.commit()
    await db.refresh(workspace)

    logger.info(f"Invite code rotated for workspace {workspace.id}")
    return workspace


async def join_workspace(
    db: AsyncSession,
    workspace_id: UUID,
    code: str,
    user: User,
) -> Workspace:
    """
    Enroll a user as MEMBER if the code matches the active one exactly.

    Raises:
        HTTPException: 400 "Already a member" if the user already belongs to
            the workspace, 400 "Invalid invite code" if the code does not
            match (or the workspace does not exist)
    """
    membership = await MembershipService(db).find_membership(workspace_id, user.id)
    if membership is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ALREADY_MEMBER_DETAIL,
        )

    result = await db.execute(select(Workspace).where(Workspace.id == workspace_id))
    workspace = result.scalar_one_or_none()

    # Compared as-is: no case folding or trimming
    if workspace is None or not secrets.compare_digest(
        workspace.invite_code.encode(), code.encode()
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=INVALID_CODE_DETAIL,
        )

    db.add(
        Member(
            workspace_id=workspace_id,
            user_id=user.id,
            role=MemberRole.MEMBER.value,
        )
    )
    try:
        await db.commit()
    except IntegrityError:
        # Concurrent join by the same user won the unique constraint
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ALREADY_MEMBER_DETAIL,
        )

    await db.refresh(workspace)
    logger.info(f"User {user.id} joined workspace {workspace_id}")
    return workspace
