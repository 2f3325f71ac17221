"""Pydantic schemas for Member model validation."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..models.member import MemberRole


class MemberResponse(BaseModel):
    """Schema for member response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Member ID (used as task assignee id)")
    workspace_id: UUID = Field(..., description="ID of the workspace")
    user_id: UUID = Field(..., description="ID of the user")
    role: MemberRole = Field(..., description="Role in the workspace")
    created_at: datetime = Field(..., description="When the user joined")


class MemberWithUser(MemberResponse):
    """Member enriched with identity details."""

    name: Optional[str] = Field(None, description="User display name")
    email: Optional[str] = Field(None, description="User email")


class MemberUpdate(BaseModel):
    """Schema for changing a member's role."""

    role: MemberRole = Field(
        ...,
        description="New role",
        examples=["ADMIN", "MEMBER"],
    )
