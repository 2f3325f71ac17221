"""Pydantic schemas for Workspace model validation."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class WorkspaceResponse(BaseModel):
    """Schema for workspace response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(
        ...,
        description="Unique workspace identifier",
    )
    name: str = Field(
        ...,
        description="Workspace name",
    )
    user_id: UUID = Field(
        ...,
        description="ID of the user who created the workspace",
    )
    image_url: Optional[str] = Field(
        None,
        description="Reference to the workspace image",
    )
    invite_code: str = Field(
        ...,
        description="Current join code",
    )
    created_at: datetime = Field(
        ...,
        description="When the workspace was created",
    )
    updated_at: datetime = Field(
        ...,
        description="When the workspace was last updated",
    )


class WorkspaceInfo(BaseModel):
    """Public summary of a workspace shown on the join page."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    image_url: Optional[str] = None


class JoinWorkspaceRequest(BaseModel):
    """Schema for joining a workspace with an invite code."""

    code: str = Field(
        ...,
        min_length=1,
        max_length=32,
        description="Invite code exactly as distributed (case-sensitive)",
        examples=["aB3dE9"],
    )


class DeletedResponse(BaseModel):
    """Identifier of a deleted entity."""

    id: UUID
