"""Pydantic schemas for Project model validation."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProjectResponse(BaseModel):
    """Schema for project response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(
        ...,
        description="Unique project identifier",
    )
    workspace_id: UUID = Field(
        ...,
        description="ID of the owning workspace",
    )
    name: str = Field(
        ...,
        description="Project name",
    )
    image_url: Optional[str] = Field(
        None,
        description="Reference to the project image",
    )
    created_at: datetime = Field(
        ...,
        description="When the project was created",
    )
    updated_at: datetime = Field(
        ...,
        description="When the project was last updated",
    )
