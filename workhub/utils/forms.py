"""Normalization of multipart form fields shared by workspace and project endpoints."""

from typing import Optional

from fastapi import HTTPException, Request, status

NAME_MAX_LENGTH = 255
IMAGE_MAX_LENGTH = 2048


def clean_name(name: str) -> str:
    """Strip a name field and reject blank or oversized values with 400."""
    name = (name or "").strip()
    if not name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name is required",
        )
    if len(name) > NAME_MAX_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Name must be at most {NAME_MAX_LENGTH} characters",
        )
    return name


def clean_image(image: Optional[str]) -> Optional[str]:
    """An absent or empty image field means "no image"."""
    if image is None:
        return None
    image = image.strip()
    if not image:
        return None
    if len(image) > IMAGE_MAX_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Image reference must be at most {IMAGE_MAX_LENGTH} characters",
        )
    return image


async def form_has_field(request: Request, field: str) -> bool:
    """Whether the submitted form carries ``field`` at all, even with an empty value.

    FastAPI hands empty form values to endpoints as the parameter default,
    so an empty field and a missing one look the same without this check.
    """
    form = await request.form()
    return field in form
