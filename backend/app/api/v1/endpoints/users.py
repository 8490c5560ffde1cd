"""Endpoints for the signed-in user's own profile."""

from fastapi import APIRouter, Depends

from app.core.dependencies import get_current_user
from app.models.user import User
from app.schemas.auth import UserPublic

router = APIRouter()


@router.get(
    "/profile",
    response_model=UserPublic,
    summary="My profile",
)
async def get_profile(current_user: User = Depends(get_current_user)) -> UserPublic:
    return UserPublic.model_validate(current_user)
