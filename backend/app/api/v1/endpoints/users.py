"""
Users Management API

Standard list/get/create/update/delete routes plus:
- /self and /profile for the signed-in user
- verification and admin password reset
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.api.v1.crud import register_crud_routes
from app.core.database import get_db
from app.models import User
from app.modules.auth.dependencies import get_current_user, get_current_admin
from app.schemas.user import (
    AdminPasswordReset,
    ProfileUpdate,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from app.services.user_service import user_service
from app.utils.responses import success_response, serialize

router = APIRouter()


def user_filters(
    role_id: Optional[int] = Query(None),
    state_id: Optional[int] = Query(None),
    district_id: Optional[int] = Query(None),
    range_id: Optional[int] = Query(None),
    battalion_id: Optional[int] = Query(None),
) -> dict:
    return {
        "role_id": role_id,
        "state_id": state_id,
        "district_id": district_id,
        "range_id": range_id,
        "battalion_id": battalion_id,
    }


@router.get("/self")
async def get_self(current_user: User = Depends(get_current_user)):
    return success_response("User retrieved successfully", serialize(UserResponse, current_user))


@router.put("/profile")
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Own names, phones and image only"""
    user = await user_service.update(db, current_user.id, data.model_dump(exclude_unset=True), current_user.id)
    return success_response("Profile updated successfully", serialize(UserResponse, user))


@router.patch("/{user_id}/verify")
async def verify_user(
    user_id: int,
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    user = await user_service.verify(db, user_id, current_user.id)
    return success_response("User verified successfully", serialize(UserResponse, user))


@router.post("/{user_id}/change-password")
async def reset_user_password(
    user_id: int,
    data: AdminPasswordReset,
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Admin reset; the user is asked to change it again on next login"""
    await user_service.reset_password(db, user_id, data.new_password, current_user.id)
    return success_response("Password changed successfully")


register_crud_routes(router, user_service, UserCreate, UserUpdate, UserResponse, filters=user_filters)
