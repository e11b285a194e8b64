from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.logging_config import logger
from app.core.rate_limiter import auth_rate_limit
from app.models import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.user import (
    ChangePasswordRequest,
    RefreshTokenRequest,
    UserLogin,
    UserResponse,
)
from app.services.user_service import user_service
from app.utils.responses import success_response, serialize

router = APIRouter()


@router.post("/login")
@auth_rate_limit()
async def login(
    request: Request,
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Login with email and password (rate limited: 5/min)"""
    result = await user_service.authenticate(db, credentials.email, credentials.password)
    user = result.pop("user")
    return success_response("Login successful", {**result, "user": serialize(UserResponse, user)})


@router.post("/refresh-token")
async def refresh_token(
    data: RefreshTokenRequest,
    db: AsyncSession = Depends(get_db)
):
    tokens = await user_service.refresh(db, data.refresh_token)
    return success_response("Token refreshed successfully", tokens)


@router.get("/me")
async def get_me(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Current user with role and hierarchy names"""
    profile = await user_service.profile(db, current_user)
    user = profile.pop("user")
    return success_response("User retrieved successfully", {**serialize(UserResponse, user), **profile})


@router.post("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await user_service.change_password(db, current_user, data.current_password, data.new_password)
    return success_response("Password changed successfully")


@router.post("/logout")
async def logout(current_user: User = Depends(get_current_user)):
    """Tokens are stateless; the event is only logged"""
    logger.log_auth_event("logout", True, current_user.email, user_id=current_user.id)
    return success_response("Logged out successfully")
