from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional

from app.core.database import get_db
from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.logging_config import set_user_id
from app.core.security import decode_token
from app.models import User
from app.services.access_service import permission_handle_service
from app.services.user_service import SYSTEM_ADMIN, is_admin, role_scope

security = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Get current authenticated user"""
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    payload = decode_token(credentials.credentials, expected_type="access")

    user_id = payload.get("sub")
    if not user_id or not str(user_id).isdigit():
        raise AuthenticationError("Invalid token payload")

    result = await db.execute(select(User).where(User.id == int(user_id)))
    user = result.scalar_one_or_none()

    if not user:
        raise AuthenticationError("User not found")

    if not user.active:
        raise AuthenticationError("User account is inactive")

    # rate limiter keys on this; logs pick up the context var
    request.state.user_id = str(user.id)
    set_user_id(str(user.id))
    return user


async def get_current_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """Get current admin user (role name contains 'admin')"""
    if not is_admin(current_user):
        raise AuthorizationError("Admin access required")
    return current_user


def require_permission():
    """
    Route permission guard.

    The request path is matched against the active permission URLs and the
    user's role must hold that permission. SYSTEM_ADMIN passes unchecked.

    Usage:
        @router.post("")
        async def create_role(current_user: User = Depends(require_permission())):
            ...
    """
    async def checker(
        request: Request,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
    ) -> User:
        if role_scope(current_user) == SYSTEM_ADMIN:
            return current_user

        result = await permission_handle_service.has_permission(db, current_user.role_id, request.url.path)
        if not result["has_permission"]:
            raise AuthorizationError("You do not have permission to perform this action")
        return current_user

    return checker
