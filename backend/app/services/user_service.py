"""
User Service - accounts, hierarchy placement, passwords and login
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import datetime
from typing import Any, Dict, Optional

from app.core.exceptions import (
    AuthenticationError,
    DuplicateResourceError,
    UserNotFoundError,
    ValidationError,
)
from app.core.logging_config import logger as app_logger
from app.core.security import (
    create_token_pair,
    decode_token,
    get_password_hash,
    verify_password,
)
from app.models import (
    User, Role, State, District, Range, Battalion, PerformanceStatistic, Communication,
)
from app.services.crud_service import CRUDService

SYSTEM_ADMIN = "SYSTEM_ADMIN"
RANGE_ADMIN = "RANGE_ADMIN"
BATTALION_USER = "BATTALION_USER"


def role_scope(user: User) -> str:
    """Access scope from the role name: 'Range Admin' -> RANGE_ADMIN"""
    if user.role is None or not user.role.role_name:
        return BATTALION_USER
    return "_".join(user.role.role_name.strip().upper().split())


def is_admin(user: User) -> bool:
    return bool(user.role and "admin" in (user.role.role_name or "").lower())


class UserService(CRUDService[User]):
    model = User
    label = "User"
    plural = "users"
    name_column = "email"
    search_columns = ("first_name", "last_name", "email", "mobile_no")
    sort_columns = ("first_name", "last_name", "email", "last_login")
    filter_columns = ("role_id", "state_id", "district_id", "range_id", "battalion_id")
    default_order = ("first_name", "last_name")
    parents = {
        "role_id": (Role, "Role"),
        "state_id": (State, "State"),
        "district_id": (District, "District"),
        "range_id": (Range, "Range"),
        "battalion_id": (Battalion, "Battalion"),
    }
    children = (
        (PerformanceStatistic, "user_id", "performance statistics"),
        (Communication, "created_by", "communications"),
    )

    async def get(self, db: AsyncSession, item_id: int) -> User:
        # populate_existing so role is reloaded after role_id changes
        result = await db.execute(
            select(User).where(User.id == item_id).execution_options(populate_existing=True)
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise UserNotFoundError(item_id)
        return user

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def create(self, db: AsyncSession, data: Dict[str, Any], user_id: Optional[int] = None) -> User:
        data = dict(data)
        data["email"] = data["email"].lower()
        if await self.get_by_email(db, data["email"]):
            raise DuplicateResourceError("User", "User with this email already exists")
        data["password"] = get_password_hash(data["password"])
        user = await super().create(db, data, user_id)
        return await self.get(db, user.id)

    async def update(self, db: AsyncSession, item_id: int, data: Dict[str, Any],
                     user_id: Optional[int] = None) -> User:
        data = dict(data)
        data.pop("password", None)
        if data.get("email"):
            data["email"] = data["email"].lower()
            existing = await self.get_by_email(db, data["email"])
            if existing and existing.id != item_id:
                raise DuplicateResourceError("User", "User with this email already exists")
        await super().update(db, item_id, data, user_id)
        return await self.get(db, item_id)

    async def verify(self, db: AsyncSession, item_id: int, user_id: Optional[int] = None) -> User:
        return await self.update(db, item_id, {"verified": True}, user_id)

    async def reset_password(self, db: AsyncSession, item_id: int, new_password: str,
                             user_id: Optional[int] = None) -> User:
        """Admin password reset; the user must change it on next login"""
        user = await self.get(db, item_id)
        user.password = get_password_hash(new_password)
        user.is_first = True
        user.updated_by = user_id
        user.updated_date = datetime.utcnow()
        await db.flush()
        app_logger.log_auth_event("password_reset", True, user.email, reset_by=user_id)
        return user

    # ==================== AUTH ====================

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> Dict[str, Any]:
        user = await self.get_by_email(db, email)
        if not user or not user.active or not verify_password(password, user.password):
            reason = "unknown email" if not user else ("inactive" if not user.active else "bad password")
            app_logger.log_auth_event("login", False, email, reason)
            raise AuthenticationError("Invalid email or password")

        user.last_login = datetime.utcnow()
        await db.flush()
        app_logger.log_auth_event("login", True, email, user_id=user.id)

        tokens = create_token_pair(user.id, user.email, user.role.role_name if user.role else None)
        return {**tokens, "user": user}

    async def refresh(self, db: AsyncSession, refresh_token: str) -> Dict[str, Any]:
        payload = decode_token(refresh_token, expected_type="refresh")
        sub = payload.get("sub")
        if not sub or not sub.isdigit():
            raise AuthenticationError("Invalid token payload")

        user = await db.get(User, int(sub))
        if not user or not user.active:
            raise AuthenticationError("User not found or inactive")

        return create_token_pair(user.id, user.email, user.role.role_name if user.role else None)

    async def change_password(self, db: AsyncSession, user: User, current_password: str,
                              new_password: str) -> None:
        if not verify_password(current_password, user.password):
            app_logger.log_auth_event("change_password", False, user.email, "wrong current password")
            raise ValidationError("Current password is incorrect", field="current_password")
        if current_password == new_password:
            raise ValidationError("New password must differ from the current password", field="new_password")

        user.password = get_password_hash(new_password)
        user.is_first = False
        user.updated_by = user.id
        user.updated_date = datetime.utcnow()
        await db.flush()
        app_logger.log_auth_event("change_password", True, user.email)

    async def profile(self, db: AsyncSession, user: User) -> Dict[str, Any]:
        """Current user with role and hierarchy names"""
        names: Dict[str, Optional[str]] = {}
        for key, model, column in (
            ("state_name", State, "state_name"),
            ("district_name", District, "district_name"),
            ("range_name", Range, "range_name"),
            ("battalion_name", Battalion, "battalion_name"),
        ):
            fk = getattr(user, key.replace("_name", "_id"))
            row = await db.get(model, fk) if fk else None
            names[key] = getattr(row, column) if row else None
        return {"user": user, **names}


user_service = UserService()
