"""
Role assignment endpoints - which permissions, menus, sub-menus, topics
and questions a role holds
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models import User
from app.modules.auth.dependencies import get_current_user, require_permission
from app.schemas.access import PermissionResponse, RoleAssignmentUpdate, RoleResponse
from app.services.access_service import permission_handle_service
from app.utils.responses import success_response, serialize

router = APIRouter()


def _assignments(result: dict) -> dict:
    return {
        "role": serialize(RoleResponse, result["role"]),
        "permissions": [
            {**serialize(PermissionResponse, permission), "assigned": assigned}
            for permission, assigned in result["permissions"]
        ],
        "menu_ids": result["menu_ids"],
        "sub_menu_ids": result["sub_menu_ids"],
        "topic_ids": result["topic_ids"],
        "question_ids": result["question_ids"],
    }


@router.get("/{role_id}/check")
async def check_role_permission(
    role_id: int,
    url: str = Query(..., min_length=1, max_length=500),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await permission_handle_service.has_permission(db, role_id, url)
    return success_response("Permission check completed", {
        "has_permission": result["has_permission"],
        "permission": serialize(PermissionResponse, result["permission"]),
    })


@router.get("/{role_id}")
async def get_role_assignments(
    role_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await permission_handle_service.get_assignments(db, role_id)
    return success_response("Role permissions retrieved successfully", _assignments(result))


@router.post("/{role_id}")
async def update_role_assignments(
    role_id: int,
    data: RoleAssignmentUpdate,
    current_user: User = Depends(require_permission()),
    db: AsyncSession = Depends(get_db)
):
    """Each list given replaces the role's active assignments of that kind"""
    result = await permission_handle_service.update_assignments(
        db, role_id, data.model_dump(exclude_unset=True), current_user.id
    )
    return success_response("Role permissions updated successfully", _assignments(result))
