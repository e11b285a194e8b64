from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.crud import register_crud_routes
from app.core.database import get_db
from app.models import User
from app.modules.auth.dependencies import get_current_user, require_permission
from app.schemas.access import RoleCreate, RoleUpdate, RoleResponse
from app.services.access_service import role_service
from app.utils.responses import success_response, serialize_many

router = APIRouter()


@router.get("/search")
async def search_roles(
    q: str = Query(..., min_length=1, max_length=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Name search, at most 20 roles"""
    roles = await role_service.quick_search(db, q)
    return success_response("Roles retrieved successfully", serialize_many(RoleResponse, roles))


register_crud_routes(
    router, role_service, RoleCreate, RoleUpdate, RoleResponse, write_guard=require_permission()
)
