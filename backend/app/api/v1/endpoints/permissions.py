from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.crud import register_crud_routes
from app.core.database import get_db
from app.models import User
from app.modules.auth.dependencies import get_current_user, require_permission
from app.schemas.access import PermissionCreate, PermissionUpdate, PermissionResponse
from app.services.access_service import permission_service
from app.utils.responses import success_response, serialize

router = APIRouter()


@router.get("/by-code/{code}")
async def get_permission_by_code(
    code: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    permission = await permission_service.by_code(db, code)
    return success_response("Permission retrieved successfully", serialize(PermissionResponse, permission))


register_crud_routes(
    router, permission_service, PermissionCreate, PermissionUpdate, PermissionResponse,
    write_guard=require_permission(),
)
