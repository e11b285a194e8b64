from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.api.v1.crud import register_crud_routes
from app.core.database import get_db
from app.models import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.access import SubMenuCreate, SubMenuUpdate, SubMenuResponse
from app.services.access_service import sub_menu_service
from app.utils.responses import success_response, serialize_many

router = APIRouter()


def sub_menu_filters(menu_id: Optional[int] = Query(None)) -> dict:
    return {"menu_id": menu_id}


@router.get("/by-menu/{menu_id}")
async def get_sub_menus_by_menu(
    menu_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    sub_menus = await sub_menu_service.by_menu(db, menu_id)
    return success_response("Sub-menus retrieved successfully", serialize_many(SubMenuResponse, sub_menus))


register_crud_routes(
    router, sub_menu_service, SubMenuCreate, SubMenuUpdate, SubMenuResponse, filters=sub_menu_filters
)
