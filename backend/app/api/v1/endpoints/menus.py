from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.crud import register_crud_routes
from app.core.database import get_db
from app.models import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.access import MenuCreate, MenuUpdate, MenuResponse, SubMenuResponse
from app.schemas.common import OrderUpdate
from app.services.access_service import menu_service
from app.utils.responses import success_response, serialize

router = APIRouter()


def _menu_tree(entries) -> list:
    return [
        {
            **serialize(MenuResponse, entry["menu"]),
            "sub_menus": [serialize(SubMenuResponse, sub_menu) for sub_menu in entry["sub_menus"]],
        }
        for entry in entries
    ]


@router.get("/user")
async def get_my_menus(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Menus of the current user's role with their role-visible sub-menus"""
    entries = await menu_service.menus_for_role(db, current_user.role_id)
    return success_response("User menus retrieved successfully", _menu_tree(entries))


@router.get("/user/{user_id}")
async def get_user_menus(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    entries = await menu_service.menus_for_user(db, user_id)
    return success_response("User menus retrieved successfully", _menu_tree(entries))


@router.patch("/{menu_id}/order")
async def update_menu_order(
    menu_id: int,
    data: OrderUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    menu = await menu_service.set_priority(db, menu_id, data.priority, current_user.id)
    return success_response("Menu order updated successfully", serialize(MenuResponse, menu))


register_crud_routes(router, menu_service, MenuCreate, MenuUpdate, MenuResponse)
