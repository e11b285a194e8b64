from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.api.v1.crud import register_crud_routes
from app.core.database import get_db
from app.models import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.common import CloneRequest, OrderUpdate
from app.schemas.questionnaire import ModuleCreate, ModuleUpdate, ModuleResponse, TopicResponse
from app.services.questionnaire_service import module_service
from app.utils.responses import success_response, serialize, serialize_many

router = APIRouter()


@router.get("/{module_id}/topics")
async def get_module_topics(
    module_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    topics = await module_service.topics(db, module_id)
    return success_response("Module topics retrieved successfully", serialize_many(TopicResponse, topics))


@router.patch("/{module_id}/order")
async def update_module_order(
    module_id: int,
    data: OrderUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    module = await module_service.set_priority(db, module_id, data.priority, current_user.id)
    return success_response("Module order updated successfully", serialize(ModuleResponse, module))


@router.post("/{module_id}/clone", status_code=status.HTTP_201_CREATED)
async def clone_module(
    module_id: int,
    data: Optional[CloneRequest] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Copy the module and its topics; default name '<name> (Copy)'"""
    module = await module_service.clone(db, module_id, data.name if data else None, current_user.id)
    return success_response("Module cloned successfully", serialize(ModuleResponse, module))


register_crud_routes(router, module_service, ModuleCreate, ModuleUpdate, ModuleResponse)
