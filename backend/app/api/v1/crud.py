"""
Standard resource routes.

register_crud_routes() adds the list/active/get/create/update/delete,
activate/deactivate/toggle-status and stats routes for one service.
Call it after the resource's own routes so literal paths such as
/by-state/{id} or /reorder are matched before /{item_id}.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Callable, Dict, Type

from pydantic import BaseModel

from app.core.database import get_db
from app.models import User
from app.modules.auth.dependencies import get_current_user
from app.services.crud_service import CRUDService
from app.utils.pagination import ListParams, list_params
from app.utils.responses import success_response, serialize, serialize_many


def no_filters() -> Dict[str, Any]:
    return {}


def register_crud_routes(
    router: APIRouter,
    service: CRUDService,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    response_schema: Type[BaseModel],
    filters: Callable[..., Dict[str, Any]] = no_filters,
    write_guard: Callable[..., Any] = get_current_user,
) -> APIRouter:
    label = service.label
    plural = service.plural.replace("-", " ").capitalize()

    @router.get("")
    async def list_items(
        params: ListParams = Depends(list_params),
        column_filters: Dict[str, Any] = Depends(filters),
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
    ):
        items, pagination = await service.search(db, params, column_filters)
        return success_response(
            f"{plural} retrieved successfully",
            serialize_many(response_schema, items),
            pagination,
        )

    @router.get("/active")
    async def list_active_items(
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
    ):
        items = await service.list_active(db)
        return success_response(f"Active {plural.lower()} retrieved successfully", serialize_many(response_schema, items))

    @router.get("/stats/overview")
    async def item_statistics(
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
    ):
        return success_response(f"{label} statistics retrieved successfully", await service.stats(db))

    @router.get("/{item_id}")
    async def get_item(
        item_id: int,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
    ):
        item = await service.get(db, item_id)
        return success_response(f"{label} retrieved successfully", serialize(response_schema, item))

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_item(
        data: create_schema,
        current_user: User = Depends(write_guard),
        db: AsyncSession = Depends(get_db)
    ):
        item = await service.create(db, data.model_dump(), current_user.id)
        return success_response(f"{label} created successfully", serialize(response_schema, item))

    @router.put("/{item_id}")
    async def update_item(
        item_id: int,
        data: update_schema,
        current_user: User = Depends(write_guard),
        db: AsyncSession = Depends(get_db)
    ):
        item = await service.update(db, item_id, data.model_dump(exclude_unset=True), current_user.id)
        return success_response(f"{label} updated successfully", serialize(response_schema, item))

    @router.delete("/{item_id}")
    async def delete_item(
        item_id: int,
        current_user: User = Depends(write_guard),
        db: AsyncSession = Depends(get_db)
    ):
        await service.delete(db, item_id)
        return success_response(f"{label} deleted successfully")

    @router.patch("/{item_id}/activate")
    async def activate_item(
        item_id: int,
        current_user: User = Depends(write_guard),
        db: AsyncSession = Depends(get_db)
    ):
        item = await service.set_active(db, item_id, True, current_user.id)
        return success_response(f"{label} activated successfully", serialize(response_schema, item))

    @router.patch("/{item_id}/deactivate")
    async def deactivate_item(
        item_id: int,
        current_user: User = Depends(write_guard),
        db: AsyncSession = Depends(get_db)
    ):
        item = await service.set_active(db, item_id, False, current_user.id)
        return success_response(f"{label} deactivated successfully", serialize(response_schema, item))

    @router.patch("/{item_id}/toggle-status")
    async def toggle_item_status(
        item_id: int,
        current_user: User = Depends(write_guard),
        db: AsyncSession = Depends(get_db)
    ):
        item = await service.toggle_status(db, item_id, current_user.id)
        state = "activated" if item.active else "deactivated"
        return success_response(f"{label} {state} successfully", serialize(response_schema, item))

    return router
