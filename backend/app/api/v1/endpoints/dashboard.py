"""
Dashboard API - admin overview counts
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models import User
from app.modules.auth.dependencies import get_current_admin
from app.schemas.user import UserResponse
from app.services.dashboard_service import dashboard_service
from app.utils.responses import success_response, serialize_many

router = APIRouter()


@router.get("/overview")
async def get_overview(
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return success_response("Dashboard overview retrieved successfully", await dashboard_service.overview(db))


@router.get("/users/by-role")
async def get_users_by_role(
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return success_response("User counts retrieved successfully", await dashboard_service.users_by_role(db))


@router.get("/users/by-battalion")
async def get_users_by_battalion(
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return success_response("User counts retrieved successfully", await dashboard_service.users_by_battalion(db))


@router.get("/users/recent")
async def get_recent_users(
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    users = await dashboard_service.recent_users(db, limit)
    return success_response("Recent users retrieved successfully", serialize_many(UserResponse, users))


@router.get("/performance/by-month")
async def get_performance_by_month(
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Row count, success count and value total per month, oldest first"""
    data = await dashboard_service.performance_by_month(db)
    return success_response("Monthly performance retrieved successfully", data)


@router.get("/performance/by-module")
async def get_performance_by_module(
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    data = await dashboard_service.performance_by_module(db)
    return success_response("Module performance retrieved successfully", data)
