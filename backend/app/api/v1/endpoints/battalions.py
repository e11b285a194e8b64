from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.api.v1.crud import register_crud_routes
from app.core.database import get_db
from app.models import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.geography import BattalionCreate, BattalionUpdate, BattalionResponse
from app.schemas.user import UserResponse
from app.services.geography_service import battalion_service
from app.utils.responses import success_response, serialize_many

router = APIRouter()


def battalion_filters(
    range_id: Optional[int] = Query(None),
    district_id: Optional[int] = Query(None),
) -> dict:
    return {"range_id": range_id, "district_id": district_id}


@router.get("/by-range/{range_id}")
async def get_battalions_by_range(
    range_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    battalions = await battalion_service.by_range(db, range_id)
    return success_response("Battalions retrieved successfully", serialize_many(BattalionResponse, battalions))


@router.get("/by-district/{district_id}")
async def get_battalions_by_district(
    district_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    battalions = await battalion_service.by_district(db, district_id)
    return success_response("Battalions retrieved successfully", serialize_many(BattalionResponse, battalions))


@router.get("/{battalion_id}/users")
async def get_battalion_users(
    battalion_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    users = await battalion_service.users(db, battalion_id)
    return success_response("Battalion users retrieved successfully", serialize_many(UserResponse, users))


register_crud_routes(
    router, battalion_service, BattalionCreate, BattalionUpdate, BattalionResponse, filters=battalion_filters
)
