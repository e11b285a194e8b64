from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.api.v1.crud import register_crud_routes
from app.core.database import get_db
from app.models import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.geography import RangeCreate, RangeUpdate, RangeResponse, BattalionResponse
from app.schemas.user import UserResponse
from app.services.geography_service import range_service
from app.utils.responses import success_response, serialize_many

router = APIRouter()


def range_filters(district_id: Optional[int] = Query(None)) -> dict:
    return {"district_id": district_id}


@router.get("/by-district/{district_id}")
async def get_ranges_by_district(
    district_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    ranges = await range_service.by_district(db, district_id)
    return success_response("Ranges retrieved successfully", serialize_many(RangeResponse, ranges))


@router.get("/{range_id}/users")
async def get_range_users(
    range_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Users assigned to the range"""
    users = await range_service.users(db, range_id)
    return success_response("Range users retrieved successfully", serialize_many(UserResponse, users))


@router.get("/{range_id}/battalions")
async def get_range_battalions(
    range_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    battalions = await range_service.battalions(db, range_id)
    return success_response("Range battalions retrieved successfully", serialize_many(BattalionResponse, battalions))


register_crud_routes(router, range_service, RangeCreate, RangeUpdate, RangeResponse, filters=range_filters)
