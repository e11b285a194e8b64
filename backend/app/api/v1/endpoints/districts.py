from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.api.v1.crud import register_crud_routes
from app.core.database import get_db
from app.models import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.geography import DistrictCreate, DistrictUpdate, DistrictResponse
from app.services.geography_service import district_service
from app.utils.responses import success_response, serialize_many

router = APIRouter()


def district_filters(state_id: Optional[int] = Query(None)) -> dict:
    return {"state_id": state_id}


@router.get("/by-state/{state_id}")
async def get_districts_by_state(
    state_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Active districts of one state"""
    districts = await district_service.by_state(db, state_id)
    return success_response("Districts retrieved successfully", serialize_many(DistrictResponse, districts))


register_crud_routes(
    router, district_service, DistrictCreate, DistrictUpdate, DistrictResponse, filters=district_filters
)
