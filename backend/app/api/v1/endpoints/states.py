from fastapi import APIRouter

from app.api.v1.crud import register_crud_routes
from app.schemas.geography import StateCreate, StateUpdate, StateResponse
from app.services.geography_service import state_service

router = APIRouter()

register_crud_routes(router, state_service, StateCreate, StateUpdate, StateResponse)
