from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.api.v1.crud import register_crud_routes
from app.core.database import get_db
from app.models import QuestionType, User
from app.modules.auth.dependencies import get_current_user
from app.schemas.common import CloneRequest, OrderUpdate, ReorderItem
from app.schemas.questionnaire import QuestionCreate, QuestionUpdate, QuestionResponse
from app.services.questionnaire_service import question_service
from app.utils.responses import success_response, serialize, serialize_many

router = APIRouter()


def question_filters(
    topic_id: Optional[int] = Query(None),
    sub_topic_id: Optional[int] = Query(None),
    type: Optional[QuestionType] = Query(None),
) -> dict:
    return {"topic_id": topic_id, "sub_topic_id": sub_topic_id, "type": type.value if type else None}


@router.get("/config/types")
async def get_question_types(current_user: User = Depends(get_current_user)):
    return success_response("Question types retrieved successfully", question_service.types())


@router.get("/by-topic/{topic_id}")
async def get_questions_by_topic(
    topic_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    questions = await question_service.by_topic(db, topic_id)
    return success_response("Questions retrieved successfully", serialize_many(QuestionResponse, questions))


@router.get("/by-sub-topic/{sub_topic_id}")
async def get_questions_by_sub_topic(
    sub_topic_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    questions = await question_service.by_sub_topic(db, sub_topic_id)
    return success_response("Questions retrieved successfully", serialize_many(QuestionResponse, questions))


@router.get("/by-type/{question_type}")
async def get_questions_by_type(
    question_type: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    questions = await question_service.by_type(db, question_type)
    return success_response("Questions retrieved successfully", serialize_many(QuestionResponse, questions))


@router.post("/bulk-create", status_code=status.HTTP_201_CREATED)
async def bulk_create_questions(
    questions: List[QuestionCreate],
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """All rows are created or none"""
    created = await question_service.bulk_create(db, [q.model_dump() for q in questions], current_user.id)
    return success_response(f"{len(created)} questions created successfully", serialize_many(QuestionResponse, created))


@router.put("/reorder")
async def reorder_questions(
    items: List[ReorderItem],
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    count = await question_service.reorder(db, items, current_user.id)
    return success_response("Questions reordered successfully", {"updated": count})


@router.patch("/{question_id}/order")
async def update_question_order(
    question_id: int,
    data: OrderUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    question = await question_service.set_priority(db, question_id, data.priority, current_user.id)
    return success_response("Question order updated successfully", serialize(QuestionResponse, question))


@router.post("/{question_id}/clone", status_code=status.HTTP_201_CREATED)
async def clone_question(
    question_id: int,
    data: Optional[CloneRequest] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    question = await question_service.clone(db, question_id, data.name if data else None, current_user.id)
    return success_response("Question cloned successfully", serialize(QuestionResponse, question))


register_crud_routes(
    router, question_service, QuestionCreate, QuestionUpdate, QuestionResponse, filters=question_filters
)
