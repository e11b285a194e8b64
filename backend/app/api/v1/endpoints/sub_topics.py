from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.api.v1.crud import register_crud_routes
from app.core.database import get_db
from app.models import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.questionnaire import SubTopicCreate, SubTopicUpdate, SubTopicResponse, QuestionResponse
from app.services.questionnaire_service import sub_topic_service
from app.utils.responses import success_response, serialize_many

router = APIRouter()


def sub_topic_filters(topic_id: Optional[int] = Query(None)) -> dict:
    return {"topic_id": topic_id}


@router.get("/by-topic/{topic_id}")
async def get_sub_topics_by_topic(
    topic_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    sub_topics = await sub_topic_service.by_topic(db, topic_id)
    return success_response("Sub-topics retrieved successfully", serialize_many(SubTopicResponse, sub_topics))


@router.get("/{sub_topic_id}/questions")
async def get_sub_topic_questions(
    sub_topic_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    questions = await sub_topic_service.questions(db, sub_topic_id)
    return success_response("Questions retrieved successfully", serialize_many(QuestionResponse, questions))


register_crud_routes(
    router, sub_topic_service, SubTopicCreate, SubTopicUpdate, SubTopicResponse, filters=sub_topic_filters
)
