from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.api.v1.crud import register_crud_routes
from app.core.database import get_db
from app.models import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.common import CloneRequest, OrderUpdate, ReorderItem
from app.schemas.questionnaire import (
    TopicCreate, TopicUpdate, TopicResponse, SubTopicResponse, QuestionResponse,
)
from app.services.questionnaire_service import topic_service
from app.utils.responses import success_response, serialize, serialize_many

router = APIRouter()


def topic_filters(module_id: Optional[int] = Query(None)) -> dict:
    return {"module_id": module_id}


@router.get("/by-module/{module_id}")
async def get_topics_by_module(
    module_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    topics = await topic_service.by_module(db, module_id)
    return success_response("Topics retrieved successfully", serialize_many(TopicResponse, topics))


@router.put("/reorder")
async def reorder_topics(
    items: List[ReorderItem],
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    count = await topic_service.reorder(db, items, current_user.id)
    return success_response("Topics reordered successfully", {"updated": count})


@router.get("/{topic_id}/sub-topics")
async def get_topic_sub_topics(
    topic_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    sub_topics = await topic_service.sub_topics(db, topic_id)
    return success_response("Sub-topics retrieved successfully", serialize_many(SubTopicResponse, sub_topics))


@router.get("/{topic_id}/form-config")
async def get_topic_form_config(
    topic_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Topic with its active sub-topics and questions, ordered by priority"""
    config = await topic_service.form_config(db, topic_id)
    return success_response("Form configuration retrieved successfully", {
        "topic": serialize(TopicResponse, config["topic"]),
        "sub_topics": serialize_many(SubTopicResponse, config["sub_topics"]),
        "questions": serialize_many(QuestionResponse, config["questions"]),
    })


@router.patch("/{topic_id}/order")
async def update_topic_order(
    topic_id: int,
    data: OrderUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    topic = await topic_service.set_priority(db, topic_id, data.priority, current_user.id)
    return success_response("Topic order updated successfully", serialize(TopicResponse, topic))


@router.post("/{topic_id}/clone", status_code=status.HTTP_201_CREATED)
async def clone_topic(
    topic_id: int,
    data: Optional[CloneRequest] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    topic = await topic_service.clone(db, topic_id, data.name if data else None, current_user.id)
    return success_response("Topic cloned successfully", serialize(TopicResponse, topic))


register_crud_routes(router, topic_service, TopicCreate, TopicUpdate, TopicResponse, filters=topic_filters)
