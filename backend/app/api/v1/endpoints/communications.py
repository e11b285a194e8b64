"""
Communications API - battalion broadcasts, threads and read state
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models import User
from app.modules.auth.dependencies import get_current_user, get_current_admin
from app.schemas.communication import (
    CommunicationDetail,
    CommunicationResponse,
    CommunicationStart,
    CommunicationStatistics,
    CommunicationSummary,
    CommunicationUpdate,
    MessageResponse,
    MessageStatusUpdate,
    ParticipantResponse,
    ParticipantsAdd,
    ReplyCreate,
)
from app.services.communication_service import communication_service
from app.utils.pagination import ListParams, list_params
from app.utils.responses import success_response, serialize, serialize_many

router = APIRouter()


def _summaries(items) -> list:
    return [
        CommunicationSummary.model_validate({
            **CommunicationResponse.model_validate(item["communication"]).model_dump(),
            "message_count": item["message_count"],
            "unread_count": item["unread_count"],
        }).model_dump(mode="json")
        for item in items
    ]


@router.get("")
async def list_communications(
    params: ListParams = Depends(list_params),
    current_user: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Admin list of every communication"""
    items, pagination = await communication_service.search(db, params)
    return success_response(
        "Communications retrieved successfully",
        serialize_many(CommunicationResponse, items),
        pagination,
    )


@router.post("/start", status_code=status.HTTP_201_CREATED)
async def start_communication(
    data: CommunicationStart,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Start a communication with every active user of the selected battalions"""
    communication = await communication_service.start(db, current_user, data.model_dump())
    return success_response("Communication started successfully", serialize(CommunicationResponse, communication))


@router.get("/user")
async def get_user_communications(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    items = await communication_service.visible_to(db, current_user)
    return success_response("Communications retrieved successfully", _summaries(items))


@router.get("/search/{term}")
async def search_communications(
    term: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    items = await communication_service.search_visible(db, current_user, term)
    return success_response("Communications retrieved successfully", _summaries(items))


@router.put("/messages/{message_id}/status")
async def update_message_status(
    message_id: int,
    data: MessageStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await communication_service.set_message_status(db, current_user, message_id, data.status)
    return success_response("Message status updated successfully", {"message_id": message_id, "status": data.status.value})


@router.get("/{communication_id}")
async def get_communication(
    communication_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    detail = await communication_service.detail(db, current_user, communication_id)
    body = CommunicationDetail.model_validate({
        **CommunicationResponse.model_validate(detail["communication"]).model_dump(),
        "participant_ids": detail["participant_ids"],
        "messages": detail["messages"],
        "message_count": detail["message_count"],
    })
    return success_response("Communication retrieved successfully", body.model_dump(mode="json"))


@router.get("/{communication_id}/messages")
async def get_communication_messages(
    communication_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Thread oldest first; marks the caller's unread messages read"""
    messages = await communication_service.thread(db, current_user, communication_id)
    return success_response("Messages retrieved successfully", serialize_many(MessageResponse, messages))


@router.post("/{communication_id}/reply", status_code=status.HTTP_201_CREATED)
async def reply_to_communication(
    communication_id: int,
    data: ReplyCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    message = await communication_service.reply(db, current_user, communication_id, data.message)
    return success_response("Reply sent successfully", serialize(MessageResponse, message))


@router.get("/{communication_id}/users")
async def get_participants(
    communication_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    participants = await communication_service.participants(db, current_user, communication_id)
    return success_response("Participants retrieved successfully", serialize_many(ParticipantResponse, participants))


@router.post("/{communication_id}/users")
async def add_participants(
    communication_id: int,
    data: ParticipantsAdd,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    added = await communication_service.add_participants(db, current_user, communication_id, data.user_ids)
    return success_response(f"{added} participants added successfully", {"added": added})


@router.delete("/{communication_id}/users/{user_id}")
async def remove_participant(
    communication_id: int,
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await communication_service.remove_participant(db, current_user, communication_id, user_id)
    return success_response("Participant removed successfully")


@router.get("/{communication_id}/statistics")
async def get_communication_statistics(
    communication_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    stats = await communication_service.statistics(db, current_user, communication_id)
    return success_response(
        "Communication statistics retrieved successfully",
        CommunicationStatistics.model_validate(stats).model_dump(mode="json"),
    )


@router.put("/{communication_id}")
async def update_communication(
    communication_id: int,
    data: CommunicationUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Creator or admin only"""
    communication = await communication_service.update_owned(
        db, current_user, communication_id, data.model_dump(exclude_unset=True)
    )
    return success_response("Communication updated successfully", serialize(CommunicationResponse, communication))


@router.delete("/{communication_id}")
async def delete_communication(
    communication_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Soft delete; creator or admin only"""
    await communication_service.delete_owned(db, current_user, communication_id)
    return success_response("Communication deleted successfully")
