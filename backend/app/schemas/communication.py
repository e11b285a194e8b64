"""
Communication Schemas - conversations, messages, participants
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from app.models.communication import MessageStatus
from app.schemas.common import AuditedResponse


class CommunicationStart(BaseModel):
    name: str = Field(..., min_length=1, max_length=250)
    subject: Optional[str] = Field(None, max_length=500)
    message: Optional[str] = None
    selected_battalions: List[int] = Field(default_factory=list)
    selected_battalion_names: List[str] = Field(default_factory=list)
    document: Optional[str] = Field(None, max_length=500, description="Uploaded file URL")


class CommunicationUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=250)
    subject: Optional[str] = Field(None, max_length=500)


class ReplyCreate(BaseModel):
    message: str = Field(..., min_length=1)


class ParticipantsAdd(BaseModel):
    user_ids: List[int] = Field(..., min_length=1)


class MessageStatusUpdate(BaseModel):
    status: MessageStatus


class AttachmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    filename: str


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    communication_id: int
    message: str
    created_by: Optional[int] = None
    created_date: datetime
    sender_name: Optional[str] = None
    update_status: Optional[str] = None
    attachments: List[AttachmentResponse] = []


class CommunicationResponse(AuditedResponse):
    name: str
    subject: Optional[str] = None
    message: Optional[str] = None
    battalion_id: Optional[int] = None
    selected_battalions: List[int] = []
    selected_battalion_names: List[str] = []


class CommunicationSummary(CommunicationResponse):
    message_count: int = 0
    unread_count: int = 0


class CommunicationDetail(CommunicationResponse):
    participant_ids: List[int] = []
    messages: List[MessageResponse] = []
    message_count: int = 0


class ParticipantResponse(BaseModel):
    user_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    battalion_id: Optional[int] = None


class CommunicationStatistics(BaseModel):
    total_messages: int
    total_participants: int
    read_count: int
    unread_count: int
    last_message_at: Optional[datetime] = None
