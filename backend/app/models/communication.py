from sqlalchemy import Column, String, Integer, Text, ForeignKey, UniqueConstraint, JSON
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base
from app.models.mixins import AuditMixin


class MessageStatus(str, enum.Enum):
    READ = "READ"
    UNREAD = "UNREAD"


class Communication(AuditMixin, Base):
    """A conversation broadcast to the users of one or more battalions"""
    __tablename__ = "communications"

    name = Column(String(250), nullable=False)
    subject = Column(String(500), nullable=True)
    message = Column(Text, nullable=True)
    battalion_id = Column(Integer, ForeignKey("battalions.id"), nullable=True)
    selected_battalions = Column(JSON, default=list, nullable=False)
    selected_battalion_names = Column(JSON, default=list, nullable=False)

    participants = relationship("CommunicationUser", back_populates="communication")
    messages = relationship(
        "CommunicationMessage",
        back_populates="communication",
        order_by="CommunicationMessage.created_date",
    )

    def __repr__(self):
        return f"<Communication {self.name}>"


class CommunicationUser(Base):
    """Participant of a communication"""
    __tablename__ = "communication_users"
    __table_args__ = (
        UniqueConstraint("communication_id", "user_id", name="uq_communication_user"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    communication_id = Column(Integer, ForeignKey("communications.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    communication = relationship("Communication", back_populates="participants")


class CommunicationMessage(AuditMixin, Base):
    __tablename__ = "communication_messages"

    communication_id = Column(Integer, ForeignKey("communications.id"), nullable=False, index=True)
    message = Column(Text, nullable=False, default="")

    communication = relationship("Communication", back_populates="messages")
    recipients = relationship("CommunicationMessageUser", back_populates="message")
    attachments = relationship("CommunicationAttachment", back_populates="message")


class CommunicationMessageUser(AuditMixin, Base):
    """Per-recipient delivery row carrying read state"""
    __tablename__ = "communication_message_users"
    __table_args__ = (
        UniqueConstraint("message_id", "user_id", name="uq_message_user"),
    )

    message_id = Column(Integer, ForeignKey("communication_messages.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    update_status = Column(String(10), default=MessageStatus.UNREAD.value, nullable=False)

    message = relationship("CommunicationMessage", back_populates="recipients")


class CommunicationAttachment(AuditMixin, Base):
    __tablename__ = "communication_attachments"

    message_id = Column(Integer, ForeignKey("communication_messages.id"), nullable=False, index=True)
    filename = Column(String(500), nullable=False)

    message = relationship("CommunicationMessage", back_populates="attachments")
