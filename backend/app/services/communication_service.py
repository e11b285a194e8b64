"""
Communication Service - battalion broadcasts and their message threads

Handles:
- Starting a communication for the users of the selected battalions
- Visibility rules (admin, battalion membership, creator, participant)
- Threads, replies, per-recipient read state and attachments
- Participant management and thread statistics
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Set

from app.core.config import settings
from app.core.exceptions import (
    AccessDeniedError,
    AuthorizationError,
    ResourceNotFoundError,
    ValidationError,
)
from app.models import (
    Battalion,
    Communication,
    CommunicationAttachment,
    CommunicationMessage,
    CommunicationMessageUser,
    CommunicationUser,
    MessageStatus,
    User,
)
from app.services.crud_service import CRUDService
from app.services.user_service import is_admin


def strip_upload_prefix(url: str, prefix: str) -> str:
    """'/uploads/communications/a.pdf' -> 'a.pdf'"""
    if prefix in url:
        return url.split(prefix, 1)[1]
    return url.rsplit("/", 1)[-1]


class CommunicationService(CRUDService[Communication]):
    model = Communication
    label = "Communication"
    plural = "communications"
    name_column = "name"
    search_columns = ("name", "subject")
    sort_columns = ("name", "subject")
    default_order = ("created_date",)

    def base_query(self):
        # soft-deleted threads are hidden from every read
        return select(Communication).where(Communication.active.is_(True))

    # ==================== ACCESS ====================

    async def participant_ids(self, db: AsyncSession, communication_id: int) -> Set[int]:
        result = await db.execute(
            select(CommunicationUser.user_id).where(CommunicationUser.communication_id == communication_id)
        )
        return set(result.scalars().all())

    @staticmethod
    def _in_battalion_scope(user: User, communication: Communication) -> bool:
        selected = communication.selected_battalions or []
        return communication.created_by == user.id or (
            user.battalion_id is not None and user.battalion_id in selected
        )

    async def get_active(self, db: AsyncSession, communication_id: int) -> Communication:
        communication = await self.get(db, communication_id)
        if not communication.active:
            raise ResourceNotFoundError(self.label, communication_id)
        return communication

    async def check_access(
        self,
        db: AsyncSession,
        user: User,
        communication: Communication,
        require_participant: bool = True
    ) -> None:
        if is_admin(user):
            return
        allowed = self._in_battalion_scope(user, communication)
        if allowed and require_participant and communication.created_by != user.id:
            allowed = user.id in await self.participant_ids(db, communication.id)
        if not allowed:
            raise AccessDeniedError("You do not have access to this communication")

    # ==================== START / LIST ====================

    async def start(self, db: AsyncSession, user: User, data: Dict[str, Any]) -> Communication:
        battalion_ids = list(dict.fromkeys(data.get("selected_battalions") or []))
        if not battalion_ids:
            raise ValidationError("At least one battalion must be selected", field="selected_battalions")

        result = await db.execute(select(Battalion.id).where(Battalion.id.in_(battalion_ids)))
        missing = set(battalion_ids) - set(result.scalars().all())
        if missing:
            raise ResourceNotFoundError("Battalion", sorted(missing)[0])

        result = await db.execute(
            select(User.id).where(User.battalion_id.in_(battalion_ids), User.active.is_(True))
        )
        participants = set(result.scalars().all()) | {user.id}

        communication = Communication(
            name=data["name"],
            subject=data.get("subject"),
            message=data.get("message"),
            battalion_id=user.battalion_id,
            selected_battalions=battalion_ids,
            selected_battalion_names=data.get("selected_battalion_names") or [],
            active=True,
            created_by=user.id,
            updated_by=user.id,
        )
        db.add(communication)
        await db.flush()

        for participant_id in sorted(participants):
            db.add(CommunicationUser(communication_id=communication.id, user_id=participant_id))

        await self._post_message(
            db, communication.id, user.id, data.get("message") or "", participants, data.get("document")
        )
        await db.refresh(communication)

        self.logger.info(
            f"Communication {communication.id} started by user {user.id}",
            extra={"participants": len(participants), "battalions": battalion_ids},
        )
        return communication

    async def _post_message(
        self,
        db: AsyncSession,
        communication_id: int,
        sender_id: int,
        text: str,
        recipients: Iterable[int],
        document: Optional[str] = None
    ) -> CommunicationMessage:
        message = CommunicationMessage(
            communication_id=communication_id,
            message=text,
            active=True,
            created_by=sender_id,
            updated_by=sender_id,
        )
        db.add(message)
        await db.flush()

        for recipient_id in sorted(set(recipients)):
            status = MessageStatus.READ if recipient_id == sender_id else MessageStatus.UNREAD
            db.add(CommunicationMessageUser(
                message_id=message.id,
                user_id=recipient_id,
                update_status=status.value,
                created_by=sender_id,
                updated_by=sender_id,
            ))

        if document:
            db.add(CommunicationAttachment(
                message_id=message.id,
                filename=strip_upload_prefix(document, settings.COMMUNICATION_DOCS_PREFIX),
                created_by=sender_id,
                updated_by=sender_id,
            ))

        await db.flush()
        return message

    async def _counts(self, db: AsyncSession, user_id: int, communication_ids: List[int]) -> Dict[int, Dict[str, int]]:
        counts = {cid: {"message_count": 0, "unread_count": 0} for cid in communication_ids}
        if not communication_ids:
            return counts

        result = await db.execute(
            select(CommunicationMessage.communication_id, func.count(CommunicationMessage.id))
            .where(CommunicationMessage.communication_id.in_(communication_ids))
            .group_by(CommunicationMessage.communication_id)
        )
        for cid, count in result.all():
            counts[cid]["message_count"] = count

        result = await db.execute(
            select(CommunicationMessage.communication_id, func.count(CommunicationMessageUser.id))
            .join(CommunicationMessageUser, CommunicationMessageUser.message_id == CommunicationMessage.id)
            .where(
                CommunicationMessage.communication_id.in_(communication_ids),
                CommunicationMessageUser.user_id == user_id,
                CommunicationMessageUser.update_status == MessageStatus.UNREAD.value,
            )
            .group_by(CommunicationMessage.communication_id)
        )
        for cid, count in result.all():
            counts[cid]["unread_count"] = count
        return counts

    async def visible_to(self, db: AsyncSession, user: User) -> List[Dict[str, Any]]:
        """Active communications the user may see, newest first, with counts"""
        query = select(Communication).where(Communication.active.is_(True))
        if not is_admin(user):
            participating = select(CommunicationUser.communication_id).where(CommunicationUser.user_id == user.id)
            query = query.where(
                (Communication.created_by == user.id) | Communication.id.in_(participating)
            )
        result = await db.execute(query.order_by(Communication.created_date.desc(), Communication.id.desc()))
        communications = [
            c for c in result.scalars().all()
            if is_admin(user) or self._in_battalion_scope(user, c)
        ]

        counts = await self._counts(db, user.id, [c.id for c in communications])
        return [{"communication": c, **counts[c.id]} for c in communications]

    async def search_visible(self, db: AsyncSession, user: User, term: str) -> List[Dict[str, Any]]:
        needle = term.strip().lower()
        return [
            item for item in await self.visible_to(db, user)
            if any(
                needle in (value or "").lower()
                for value in (item["communication"].name, item["communication"].subject, item["communication"].message)
            )
        ]

    # ==================== THREAD ====================

    async def _messages(self, db: AsyncSession, communication_id: int, user_id: int) -> List[Dict[str, Any]]:
        result = await db.execute(
            select(CommunicationMessage)
            .where(CommunicationMessage.communication_id == communication_id)
            .order_by(CommunicationMessage.created_date, CommunicationMessage.id)
        )
        messages = list(result.scalars().all())
        message_ids = [m.id for m in messages]
        if not message_ids:
            return []

        sender_ids = {m.created_by for m in messages if m.created_by is not None}
        senders: Dict[int, str] = {}
        if sender_ids:
            result = await db.execute(
                select(User.id, User.first_name, User.last_name).where(User.id.in_(sender_ids))
            )
            senders = {uid: " ".join(p for p in (first, last) if p) for uid, first, last in result.all()}

        result = await db.execute(
            select(CommunicationAttachment)
            .where(CommunicationAttachment.message_id.in_(message_ids))
            .order_by(CommunicationAttachment.id)
        )
        attachments: Dict[int, list] = {}
        for attachment in result.scalars().all():
            attachments.setdefault(attachment.message_id, []).append(
                {"id": attachment.id, "filename": attachment.filename}
            )

        result = await db.execute(
            select(CommunicationMessageUser.message_id, CommunicationMessageUser.update_status)
            .where(
                CommunicationMessageUser.message_id.in_(message_ids),
                CommunicationMessageUser.user_id == user_id,
            )
        )
        statuses = dict(result.all())

        return [
            {
                "id": m.id,
                "communication_id": m.communication_id,
                "message": m.message,
                "created_by": m.created_by,
                "created_date": m.created_date,
                "sender_name": senders.get(m.created_by),
                "update_status": statuses.get(m.id),
                "attachments": attachments.get(m.id, []),
            }
            for m in messages
        ]

    async def detail(self, db: AsyncSession, user: User, communication_id: int) -> Dict[str, Any]:
        communication = await self.get_active(db, communication_id)
        await self.check_access(db, user, communication)
        messages = await self._messages(db, communication_id, user.id)
        return {
            "communication": communication,
            "participant_ids": sorted(await self.participant_ids(db, communication_id)),
            "messages": messages,
            "message_count": len(messages),
        }

    async def thread(self, db: AsyncSession, user: User, communication_id: int) -> List[Dict[str, Any]]:
        """Messages oldest first; the caller's unread rows become READ"""
        communication = await self.get_active(db, communication_id)
        if not is_admin(user) and user.id not in await self.participant_ids(db, communication_id):
            raise AccessDeniedError("Only participants can read this communication")

        messages = await self._messages(db, communication_id, user.id)

        result = await db.execute(
            select(CommunicationMessageUser)
            .join(CommunicationMessage, CommunicationMessage.id == CommunicationMessageUser.message_id)
            .where(
                CommunicationMessage.communication_id == communication.id,
                CommunicationMessageUser.user_id == user.id,
                CommunicationMessageUser.update_status == MessageStatus.UNREAD.value,
            )
        )
        unread = list(result.scalars().all())
        for row in unread:
            row.update_status = MessageStatus.READ.value
            row.updated_by = user.id
        if unread:
            await db.flush()
            self.logger.debug(f"Marked {len(unread)} messages read for user {user.id}")

        return messages

    async def reply(self, db: AsyncSession, user: User, communication_id: int, text: str) -> Dict[str, Any]:
        communication = await self.get_active(db, communication_id)
        await self.check_access(db, user, communication, require_participant=False)

        participants = await self.participant_ids(db, communication_id)
        if user.id not in participants:
            db.add(CommunicationUser(communication_id=communication_id, user_id=user.id))
            participants.add(user.id)

        recipients = set(participants)
        if communication.created_by is not None:
            recipients.add(communication.created_by)

        message = await self._post_message(db, communication_id, user.id, text, recipients)
        communication.updated_by = user.id
        communication.updated_date = datetime.utcnow()
        await db.flush()

        messages = await self._messages(db, communication_id, user.id)
        return next(m for m in messages if m["id"] == message.id)

    # ==================== PARTICIPANTS ====================

    async def participants(self, db: AsyncSession, user: User, communication_id: int) -> List[Dict[str, Any]]:
        communication = await self.get_active(db, communication_id)
        await self.check_access(db, user, communication)
        result = await db.execute(
            select(User.id, User.first_name, User.last_name, User.email, User.battalion_id)
            .join(CommunicationUser, CommunicationUser.user_id == User.id)
            .where(CommunicationUser.communication_id == communication_id)
            .order_by(User.first_name, User.id)
        )
        return [
            {"user_id": uid, "first_name": first, "last_name": last, "email": email, "battalion_id": battalion_id}
            for uid, first, last, email, battalion_id in result.all()
        ]

    async def add_participants(
        self,
        db: AsyncSession,
        user: User,
        communication_id: int,
        user_ids: List[int]
    ) -> int:
        """Returns how many users were added; existing participants are skipped"""
        communication = await self.get_active(db, communication_id)
        await self.check_access(db, user, communication)

        wanted = set(user_ids)
        result = await db.execute(select(User.id).where(User.id.in_(wanted)))
        missing = wanted - set(result.scalars().all())
        if missing:
            raise ResourceNotFoundError("User", sorted(missing)[0])

        new_ids = wanted - await self.participant_ids(db, communication_id)
        for user_id in sorted(new_ids):
            db.add(CommunicationUser(communication_id=communication_id, user_id=user_id))
        await db.flush()

        self.logger.info(f"Added {len(new_ids)} participants to communication {communication_id}")
        return len(new_ids)

    async def remove_participant(
        self,
        db: AsyncSession,
        user: User,
        communication_id: int,
        user_id: int
    ) -> None:
        communication = await self.get_active(db, communication_id)
        await self.check_access(db, user, communication)

        result = await db.execute(
            select(CommunicationUser).where(
                CommunicationUser.communication_id == communication_id,
                CommunicationUser.user_id == user_id,
            )
        )
        participant = result.scalar_one_or_none()
        if participant is None:
            raise ResourceNotFoundError("Participant", user_id)
        await db.delete(participant)
        await db.flush()

    async def set_message_status(
        self,
        db: AsyncSession,
        user: User,
        message_id: int,
        status: MessageStatus
    ) -> None:
        result = await db.execute(
            select(CommunicationMessageUser).where(
                CommunicationMessageUser.message_id == message_id,
                CommunicationMessageUser.user_id == user.id,
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise ResourceNotFoundError("Message", message_id)
        row.update_status = MessageStatus(status).value
        row.updated_by = user.id
        row.updated_date = datetime.utcnow()
        await db.flush()

    async def statistics(self, db: AsyncSession, user: User, communication_id: int) -> Dict[str, Any]:
        communication = await self.get_active(db, communication_id)
        await self.check_access(db, user, communication)

        message_filter = CommunicationMessage.communication_id == communication_id
        total_messages, last_message_at = (await db.execute(
            select(func.count(CommunicationMessage.id), func.max(CommunicationMessage.created_date))
            .where(message_filter)
        )).one()

        result = await db.execute(
            select(CommunicationMessageUser.update_status, func.count(CommunicationMessageUser.id))
            .join(CommunicationMessage, CommunicationMessage.id == CommunicationMessageUser.message_id)
            .where(message_filter)
            .group_by(CommunicationMessageUser.update_status)
        )
        by_status = dict(result.all())

        return {
            "total_messages": total_messages or 0,
            "total_participants": len(await self.participant_ids(db, communication_id)),
            "read_count": by_status.get(MessageStatus.READ.value, 0),
            "unread_count": by_status.get(MessageStatus.UNREAD.value, 0),
            "last_message_at": last_message_at,
        }

    # ==================== OWNER ACTIONS ====================

    def _check_owner(self, user: User, communication: Communication) -> None:
        if communication.created_by != user.id and not is_admin(user):
            raise AuthorizationError("Only the creator or an admin can modify this communication")

    async def update_owned(
        self,
        db: AsyncSession,
        user: User,
        communication_id: int,
        data: Dict[str, Any]
    ) -> Communication:
        communication = await self.get_active(db, communication_id)
        self._check_owner(user, communication)
        return await self.update(db, communication_id, data, user.id)

    async def delete_owned(self, db: AsyncSession, user: User, communication_id: int) -> None:
        """Soft delete"""
        communication = await self.get_active(db, communication_id)
        self._check_owner(user, communication)
        await self.set_active(db, communication_id, False, user.id)


communication_service = CommunicationService()
