"""
Questionnaire services - modules, topics, sub-topics, questions

Handles:
- CRUD through CRUDService
- Priority ordering and cloning
- Topic form configuration (topic + sub-topics + questions)
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Any, Dict, List, Optional

from app.core.exceptions import ValidationError
from app.models import (
    Module, Topic, SubTopic, Question, QuestionType, PerformanceStatistic, SubMenu,
)
from app.services.crud_service import CRUDService, clean_values

COPY_SUFFIX = " (Copy)"

# Audit columns are never copied by clone()
_SKIP_ON_CLONE = {"id", "created_by", "updated_by", "created_date", "updated_date"}


def _copy_columns(item, **overrides) -> Dict[str, Any]:
    values = {
        column.key: getattr(item, column.key)
        for column in item.__table__.columns
        if column.key not in _SKIP_ON_CLONE
    }
    values.update(overrides)
    return values


class ModuleService(CRUDService[Module]):
    model = Module
    label = "Module"
    plural = "modules"
    name_column = "module_name"
    search_columns = ("module_name",)
    sort_columns = ("module_name", "priority")
    default_order = ("priority", "module_name")
    parents = {"submenu_id": (SubMenu, "Sub-menu")}
    children = ((Topic, "module_id", "topics"),)

    async def topics(self, db: AsyncSession, module_id: int) -> List[Topic]:
        await self.get(db, module_id)
        return await topic_service.list_active(db, module_id=module_id)

    async def clone(
        self,
        db: AsyncSession,
        module_id: int,
        new_name: Optional[str] = None,
        user_id: Optional[int] = None
    ) -> Module:
        """Copy a module and its topics"""
        source = await self.get(db, module_id)
        copy = await self.create(
            db,
            _copy_columns(source, module_name=new_name or f"{source.module_name}{COPY_SUFFIX}"),
            user_id,
        )

        result = await db.execute(select(Topic).where(Topic.module_id == module_id))
        for topic in result.scalars().all():
            db.add(Topic(**_copy_columns(topic, module_id=copy.id), created_by=user_id, updated_by=user_id))
        await self.flush(db)

        self.logger.info(f"Cloned module {module_id} -> {copy.id}")
        return copy

    async def stats(self, db: AsyncSession) -> Dict[str, Any]:
        stats = await super().stats(db)
        result = await db.execute(
            select(Module.id, Module.module_name, func.count(Topic.id))
            .outerjoin(Topic, Topic.module_id == Module.id)
            .group_by(Module.id, Module.module_name, Module.priority)
            .order_by(Module.priority, Module.module_name)
        )
        stats["topics_per_module"] = [
            {"module_id": mid, "module_name": name, "topic_count": count}
            for mid, name, count in result.all()
        ]
        return stats


class TopicService(CRUDService[Topic]):
    model = Topic
    label = "Topic"
    plural = "topics"
    name_column = "topic_name"
    search_columns = ("topic_name", "sub_name")
    sort_columns = ("topic_name", "priority", "module_id")
    filter_columns = ("module_id",)
    default_order = ("priority", "topic_name")
    parents = {
        "module_id": (Module, "Module"),
        "submenu_id": (SubMenu, "Sub-menu"),
    }
    children = (
        (SubTopic, "topic_id", "sub-topics"),
        (Question, "topic_id", "questions"),
    )

    async def create(self, db: AsyncSession, data: Dict[str, Any], user_id: Optional[int] = None) -> Topic:
        self._check_month_window(data)
        return await super().create(db, data, user_id)

    async def update(self, db: AsyncSession, item_id: int, data: Dict[str, Any],
                     user_id: Optional[int] = None) -> Topic:
        self._check_month_window(data)
        return await super().update(db, item_id, data, user_id)

    @staticmethod
    def _check_month_window(data: Dict[str, Any]) -> None:
        start, end = data.get("start_month"), data.get("end_month")
        if (start is None) != (end is None):
            raise ValidationError("start_month and end_month must be given together", field="start_month")

    async def by_module(self, db: AsyncSession, module_id: int) -> List[Topic]:
        return await self.list_active(db, module_id=module_id)

    async def sub_topics(self, db: AsyncSession, topic_id: int) -> List[SubTopic]:
        await self.get(db, topic_id)
        return await sub_topic_service.list_active(db, topic_id=topic_id)

    async def form_config(self, db: AsyncSession, topic_id: int) -> Dict[str, Any]:
        """Topic with its active sub-topics and questions, each by priority"""
        topic = await self.get(db, topic_id)
        sub_topics = await sub_topic_service.list_active(db, topic_id=topic_id)
        questions = await question_service.list_active(db, topic_id=topic_id)
        return {"topic": topic, "sub_topics": sub_topics, "questions": questions}

    async def clone(
        self,
        db: AsyncSession,
        topic_id: int,
        new_name: Optional[str] = None,
        user_id: Optional[int] = None
    ) -> Topic:
        """Copy a topic with its sub-topics and questions"""
        source = await self.get(db, topic_id)
        copy = await self.create(
            db,
            _copy_columns(source, topic_name=new_name or f"{source.topic_name}{COPY_SUFFIX}"),
            user_id,
        )

        sub_topic_map: Dict[int, int] = {}
        result = await db.execute(select(SubTopic).where(SubTopic.topic_id == topic_id))
        for sub_topic in result.scalars().all():
            new_sub = SubTopic(**_copy_columns(sub_topic, topic_id=copy.id), created_by=user_id, updated_by=user_id)
            db.add(new_sub)
            await self.flush(db)
            sub_topic_map[sub_topic.id] = new_sub.id

        result = await db.execute(select(Question).where(Question.topic_id == topic_id))
        for question in result.scalars().all():
            db.add(Question(
                **_copy_columns(
                    question,
                    topic_id=copy.id,
                    sub_topic_id=sub_topic_map.get(question.sub_topic_id),
                ),
                created_by=user_id,
                updated_by=user_id,
            ))
        await self.flush(db)

        self.logger.info(f"Cloned topic {topic_id} -> {copy.id}")
        return copy


class SubTopicService(CRUDService[SubTopic]):
    model = SubTopic
    label = "Sub-topic"
    plural = "sub-topics"
    name_column = "sub_topic_name"
    search_columns = ("sub_topic_name",)
    sort_columns = ("sub_topic_name", "priority", "topic_id")
    filter_columns = ("topic_id",)
    default_order = ("priority", "sub_topic_name")
    parents = {"topic_id": (Topic, "Topic")}
    children = ((Question, "sub_topic_id", "questions"),)

    async def by_topic(self, db: AsyncSession, topic_id: int) -> List[SubTopic]:
        return await self.list_active(db, topic_id=topic_id)

    async def questions(self, db: AsyncSession, sub_topic_id: int) -> List[Question]:
        await self.get(db, sub_topic_id)
        return await question_service.list_active(db, sub_topic_id=sub_topic_id)


class QuestionService(CRUDService[Question]):
    model = Question
    label = "Question"
    plural = "questions"
    name_column = "question"
    search_columns = ("question",)
    sort_columns = ("question", "priority", "topic_id", "type")
    filter_columns = ("topic_id", "sub_topic_id", "type")
    default_order = ("priority", "id")
    parents = {
        "topic_id": (Topic, "Topic"),
        "sub_topic_id": (SubTopic, "Sub-topic"),
    }
    children = ((PerformanceStatistic, "question_id", "performance statistics"),)

    @staticmethod
    def types() -> List[Dict[str, str]]:
        return [{"value": t.value, "label": t.name.replace("_", " ").title()} for t in QuestionType]

    async def check_parents(self, db: AsyncSession, data: Dict[str, Any]) -> None:
        await super().check_parents(db, data)
        topic_id, sub_topic_id = data.get("topic_id"), data.get("sub_topic_id")
        if topic_id is not None and sub_topic_id is not None:
            sub_topic = await db.get(SubTopic, sub_topic_id)
            if sub_topic.topic_id != topic_id:
                raise ValidationError("Sub-topic does not belong to the topic", field="sub_topic_id")

    async def update(
        self,
        db: AsyncSession,
        item_id: int,
        data: Dict[str, Any],
        user_id: Optional[int] = None
    ) -> Question:
        if data.get("topic_id") is not None or data.get("sub_topic_id") is not None:
            # a partial update is checked against the stored side of the pair
            item = await self.get(db, item_id)
            await self.check_parents(db, {
                "topic_id": data.get("topic_id") or item.topic_id,
                "sub_topic_id": data["sub_topic_id"] if "sub_topic_id" in data else item.sub_topic_id,
            })
        return await super().update(db, item_id, data, user_id)

    async def by_topic(self, db: AsyncSession, topic_id: int) -> List[Question]:
        return await self.list_active(db, topic_id=topic_id)

    async def by_sub_topic(self, db: AsyncSession, sub_topic_id: int) -> List[Question]:
        return await self.list_active(db, sub_topic_id=sub_topic_id)

    async def by_type(self, db: AsyncSession, question_type: str) -> List[Question]:
        if question_type not in {t.value for t in QuestionType}:
            raise ValidationError(f"Unknown question type '{question_type}'", field="type")
        return await self.list_active(db, type=question_type)

    async def bulk_create(
        self,
        db: AsyncSession,
        rows: List[Dict[str, Any]],
        user_id: Optional[int] = None
    ) -> List[Question]:
        """All rows are created or none (caller's transaction rolls back on error)"""
        created = []
        for row in rows:
            row = {key: value for key, value in clean_values(row).items() if value is not None}
            await self.check_parents(db, row)
            question = Question(**row, created_by=user_id, updated_by=user_id)
            db.add(question)
            created.append(question)
        await self.flush(db)
        for question in created:
            await db.refresh(question)
        self.logger.info(f"Bulk created {len(created)} questions")
        return created

    async def clone(
        self,
        db: AsyncSession,
        question_id: int,
        new_text: Optional[str] = None,
        user_id: Optional[int] = None
    ) -> Question:
        source = await self.get(db, question_id)
        return await self.create(
            db,
            _copy_columns(source, question=new_text or f"{source.question}{COPY_SUFFIX}"),
            user_id,
        )

    async def stats(self, db: AsyncSession) -> Dict[str, Any]:
        stats = await super().stats(db)
        result = await db.execute(
            select(Question.type, func.count(Question.id)).group_by(Question.type)
        )
        stats["by_type"] = {qtype: count for qtype, count in result.all()}
        stats["with_formula"] = await db.scalar(
            select(func.count()).select_from(Question).where(Question.que_formula.is_not(None))
        ) or 0
        return stats


module_service = ModuleService()
topic_service = TopicService()
sub_topic_service = SubTopicService()
question_service = QuestionService()
