"""
Performance Statistic Service - monthly answers to questionnaire questions

Handles:
- CRUD with soft delete and hierarchy copied from the answering user
- Form submission for the reporting month (upsert, SUCCESS rows are frozen)
- OTP confirmation that finalises a month
- Summaries, month labels and report value series
- Entry form assembly and topic navigation for a user's role
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, update
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from app.core.config import settings
from app.core.exceptions import (
    InvalidOtpError,
    ResourceNotFoundError,
    ValidationError,
)
from app.core.logging_config import logger as app_logger
from app.core.security import generate_otp
from app.models import (
    FormType,
    Module,
    PerformanceStatistic,
    Question,
    QuestionType,
    RoleQuestion,
    RoleTopic,
    StatisticStatus,
    SubTopic,
    Topic,
    User,
)
from app.services.communication_service import strip_upload_prefix
from app.services.crud_service import CRUDService
from app.utils.months import (
    financial_year_months,
    month_sort_key,
    previous_month,
    reporting_month,
    to_number,
)
from app.utils.pagination import ListParams, paginate

NON_NUMERIC_TYPES = {QuestionType.TEXT.value, QuestionType.DATE.value, QuestionType.YES_NO.value}

HIERARCHY_COLUMNS = ("state_id", "district_id", "range_id", "battalion_id")

# report-values type -> statistic column
REPORT_VALUE_COLUMNS = {
    "state": "state_id",
    "range": "range_id",
    "district": "district_id",
    "user": "user_id",
    "multi_user": "user_id",
}


def numeric_total(values) -> float:
    return sum(n for n in (to_number(v) for v in values) if n is not None)


class PerformanceStatisticService(CRUDService[PerformanceStatistic]):
    model = PerformanceStatistic
    label = "Performance statistic"
    plural = "performance-statistics"
    search_columns = ("value", "month_year")
    sort_columns = ("month_year", "value", "status", "user_id", "question_id", "module_id")
    filter_columns = (
        "user_id", "question_id", "module_id", "topic_id", "sub_topic_id",
        "state_id", "range_id", "battalion_id", "status",
    )
    default_order = ("id",)
    parents = {
        "user_id": (User, "User"),
        "question_id": (Question, "Question"),
        "module_id": (Module, "Module"),
        "topic_id": (Topic, "Topic"),
        "sub_topic_id": (SubTopic, "Sub-topic"),
    }

    def base_query(self):
        # soft-deleted rows are invisible everywhere
        return select(PerformanceStatistic).where(PerformanceStatistic.active.is_(True))

    def _filtered(self, filters: Optional[Dict[str, Any]], month_year: Optional[str] = None):
        query = self.apply_filters(self.base_query(), filters=filters)
        if month_year:
            query = query.where(PerformanceStatistic.month_year.ilike(f"%{month_year.strip()}%"))
        return query

    async def search(
        self,
        db: AsyncSession,
        params: ListParams,
        filters: Optional[Dict[str, Any]] = None,
        month_year: Optional[str] = None
    ) -> Tuple[List[PerformanceStatistic], Dict[str, Any]]:
        query = self.apply_filters(self._filtered(filters, month_year), params)
        query = query.order_by(self.sort_clause(params), PerformanceStatistic.id.asc())
        return await paginate(db, query, params.page, params.limit)

    # ==================== WRITE ====================

    async def _with_user_hierarchy(self, db: AsyncSession, data: Dict[str, Any]) -> Dict[str, Any]:
        user = await db.get(User, data["user_id"])
        if user is None:
            raise ResourceNotFoundError("User", data["user_id"])
        for column in HIERARCHY_COLUMNS:
            if data.get(column) is None:
                data[column] = getattr(user, column)
        return data

    async def create(self, db: AsyncSession, data: Dict[str, Any], user_id: Optional[int] = None) -> PerformanceStatistic:
        data = await self._with_user_hierarchy(db, dict(data))
        return await super().create(db, data, user_id)

    async def bulk_create(
        self,
        db: AsyncSession,
        rows: List[Dict[str, Any]],
        user_id: Optional[int] = None
    ) -> List[PerformanceStatistic]:
        created = [await self.create(db, row, user_id) for row in rows]
        self.logger.info(f"Bulk created {len(created)} performance statistics")
        return created

    async def delete(self, db: AsyncSession, item_id: int, user_id: Optional[int] = None) -> None:
        """Soft delete"""
        await self.set_active(db, item_id, False, user_id)

    async def save_statistics(self, db: AsyncSession, user: User, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Upsert the user's answers for the reporting month.

        Rows keyed by (user, question, sub-topic, month). Rows already in
        SUCCESS are left alone and reported in `skipped`.
        """
        month_year = reporting_month()
        topic = await db.get(Topic, data["topic_id"])
        if topic is None:
            raise ResourceNotFoundError("Topic", data["topic_id"])
        if topic.module_id != data["module_id"]:
            raise ValidationError("Topic does not belong to the module", field="topic_id")

        entries = data["entries"]
        question_ids = {entry["question_id"] for entry in entries}
        result = await db.execute(select(Question.id, Question.topic_id).where(Question.id.in_(question_ids)))
        question_topics = dict(result.all())
        missing = question_ids - set(question_topics)
        if missing:
            raise ResourceNotFoundError("Question", sorted(missing)[0])
        if any(topic_id != topic.id for topic_id in question_topics.values()):
            raise ValidationError("Question does not belong to the topic", field="question_id")

        sub_topic_ids = {entry["sub_topic_id"] for entry in entries if entry.get("sub_topic_id") is not None}
        if sub_topic_ids:
            result = await db.execute(
                select(SubTopic.id).where(SubTopic.id.in_(sub_topic_ids), SubTopic.topic_id == topic.id)
            )
            if sub_topic_ids - set(result.scalars().all()):
                raise ValidationError("Sub-topic does not belong to the topic", field="sub_topic_id")

        document = data.get("document")
        if document:
            document = strip_upload_prefix(document, settings.PERFORMANCE_DOCS_PREFIX)

        result = await db.execute(
            self.base_query().where(
                PerformanceStatistic.user_id == user.id,
                PerformanceStatistic.month_year == month_year,
                PerformanceStatistic.question_id.in_(question_ids),
            )
        )
        existing = {(row.question_id, row.sub_topic_id): row for row in result.scalars().all()}

        created, updated, skipped = 0, 0, []
        for entry in entries:
            key = (entry["question_id"], entry.get("sub_topic_id"))
            row = existing.get(key)
            if row is not None and row.status == StatisticStatus.SUCCESS.value:
                skipped.append({"question_id": key[0], "sub_topic_id": key[1]})
                continue

            if row is None:
                row = PerformanceStatistic(
                    user_id=user.id,
                    module_id=data["module_id"],
                    topic_id=data["topic_id"],
                    sub_topic_id=key[1],
                    question_id=key[0],
                    month_year=month_year,
                    status=StatisticStatus.INPROGRESS.value,
                    active=True,
                    created_by=user.id,
                    **{column: getattr(user, column) for column in HIERARCHY_COLUMNS},
                )
                db.add(row)
                existing[key] = row
                created += 1
            else:
                row.updated_date = datetime.utcnow()
                updated += 1

            row.value = entry.get("value")
            row.updated_by = user.id
            if document:
                row.document = document

        await self.flush(db)
        self.logger.info(
            f"Saved statistics for user {user.id} {month_year}",
            extra={"rows_created": created, "rows_updated": updated, "rows_skipped": len(skipped)},
        )
        return {"month_year": month_year, "created": created, "updated": updated, "skipped": skipped}

    async def make_active(self, db: AsyncSession, user: User, month_year: Optional[str] = None) -> Dict[str, Any]:
        """Mark the user's rows for the month SUCCESS"""
        month_year = month_year or reporting_month()
        result = await db.execute(
            update(PerformanceStatistic)
            .where(
                PerformanceStatistic.user_id == user.id,
                PerformanceStatistic.month_year == month_year,
                PerformanceStatistic.active.is_(True),
            )
            .values(
                status=StatisticStatus.SUCCESS.value,
                updated_by=user.id,
                updated_date=datetime.utcnow(),
            )
            .execution_options(synchronize_session="fetch")
        )
        self.logger.info(f"Finalised {result.rowcount} statistics for user {user.id} {month_year}")
        return {"month_year": month_year, "updated": result.rowcount}

    # ==================== OTP ====================

    async def send_otp(self, db: AsyncSession, user: User) -> Dict[str, Any]:
        user.otp = generate_otp()
        user.otp_validity = datetime.utcnow() + timedelta(minutes=settings.OTP_EXPIRE_MINUTES)
        await db.flush()

        # no SMS gateway; the code goes to the log
        app_logger.log_auth_event("send_otp", True, user.email, otp=user.otp, mobile=user.mobile_no)
        return {"expires_at": user.otp_validity, "month_year": reporting_month()}

    async def verify_otp(self, db: AsyncSession, user: User, otp: str) -> Dict[str, Any]:
        if (
            not user.otp
            or user.otp != otp.strip()
            or user.otp_validity is None
            or user.otp_validity < datetime.utcnow()
        ):
            app_logger.log_auth_event("verify_otp", False, user.email, "mismatch or expired")
            raise InvalidOtpError()

        user.otp = None
        user.otp_validity = None
        await db.flush()
        app_logger.log_auth_event("verify_otp", True, user.email)
        return await self.make_active(db, user)

    # ==================== AGGREGATES ====================

    async def summary(
        self,
        db: AsyncSession,
        filters: Optional[Dict[str, Any]] = None,
        month_year: Optional[str] = None
    ) -> Dict[str, Any]:
        query = self._filtered(filters, month_year).with_only_columns(
            PerformanceStatistic.status, PerformanceStatistic.value
        )
        rows = (await db.execute(query)).all()

        total = len(rows)
        success = sum(1 for status, _ in rows if status == StatisticStatus.SUCCESS.value)
        return {
            "total_count": total,
            "success_count": success,
            "in_progress_count": sum(1 for status, _ in rows if status == StatisticStatus.INPROGRESS.value),
            "total_value": numeric_total(value for _, value in rows),
            "success_rate": f"{(success / total * 100) if total else 0:.2f}",
        }

    async def _labels(self, db: AsyncSession, query) -> List[str]:
        result = await db.execute(query.with_only_columns(PerformanceStatistic.month_year).distinct())
        return sorted(result.scalars().all(), key=month_sort_key, reverse=True)

    async def labels(self, db: AsyncSession) -> List[str]:
        """Distinct months, newest first"""
        return await self._labels(db, self.base_query())

    async def labels_filtered(self, db: AsyncSession, criteria: Dict[str, Any]) -> List[str]:
        query = self.base_query().where(PerformanceStatistic.status == StatisticStatus.SUCCESS.value)
        if criteria.get("question_ids"):
            query = query.where(PerformanceStatistic.question_id.in_(criteria["question_ids"]))
        for column in ("battalion_id", "range_id", "state_id"):
            if criteria.get(column) is not None:
                query = query.where(getattr(PerformanceStatistic, column) == criteria[column])
        return await self._labels(db, query)

    async def report_values(self, db: AsyncSession, criteria: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Numeric totals per month for a scope and set of questions"""
        column = getattr(PerformanceStatistic, REPORT_VALUE_COLUMNS[criteria["type"]])
        if criteria["type"] == "multi_user":
            if not criteria.get("ids"):
                raise ValidationError("ids is required for multi_user", field="ids")
            scope = column.in_(criteria["ids"])
        else:
            if criteria.get("id") is None:
                raise ValidationError(f"id is required for {criteria['type']}", field="id")
            scope = column == criteria["id"]

        query = (
            select(PerformanceStatistic.month_year, PerformanceStatistic.value, Question.type)
            .join(Question, Question.id == PerformanceStatistic.question_id)
            .where(
                PerformanceStatistic.active.is_(True),
                PerformanceStatistic.question_id.in_(criteria["question_ids"]),
                scope,
            )
        )
        if criteria.get("months"):
            query = query.where(PerformanceStatistic.month_year.in_(criteria["months"]))

        totals: Dict[str, float] = {}
        for month_year, value, question_type in (await db.execute(query)).all():
            totals.setdefault(month_year, 0)
            if question_type not in NON_NUMERIC_TYPES:
                totals[month_year] += to_number(value) or 0

        return [
            {"month_year": month_year, "value": totals[month_year]}
            for month_year in sorted(totals, key=month_sort_key)
        ]

    async def count(
        self,
        db: AsyncSession,
        user_id: int,
        month_year: Optional[str] = None,
        status: Optional[StatisticStatus] = None
    ) -> int:
        query = select(func.count()).select_from(PerformanceStatistic).where(
            PerformanceStatistic.user_id == user_id,
            PerformanceStatistic.active.is_(True),
        )
        if month_year:
            query = query.where(PerformanceStatistic.month_year == month_year.strip().upper())
        if status is not None:
            query = query.where(PerformanceStatistic.status == status.value)
        return await db.scalar(query) or 0

    # ==================== ENTRY FORM ====================

    async def allowed_topic_ids(self, db: AsyncSession, role_id: Optional[int]) -> List[int]:
        if role_id is None:
            return []
        result = await db.execute(
            select(RoleTopic.topic_id).where(RoleTopic.role_id == role_id, RoleTopic.active.is_(True))
        )
        return list(result.scalars().all())

    async def allowed_question_ids(self, db: AsyncSession, role_id: Optional[int]) -> List[int]:
        if role_id is None:
            return []
        result = await db.execute(
            select(RoleQuestion.question_id).where(RoleQuestion.role_id == role_id, RoleQuestion.active.is_(True))
        )
        return list(result.scalars().all())

    async def form(self, db: AsyncSession, user: User, module_id: int, topic_id: int) -> Dict[str, Any]:
        """
        Entry form for one topic and the reporting month.

        Each cell carries previous_value (month before the reporting month),
        current_value, fin_year_total (numeric types only) and is_disabled.
        """
        topic = await db.get(Topic, topic_id)
        if topic is None or not topic.active:
            raise ResourceNotFoundError("Topic", topic_id)
        if topic.module_id != module_id:
            raise ValidationError("Topic does not belong to the module", field="topic_id")

        current = reporting_month()
        previous = previous_month(current)
        fin_months = financial_year_months(current, start_jan=topic.is_start_jan)

        result = await db.execute(
            select(SubTopic)
            .where(SubTopic.topic_id == topic_id, SubTopic.active.is_(True))
            .order_by(SubTopic.priority, SubTopic.id)
        )
        sub_topics = list(result.scalars().all())

        questions: List[Question] = []
        if topic_id in await self.allowed_topic_ids(db, user.role_id):
            query = (
                select(Question)
                .where(Question.topic_id == topic_id, Question.active.is_(True))
                .order_by(Question.priority, Question.id)
            )
            role_questions = await self.allowed_question_ids(db, user.role_id)
            if role_questions:
                query = query.where(Question.id.in_(role_questions))
            questions = list((await db.execute(query)).scalars().all())

        if topic.form_type == FormType.NORMAL.value or not sub_topics:
            cells = [(q, q.sub_topic_id) for q in questions]
        else:
            cells = [
                (q, st.id) for st in sub_topics for q in questions
                if q.sub_topic_id is None or q.sub_topic_id == st.id
            ]

        rows: Dict[Tuple[int, Optional[int], str], PerformanceStatistic] = {}
        if questions:
            result = await db.execute(
                self.base_query().where(
                    PerformanceStatistic.user_id == user.id,
                    PerformanceStatistic.question_id.in_([q.id for q in questions]),
                    PerformanceStatistic.month_year.in_(set(fin_months) | {previous}),
                )
            )
            for row in result.scalars().all():
                rows[(row.question_id, row.sub_topic_id, row.month_year)] = row

        items = []
        for question, sub_topic_id in cells:
            current_row = rows.get((question.id, sub_topic_id, current))
            previous_row = rows.get((question.id, sub_topic_id, previous))
            numeric = question.type not in NON_NUMERIC_TYPES
            items.append({
                "question_id": question.id,
                "sub_topic_id": sub_topic_id,
                "question": question.question,
                "type": question.type,
                "priority": question.priority,
                "que_formula": question.que_formula,
                "previous_value": previous_row.value if previous_row else None,
                "current_value": current_row.value if current_row else None,
                "fin_year_total": numeric_total(
                    rows[key].value for key in rows
                    if key[0] == question.id and key[1] == sub_topic_id and key[2] in fin_months
                ) if numeric else None,
                "status": current_row.status if current_row else None,
                "is_disabled": bool(
                    (current_row and current_row.status == StatisticStatus.SUCCESS.value)
                    or question.que_formula
                ),
            })

        return {
            "topic": topic,
            "sub_topics": sub_topics,
            "month_year": current,
            "previous_month_year": previous,
            "questions": items,
        }

    # ==================== NAVIGATION ====================

    async def _topic_sequence(self, db: AsyncSession, user: User) -> List[Tuple[int, int]]:
        """(module_id, topic_id) of the user's topics in form order"""
        allowed = await self.allowed_topic_ids(db, user.role_id)
        if not allowed:
            return []
        result = await db.execute(
            select(Topic.module_id, Topic.id)
            .join(Module, Module.id == Topic.module_id)
            .where(Topic.id.in_(allowed), Topic.active.is_(True), Module.active.is_(True))
            .order_by(Module.priority, Module.id, Topic.priority, Topic.id)
        )
        return [tuple(row) for row in result.all()]

    async def _position(self, db: AsyncSession, user: User, module_id: int, topic_id: int):
        sequence = await self._topic_sequence(db, user)
        try:
            return sequence, sequence.index((module_id, topic_id))
        except ValueError:
            raise ResourceNotFoundError("Topic", topic_id)

    async def navigate(self, db: AsyncSession, user: User, module_id: int, topic_id: int, step: int) -> Dict[str, Any]:
        """step=1 for next, -1 for previous"""
        sequence, index = await self._position(db, user, module_id, topic_id)
        flag = "has_next" if step > 0 else "has_previous"
        target = index + step

        if not 0 <= target < len(sequence):
            return {"module_id": None, "topic_id": None, "is_same_module": False, flag: False}

        next_module, next_topic = sequence[target]
        return {
            "module_id": next_module,
            "topic_id": next_topic,
            "is_same_module": next_module == module_id,
            flag: 0 <= target + step < len(sequence),
        }

    async def navigation_info(self, db: AsyncSession, user: User, module_id: int, topic_id: int) -> Dict[str, Any]:
        sequence, index = await self._position(db, user, module_id, topic_id)
        in_module = [t for m, t in sequence if m == module_id]
        return {
            "module_id": module_id,
            "topic_id": topic_id,
            "position": f"{in_module.index(topic_id) + 1} of {len(in_module)}",
            "has_next": index < len(sequence) - 1,
            "has_previous": index > 0,
        }


performance_service = PerformanceStatisticService()
