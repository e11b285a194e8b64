from sqlalchemy import Column, String, Integer, Text, ForeignKey, Index
import enum

from app.core.database import Base
from app.models.mixins import AuditMixin


class StatisticStatus(str, enum.Enum):
    INPROGRESS = "INPROGRESS"
    SUCCESS = "SUCCESS"


class PerformanceStatistic(AuditMixin, Base):
    """One answer to one question for one user and month ("SEP 2025")"""
    __tablename__ = "performance_statistics"
    __table_args__ = (
        Index("ix_perf_user_month", "user_id", "month_year"),
        Index("ix_perf_question_month", "question_id", "month_year"),
    )

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    state_id = Column(Integer, ForeignKey("states.id"), nullable=True, index=True)
    district_id = Column(Integer, ForeignKey("districts.id"), nullable=True, index=True)
    range_id = Column(Integer, ForeignKey("ranges.id"), nullable=True, index=True)
    battalion_id = Column(Integer, ForeignKey("battalions.id"), nullable=True, index=True)

    module_id = Column(Integer, ForeignKey("modules.id"), nullable=False, index=True)
    topic_id = Column(Integer, ForeignKey("topics.id"), nullable=True, index=True)
    sub_topic_id = Column(Integer, ForeignKey("sub_topics.id"), nullable=True)
    question_id = Column(Integer, ForeignKey("questions.id"), nullable=False)

    month_year = Column(String(20), nullable=False)
    value = Column(String(250), nullable=True)
    status = Column(String(20), default=StatisticStatus.INPROGRESS.value, nullable=False)
    document = Column(String(500), nullable=True)

    def __repr__(self):
        return f"<PerformanceStatistic q={self.question_id} {self.month_year}>"


class ReportCache(AuditMixin, Base):
    """Generated report rows kept for export"""
    __tablename__ = "report_cache"

    report_id = Column(String(64), unique=True, nullable=False, index=True)
    report_type = Column(String(30), nullable=False)
    report_data = Column(Text, nullable=False)  # JSON document
