"""
Performance Statistic Schemas - monthly answers, summaries, entry form
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal
import re

from app.models.performance import StatisticStatus
from app.schemas.common import AuditedResponse

MONTH_YEAR_RE = re.compile(r'^(JAN|FEB|MAR|APR|MAY|JUN|JUL|AUG|SEP|OCT|NOV|DEC) \d{4}$')


def _normalize_month_year(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip().upper()
    if not MONTH_YEAR_RE.match(v):
        raise ValueError("month_year must look like 'SEP 2025'")
    return v


class StatisticCreate(BaseModel):
    user_id: int
    question_id: int
    module_id: int
    value: str = Field(..., max_length=250)
    month_year: str
    topic_id: Optional[int] = None
    sub_topic_id: Optional[int] = None
    state_id: Optional[int] = None
    district_id: Optional[int] = None
    range_id: Optional[int] = None
    battalion_id: Optional[int] = None
    status: StatisticStatus = StatisticStatus.INPROGRESS
    document: Optional[str] = Field(None, max_length=500)

    @field_validator('month_year')
    @classmethod
    def check_month_year(cls, v):
        return _normalize_month_year(v)


class StatisticUpdate(BaseModel):
    value: Optional[str] = Field(None, max_length=250)
    month_year: Optional[str] = None
    status: Optional[StatisticStatus] = None
    sub_topic_id: Optional[int] = None
    document: Optional[str] = Field(None, max_length=500)
    active: Optional[bool] = None

    @field_validator('month_year')
    @classmethod
    def check_month_year(cls, v):
        return _normalize_month_year(v)


class StatisticBulkCreate(BaseModel):
    items: List[StatisticCreate] = Field(..., min_length=1, max_length=1000)


class StatisticResponse(AuditedResponse):
    user_id: int
    state_id: Optional[int] = None
    district_id: Optional[int] = None
    range_id: Optional[int] = None
    battalion_id: Optional[int] = None
    module_id: int
    topic_id: Optional[int] = None
    sub_topic_id: Optional[int] = None
    question_id: int
    month_year: str
    value: Optional[str] = None
    status: str
    document: Optional[str] = None


class StatisticEntry(BaseModel):
    question_id: int
    sub_topic_id: Optional[int] = None
    value: Optional[str] = Field(None, max_length=250)


class SaveStatisticsRequest(BaseModel):
    """One form submission for the reporting month"""
    module_id: int
    topic_id: int
    entries: List[StatisticEntry] = Field(..., min_length=1)
    document: Optional[str] = Field(None, max_length=500)


class MonthRequest(BaseModel):
    month_year: Optional[str] = None

    @field_validator('month_year')
    @classmethod
    def check_month_year(cls, v):
        return _normalize_month_year(v)


class LabelFilter(BaseModel):
    question_ids: Optional[List[int]] = None
    battalion_id: Optional[int] = None
    range_id: Optional[int] = None
    state_id: Optional[int] = None


class ReportValuesRequest(BaseModel):
    type: Literal["state", "range", "district", "user", "multi_user"]
    id: Optional[int] = None
    ids: Optional[List[int]] = None
    question_ids: List[int] = Field(..., min_length=1)
    months: Optional[List[str]] = None

    @field_validator('months')
    @classmethod
    def check_months(cls, v):
        if v is None:
            return v
        return [_normalize_month_year(m) for m in v]


class OtpVerify(BaseModel):
    otp: str = Field(..., min_length=4, max_length=10)
