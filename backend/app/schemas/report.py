"""
Report Schemas

Field values are checked by ReportService.validate_request so that every
problem is reported at once, keyed by field.
"""
from pydantic import BaseModel, Field
from typing import Optional, List


class ReportRequest(BaseModel):
    report_type: str
    battalion_ids: Optional[List[int]] = None
    range_id: Optional[int] = None
    module_id: Optional[int] = None
    topic_ids: Optional[List[int]] = None
    sub_topic_ids: Optional[List[int]] = None
    question_ids: Optional[List[int]] = None
    status: Optional[str] = None
    month_year: Optional[str] = None
    from_date: Optional[str] = None
    to_date: Optional[str] = None
    financial_year: Optional[str] = None
    quarter: Optional[str] = None
    page: int = 0
    size: Optional[int] = None
    sort_by: Optional[str] = None
    sort_direction: str = "DESC"
    group_by: Optional[str] = None
    aggregation_type: Optional[str] = None
    include_summary: bool = Field(True, description="Attach summary statistics")
