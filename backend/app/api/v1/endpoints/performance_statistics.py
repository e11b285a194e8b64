"""
Performance Statistics API

Monthly answers per user and question, the entry form, OTP confirmation
of a month, summaries and month labels.
"""
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.core.rate_limiter import strict_rate_limit
from app.models import StatisticStatus, User
from app.modules.auth.dependencies import get_current_user
from app.schemas.performance import (
    LabelFilter,
    MonthRequest,
    OtpVerify,
    ReportValuesRequest,
    SaveStatisticsRequest,
    StatisticBulkCreate,
    StatisticCreate,
    StatisticResponse,
    StatisticUpdate,
)
from app.schemas.questionnaire import SubTopicResponse, TopicResponse
from app.services.performance_service import performance_service
from app.utils.pagination import ListParams, paging_params
from app.utils.responses import success_response, serialize, serialize_many

router = APIRouter()


def statistic_filters(
    user_id: Optional[int] = Query(None),
    question_id: Optional[int] = Query(None),
    module_id: Optional[int] = Query(None),
    topic_id: Optional[int] = Query(None),
    sub_topic_id: Optional[int] = Query(None),
    state_id: Optional[int] = Query(None),
    range_id: Optional[int] = Query(None),
    battalion_id: Optional[int] = Query(None),
    status: Optional[StatisticStatus] = Query(None),
) -> dict:
    return {
        "user_id": user_id,
        "question_id": question_id,
        "module_id": module_id,
        "topic_id": topic_id,
        "sub_topic_id": sub_topic_id,
        "state_id": state_id,
        "range_id": range_id,
        "battalion_id": battalion_id,
        "status": status.value if status else None,
    }


@router.get("")
async def list_statistics(
    params: ListParams = Depends(paging_params),
    filters: dict = Depends(statistic_filters),
    month_year: Optional[str] = Query(None, max_length=20),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    items, pagination = await performance_service.search(db, params, filters, month_year)
    return success_response(
        "Performance statistics retrieved successfully",
        serialize_many(StatisticResponse, items),
        pagination,
    )


@router.get("/summary")
async def get_statistics_summary(
    filters: dict = Depends(statistic_filters),
    month_year: Optional[str] = Query(None, max_length=20),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    summary = await performance_service.summary(db, filters, month_year)
    return success_response("Performance summary retrieved successfully", summary)


@router.get("/labels")
async def get_month_labels(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Distinct months, newest first"""
    labels = await performance_service.labels(db)
    return success_response("Labels retrieved successfully", labels)


@router.post("/labels/filter")
async def get_filtered_month_labels(
    data: LabelFilter,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    labels = await performance_service.labels_filtered(db, data.model_dump())
    return success_response("Labels retrieved successfully", labels)


@router.post("/report-values")
async def get_report_values(
    data: ReportValuesRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    values = await performance_service.report_values(db, data.model_dump())
    return success_response("Report values retrieved successfully", values)


@router.get("/count/{user_id}")
async def get_statistic_count(
    user_id: int,
    month_year: Optional[str] = Query(None, max_length=20),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    count = await performance_service.count(db, user_id, month_year)
    return success_response("Count retrieved successfully", {"user_id": user_id, "count": count})


@router.get("/count/{user_id}/success")
async def get_success_count(
    user_id: int,
    month_year: Optional[str] = Query(None, max_length=20),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    count = await performance_service.count(db, user_id, month_year, StatisticStatus.SUCCESS)
    return success_response("Count retrieved successfully", {"user_id": user_id, "count": count})


@router.post("/send-otp")
@strict_rate_limit()
async def send_otp(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await performance_service.send_otp(db, current_user)
    return success_response("OTP sent successfully", {
        "expires_at": result["expires_at"].isoformat(),
        "month_year": result["month_year"],
    })


@router.post("/verify-otp")
async def verify_otp(
    data: OtpVerify,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Confirms the reporting month: its rows become SUCCESS"""
    result = await performance_service.verify_otp(db, current_user, data.otp)
    return success_response("OTP verified successfully", result)


@router.get("/form")
async def get_performance_form(
    module_id: int = Query(...),
    topic_id: int = Query(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    form = await performance_service.form(db, current_user, module_id, topic_id)
    return success_response("Performance form retrieved successfully", {
        **form,
        "topic": serialize(TopicResponse, form["topic"]),
        "sub_topics": serialize_many(SubTopicResponse, form["sub_topics"]),
    })


@router.get("/navigation/next")
async def get_next_topic(
    module_id: int = Query(...),
    topic_id: int = Query(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await performance_service.navigate(db, current_user, module_id, topic_id, 1)
    return success_response("Next topic retrieved successfully", result)


@router.get("/navigation/previous")
async def get_previous_topic(
    module_id: int = Query(...),
    topic_id: int = Query(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await performance_service.navigate(db, current_user, module_id, topic_id, -1)
    return success_response("Previous topic retrieved successfully", result)


@router.get("/navigation/info")
async def get_navigation_info(
    module_id: int = Query(...),
    topic_id: int = Query(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await performance_service.navigation_info(db, current_user, module_id, topic_id)
    return success_response("Navigation info retrieved successfully", result)


@router.post("/bulk", status_code=status.HTTP_201_CREATED)
async def bulk_create_statistics(
    data: StatisticBulkCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    created = await performance_service.bulk_create(
        db, [item.model_dump() for item in data.items], current_user.id
    )
    return success_response(
        f"{len(created)} performance statistics created successfully",
        serialize_many(StatisticResponse, created),
    )


@router.post("/save-statistics")
async def save_statistics(
    data: SaveStatisticsRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Save the current user's answers for the reporting month"""
    result = await performance_service.save_statistics(db, current_user, data.model_dump())
    return success_response("Statistics saved successfully", result)


@router.patch("/make-active")
async def make_statistics_active(
    data: MonthRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await performance_service.make_active(db, current_user, data.month_year)
    return success_response("Statistics marked as submitted", result)


@router.get("/{statistic_id}")
async def get_statistic(
    statistic_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    statistic = await performance_service.get(db, statistic_id)
    return success_response("Performance statistic retrieved successfully", serialize(StatisticResponse, statistic))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_statistic(
    data: StatisticCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    statistic = await performance_service.create(db, data.model_dump(), current_user.id)
    return success_response("Performance statistic created successfully", serialize(StatisticResponse, statistic))


@router.put("/{statistic_id}")
async def update_statistic(
    statistic_id: int,
    data: StatisticUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    statistic = await performance_service.update(
        db, statistic_id, data.model_dump(exclude_unset=True), current_user.id
    )
    return success_response("Performance statistic updated successfully", serialize(StatisticResponse, statistic))


@router.delete("/{statistic_id}")
async def delete_statistic(
    statistic_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Soft delete"""
    await performance_service.delete(db, statistic_id, current_user.id)
    return success_response("Performance statistic deleted successfully")
