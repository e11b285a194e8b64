"""
Reports API

Generate a report from filters, fetch it again by id, and export it as an
Excel or CSV attachment.
"""
import io

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.report import ReportRequest
from app.services.report_service import report_service
from app.utils.responses import success_response

router = APIRouter()


@router.post("/generate")
async def generate_report(
    data: ReportRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Build a report. The battalion/range filters are narrowed to what the
    caller's role may see before any data is read.
    """
    report = await report_service.generate(db, current_user, data.model_dump())
    return success_response("Report generated successfully", report)


@router.get("/export/{report_id}")
async def export_report(
    report_id: str,
    format: str = Query("EXCEL", description="EXCEL or CSV"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    content, media_type, filename = await report_service.export(db, report_id, format)

    return StreamingResponse(
        io.BytesIO(content),
        media_type=media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"'
        }
    )


@router.get("/templates")
async def get_report_templates(current_user: User = Depends(get_current_user)):
    return success_response("Report templates retrieved successfully", report_service.templates())


@router.get("/metadata")
async def get_report_metadata(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Filter options visible to the caller"""
    metadata = await report_service.metadata(db, current_user)
    return success_response("Report metadata retrieved successfully", metadata)


@router.get("/{report_id}")
async def get_report(
    report_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    report = await report_service.get_report(db, report_id)
    return success_response("Report retrieved successfully", report)
