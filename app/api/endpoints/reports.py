# app/api/endpoints/reports.py

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session, require_admin
from app.core.exceptions import PortalError, to_http
from app.models.enums import ExportFormat
from app.models.user import User
from app.schemas.report import FieldOptions, ReportRequest, ReportResponse
from app.services.export_service import combine_sections, export_all, export_section
from app.services.report_service import field_options, generate_report

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin Reports"]
)


@router.get("/field-options", response_model=FieldOptions)
async def get_field_options(_: User = Depends(require_admin)):
    return field_options()


# ------------------------------------------------------------
# GENERATE REPORT
# ------------------------------------------------------------
@router.post("/report", response_model=ReportResponse)
async def build_report(
    data: ReportRequest,
    _: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        return await generate_report(session, data)
    except PortalError as e:
        raise to_http(e)


# ------------------------------------------------------------
# EXPORT (single file)
# ------------------------------------------------------------
@router.post("/report/export")
async def export_report(
    data: ReportRequest,
    format: ExportFormat = Query(default=ExportFormat.csv),
    _: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        report = await generate_report(session, data)
        content, media_type, filename = export_section(combine_sections(report.sections), format)
    except PortalError as e:
        raise to_http(e)

    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


# ------------------------------------------------------------
# EXPORT ALL (one file per sub-type, zipped)
# ------------------------------------------------------------
@router.post("/report/export-all")
async def export_all_reports(
    data: ReportRequest,
    format: ExportFormat = Query(default=ExportFormat.csv),
    _: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        report = await generate_report(session, data)
        content = export_all(report.sections, format)
    except PortalError as e:
        raise to_http(e)

    filename = f"achievement_reports_{format.value}.zip"
    return Response(
        content=content,
        media_type="application/zip",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )
