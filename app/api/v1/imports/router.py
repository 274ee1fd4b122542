from typing import Optional, Union

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import JSONResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import ensure_school_access
from app.auth.rbac import check_permission
from app.auth.schemas import CurrentUser
from app.core.enums import ImportMode, ImportType
from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import ImportCommitResponse, ImportPreviewResponse
from . import service

router = APIRouter(prefix="/api/v1/import", tags=["import"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _error_response(e: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=e.status_code, content={"error": e.message})


@router.post("", response_model=Union[ImportCommitResponse, ImportPreviewResponse])
async def import_csv(
    import_type: Optional[str] = Form(None, alias="type"),
    school_id: Optional[str] = Form(None, alias="schoolId"),
    mode: Optional[str] = Form(None),
    timetable_id: Optional[str] = Form(None, alias="timetableId"),
    file: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(check_permission("imports", "create")),
):
    """Validate (mode=preview) or validate and write (mode=commit) a CSV or xlsx file for one entity type."""
    try:
        if school_id:
            ensure_school_access(current_user, service.parse_uuid(school_id, "schoolId"))
        content = await file.read() if file is not None else None
        report = await service.run_import(
            db,
            import_type=import_type,
            school_id=school_id,
            content=content,
            mode=mode,
            timetable_id=timetable_id,
            filename=file.filename if file is not None else None,
        )
    except ServiceError as e:
        return _error_response(e)

    if report.mode == ImportMode.COMMIT:
        return ImportCommitResponse.model_validate(report.to_dict())
    return ImportPreviewResponse.model_validate(report.to_dict())


@router.get("/templates/{import_type}")
async def download_template(
    import_type: ImportType,
    file_format: str = Query("csv", alias="format", pattern="^(csv|xlsx)$"),
    current_user: CurrentUser = Depends(check_permission("imports", "read")),
):
    """Empty CSV (or xlsx with dropdowns) with the canonical header row for an import type."""
    if file_format == "xlsx":
        return Response(
            content=service.build_xlsx_template(import_type),
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{import_type.value}-template.xlsx"'},
        )
    return Response(
        content=service.build_template(import_type),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{import_type.value}-template.csv"'},
    )
