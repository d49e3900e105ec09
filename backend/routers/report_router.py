"""Incident report endpoints.

Filing a report is public; everything else needs an account, and status
changes, statistics and deletion need an admin.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.forms import provided, read_uploads
from helpers.pagination import PageParams, get_page_params
from helpers.responses import ok, page
from models.config import settings
from repositories.database import get_db
from services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


def get_report_filter(
    search: Optional[str] = Query(None, description="Matches type, location or description"),
    status: Optional[db_models.ReportStatus] = Query(None),
    priority: Optional[db_models.ReportPriority] = Query(None),
    animal_condition: Optional[db_models.AnimalCondition] = Query(
        None, alias="animalCondition"
    ),
    animal_type: Optional[str] = Query(None, alias="animalType"),
) -> schemas.ReportFilter:
    return schemas.ReportFilter(
        search=search,
        status=status,
        priority=priority,
        animal_condition=animal_condition,
        animal_type=animal_type,
    )


def report_form(
    animal_type: Optional[str] = Form(None, alias="animalType"),
    animal_condition: Optional[str] = Form(None, alias="animalCondition"),
    location: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    contact_name: Optional[str] = Form(None, alias="contactName"),
    contact_phone: Optional[str] = Form(None, alias="contactPhone"),
    contact_email: Optional[str] = Form(None, alias="contactEmail"),
    priority: Optional[str] = Form(None),
) -> dict:
    return provided(
        animal_type=animal_type,
        animal_condition=animal_condition,
        location=location,
        description=description,
        contact_name=contact_name,
        contact_phone=contact_phone,
        contact_email=contact_email,
        priority=priority,
    )


@router.post(
    "",
    response_model=schemas.ApiResponse[schemas.Report],
    status_code=status.HTTP_201_CREATED,
)
async def create_report(
    fields: dict = Depends(report_form),
    photos: Optional[List[UploadFile]] = File(None),
    current_user: Optional[db_models.User] = Depends(auth.get_current_user_optional),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    """File a report (no account needed); up to five ``photos``."""
    reporter_id = current_user.id if current_user else None
    incoming = await read_uploads(photos, settings.MAX_REPORT_PHOTO_SIZE)
    report = ReportService(db).create(fields, reporter_id, photos=incoming)
    return ok("Report created successfully", schemas.Report.model_validate(report))


@router.get("/stats", response_model=schemas.ApiResponse[schemas.ReportStats])
def get_report_stats(
    admin: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    return ok("Report statistics retrieved successfully", ReportService(db).stats())


@router.get("", response_model=schemas.ApiResponse[schemas.PaginatedData[schemas.Report]])
def list_reports(
    filters: schemas.ReportFilter = Depends(get_report_filter),
    params: PageParams = Depends(get_page_params),
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    reports, pagination = ReportService(db).list(filters.to_filter(), params)
    return page("Reports retrieved successfully", reports, schemas.Report, pagination)


@router.get("/{report_id}", response_model=schemas.ApiResponse[schemas.Report])
def get_report(
    report_id: int,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    report = ReportService(db).get_by_id(report_id)
    return ok("Report retrieved successfully", schemas.Report.model_validate(report))


@router.put("/{report_id}", response_model=schemas.ApiResponse[schemas.Report])
async def update_report(
    report_id: int,
    fields: dict = Depends(report_form),
    photos: Optional[List[UploadFile]] = File(None),
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    """Update a report; new ``photos`` are added to the existing ones."""
    incoming = await read_uploads(photos, settings.MAX_REPORT_PHOTO_SIZE)
    report = ReportService(db).update(
        report_id, fields, current_user.id, photos=incoming
    )
    return ok("Report updated successfully", schemas.Report.model_validate(report))


@router.delete("/{report_id}", response_model=schemas.ApiResponse[None])
def delete_report(
    report_id: int,
    admin: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    ReportService(db).delete(report_id)
    return ok("Report deleted successfully")


@router.post(
    "/{report_id}/notes",
    response_model=schemas.ApiResponse[schemas.Report],
    status_code=status.HTTP_201_CREATED,
)
def add_report_note(
    report_id: int,
    payload: schemas.ReportNoteCreate,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    report = ReportService(db).add_note(report_id, payload.content, current_user.id)
    return ok("Note added successfully", schemas.Report.model_validate(report))


@router.patch("/{report_id}/status", response_model=schemas.ApiResponse[schemas.Report])
def update_report_status(
    report_id: int,
    payload: schemas.ReportStatusUpdate,
    admin: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    report = ReportService(db).update_status(report_id, payload.status, payload.assigned_to)
    return ok("Report status updated successfully", schemas.Report.model_validate(report))
