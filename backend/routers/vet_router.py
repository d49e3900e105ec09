"""Veterinary directory endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.forms import list_field, provided, read_upload
from helpers.pagination import PageParams, get_page_params
from helpers.responses import ok, page
from repositories.database import get_db
from services.vet_service import VetService

router = APIRouter(prefix="/vet", tags=["vet"])


def get_vet_filter(
    search: Optional[str] = Query(None, description="Matches hospital or address"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
) -> schemas.VetFilter:
    return schemas.VetFilter(search=search, is_active=is_active)


def vet_form(
    hospital: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    website: Optional[str] = Form(None),
    services: Optional[List[str]] = Form(None),
    emergency_service: Optional[bool] = Form(None, alias="emergencyService"),
    rating: Optional[float] = Form(None),
    is_active: Optional[bool] = Form(None, alias="isActive"),
) -> dict:
    return provided(
        hospital=hospital,
        address=address,
        phone=phone,
        email=email,
        website=website,
        services=list_field(services),
        emergency_service=emergency_service,
        rating=rating,
        is_active=is_active,
    )


@router.get("", response_model=schemas.ApiResponse[schemas.PaginatedData[schemas.Vet]])
def list_vet_entries(
    filters: schemas.VetFilter = Depends(get_vet_filter),
    params: PageParams = Depends(get_page_params),
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    entries, pagination = VetService(db).list(filters.to_filter(), params)
    return page("Vet entries retrieved successfully", entries, schemas.Vet, pagination)


@router.get("/{entry_id}", response_model=schemas.ApiResponse[schemas.Vet])
def get_vet_entry(
    entry_id: int,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    entry = VetService(db).get_by_id(entry_id)
    return ok("Vet entry retrieved successfully", schemas.Vet.model_validate(entry))


@router.post(
    "",
    response_model=schemas.ApiResponse[schemas.Vet],
    status_code=status.HTTP_201_CREATED,
)
async def create_vet_entry(
    fields: dict = Depends(vet_form),
    image: Optional[UploadFile] = File(None),
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    """Create an entry; send fields as multipart form data with an optional ``image``."""
    entry = VetService(db).create(fields, current_user.id, image=await read_upload(image))
    return ok("Vet entry created successfully", schemas.Vet.model_validate(entry))


@router.put("/{entry_id}", response_model=schemas.ApiResponse[schemas.Vet])
async def update_vet_entry(
    entry_id: int,
    fields: dict = Depends(vet_form),
    image: Optional[UploadFile] = File(None),
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    """Update an entry; a new ``image`` replaces the old one."""
    entry = VetService(db).update(
        entry_id, fields, current_user.id, image=await read_upload(image)
    )
    return ok("Vet entry updated successfully", schemas.Vet.model_validate(entry))


@router.delete("/{entry_id}", response_model=schemas.ApiResponse[None])
def delete_vet_entry(
    entry_id: int,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    VetService(db).delete(entry_id)
    return ok("Vet entry deleted successfully")
