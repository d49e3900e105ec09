"""Educational content endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import PageParams, get_page_params
from helpers.responses import ok, page
from repositories.database import get_db
from services.education_service import EducationService

router = APIRouter(prefix="/education", tags=["education"])


def get_education_filter(
    search: Optional[str] = Query(None, description="Matches tips or title"),
    category: Optional[db_models.EducationCategory] = Query(None),
    difficulty: Optional[db_models.Difficulty] = Query(None),
    is_published: Optional[bool] = Query(None, alias="isPublished"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
) -> schemas.EducationFilter:
    return schemas.EducationFilter(
        search=search,
        category=category,
        difficulty=difficulty,
        is_published=is_published,
        is_active=is_active,
    )


@router.get(
    "", response_model=schemas.ApiResponse[schemas.PaginatedData[schemas.Education]]
)
def list_education(
    filters: schemas.EducationFilter = Depends(get_education_filter),
    params: PageParams = Depends(get_page_params),
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    items, pagination = EducationService(db).list(filters.to_filter(), params)
    return page(
        "Education content retrieved successfully", items, schemas.Education, pagination
    )


@router.get("/{content_id}", response_model=schemas.ApiResponse[schemas.Education])
def get_education(
    content_id: int,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    """Get an article; every read counts as a view."""
    item = EducationService(db).get_by_id(content_id)
    return ok(
        "Education content retrieved successfully", schemas.Education.model_validate(item)
    )


@router.post(
    "",
    response_model=schemas.ApiResponse[schemas.Education],
    status_code=status.HTTP_201_CREATED,
)
def create_education(
    payload: schemas.EducationCreate,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    item = EducationService(db).create(payload.model_dump(), current_user.id)
    return ok(
        "Education content created successfully", schemas.Education.model_validate(item)
    )


@router.put("/{content_id}", response_model=schemas.ApiResponse[schemas.Education])
def update_education(
    content_id: int,
    payload: schemas.EducationUpdate,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    item = EducationService(db).update(
        content_id, payload.model_dump(exclude_unset=True), current_user.id
    )
    return ok(
        "Education content updated successfully", schemas.Education.model_validate(item)
    )


@router.delete("/{content_id}", response_model=schemas.ApiResponse[None])
def delete_education(
    content_id: int,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    EducationService(db).delete(content_id)
    return ok("Education content deleted successfully")


@router.post("/{content_id}/like", response_model=schemas.ApiResponse[schemas.LikeResult])
def like_education(
    content_id: int,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    likes = EducationService(db).like(content_id)
    return ok("Education content liked successfully", schemas.LikeResult(likes=likes))
