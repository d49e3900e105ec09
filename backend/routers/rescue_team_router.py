"""Rescue team endpoints."""

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
from services.rescue_team_service import RescueTeamService

router = APIRouter(prefix="/rescue-team", tags=["rescue-team"])


def get_rescue_team_filter(
    search: Optional[str] = Query(None, description="Matches team name or address"),
    specialization: Optional[db_models.RescueSpecialization] = Query(None),
    availability: Optional[db_models.RescueAvailability] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
) -> schemas.RescueTeamFilter:
    return schemas.RescueTeamFilter(
        search=search,
        specialization=specialization,
        availability=availability,
        is_active=is_active,
    )


def rescue_team_form(
    team_name: Optional[str] = Form(None, alias="teamName"),
    team_address: Optional[str] = Form(None, alias="teamAddress"),
    phone: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    specialization: Optional[List[str]] = Form(None),
    team_size: Optional[int] = Form(None, alias="teamSize"),
    availability: Optional[str] = Form(None),
    equipment: Optional[List[str]] = Form(None),
    is_active: Optional[bool] = Form(None, alias="isActive"),
) -> dict:
    return provided(
        team_name=team_name,
        team_address=team_address,
        phone=phone,
        email=email,
        specialization=list_field(specialization),
        team_size=team_size,
        availability=availability,
        equipment=list_field(equipment),
        is_active=is_active,
    )


@router.get(
    "", response_model=schemas.ApiResponse[schemas.PaginatedData[schemas.RescueTeam]]
)
def list_rescue_teams(
    filters: schemas.RescueTeamFilter = Depends(get_rescue_team_filter),
    params: PageParams = Depends(get_page_params),
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    teams, pagination = RescueTeamService(db).list(filters.to_filter(), params)
    return page("Rescue teams retrieved successfully", teams, schemas.RescueTeam, pagination)


@router.get("/{team_id}", response_model=schemas.ApiResponse[schemas.RescueTeam])
def get_rescue_team(
    team_id: int,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    team = RescueTeamService(db).get_by_id(team_id)
    return ok("Rescue team retrieved successfully", schemas.RescueTeam.model_validate(team))


@router.post(
    "",
    response_model=schemas.ApiResponse[schemas.RescueTeam],
    status_code=status.HTTP_201_CREATED,
)
async def create_rescue_team(
    fields: dict = Depends(rescue_team_form),
    image: Optional[UploadFile] = File(None),
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    team = RescueTeamService(db).create(
        fields, current_user.id, image=await read_upload(image)
    )
    return ok("Rescue team created successfully", schemas.RescueTeam.model_validate(team))


@router.put("/{team_id}", response_model=schemas.ApiResponse[schemas.RescueTeam])
async def update_rescue_team(
    team_id: int,
    fields: dict = Depends(rescue_team_form),
    image: Optional[UploadFile] = File(None),
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    team = RescueTeamService(db).update(
        team_id, fields, current_user.id, image=await read_upload(image)
    )
    return ok("Rescue team updated successfully", schemas.RescueTeam.model_validate(team))


@router.delete("/{team_id}", response_model=schemas.ApiResponse[None])
def delete_rescue_team(
    team_id: int,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    RescueTeamService(db).delete(team_id)
    return ok("Rescue team deleted successfully")
