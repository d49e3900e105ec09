"""Animal food catalog endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.forms import json_field, list_field, provided, read_upload
from helpers.pagination import PageParams, get_page_params
from helpers.responses import ok, page
from repositories.database import get_db
from services.animal_food_service import AnimalFoodService

router = APIRouter(prefix="/animal-food", tags=["animal-food"])


def get_animal_food_filter(
    search: Optional[str] = Query(None, description="Matches food name or brand"),
    category: Optional[db_models.FoodCategory] = Query(None),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    in_stock: Optional[bool] = Query(None, alias="inStock"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
) -> schemas.AnimalFoodFilter:
    return schemas.AnimalFoodFilter(
        search=search,
        category=category,
        min_price=min_price,
        max_price=max_price,
        in_stock=in_stock,
        is_active=is_active,
    )


def animal_food_form(
    food_name: Optional[str] = Form(None, alias="foodName"),
    price: Optional[str] = Form(None),
    currency: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    brand: Optional[str] = Form(None),
    weight: Optional[str] = Form(None),
    ingredients: Optional[List[str]] = Form(None),
    nutritional_info: Optional[str] = Form(
        None, alias="nutritionalInfo", description="JSON object"
    ),
    age_group: Optional[str] = Form(None, alias="ageGroup"),
    in_stock: Optional[bool] = Form(None, alias="inStock"),
    stock_quantity: Optional[int] = Form(None, alias="stockQuantity"),
    is_active: Optional[bool] = Form(None, alias="isActive"),
) -> dict:
    return provided(
        food_name=food_name,
        price=price,
        currency=currency,
        category=category,
        brand=brand,
        weight=weight,
        ingredients=list_field(ingredients),
        nutritional_info=json_field("nutritionalInfo", nutritional_info),
        age_group=age_group,
        in_stock=in_stock,
        stock_quantity=stock_quantity,
        is_active=is_active,
    )


@router.get(
    "", response_model=schemas.ApiResponse[schemas.PaginatedData[schemas.AnimalFood]]
)
def list_animal_food(
    filters: schemas.AnimalFoodFilter = Depends(get_animal_food_filter),
    params: PageParams = Depends(get_page_params),
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    items, pagination = AnimalFoodService(db).list(filters.to_filter(), params)
    return page("Animal food retrieved successfully", items, schemas.AnimalFood, pagination)


@router.get("/{food_id}", response_model=schemas.ApiResponse[schemas.AnimalFood])
def get_animal_food(
    food_id: int,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    item = AnimalFoodService(db).get_by_id(food_id)
    return ok("Animal food retrieved successfully", schemas.AnimalFood.model_validate(item))


@router.post(
    "",
    response_model=schemas.ApiResponse[schemas.AnimalFood],
    status_code=status.HTTP_201_CREATED,
)
async def create_animal_food(
    fields: dict = Depends(animal_food_form),
    image: Optional[UploadFile] = File(None),
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    item = AnimalFoodService(db).create(
        fields, current_user.id, image=await read_upload(image)
    )
    return ok("Animal food created successfully", schemas.AnimalFood.model_validate(item))


@router.put("/{food_id}", response_model=schemas.ApiResponse[schemas.AnimalFood])
async def update_animal_food(
    food_id: int,
    fields: dict = Depends(animal_food_form),
    image: Optional[UploadFile] = File(None),
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    item = AnimalFoodService(db).update(
        food_id, fields, current_user.id, image=await read_upload(image)
    )
    return ok("Animal food updated successfully", schemas.AnimalFood.model_validate(item))


@router.delete("/{food_id}", response_model=schemas.ApiResponse[None])
def delete_animal_food(
    food_id: int,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    AnimalFoodService(db).delete(food_id)
    return ok("Animal food deleted successfully")
