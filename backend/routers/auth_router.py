"""Authentication and account administration endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import PageParams, get_page_params
from helpers.rate_limiter import limiter
from helpers.responses import ok, page
from models.config import settings
from repositories.database import get_db
from services.auth_service import AuthService
from services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=schemas.ApiResponse[schemas.AuthPayload],
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.RATE_LIMIT_REGISTER)
def register(
    request: Request,
    payload: schemas.RegisterRequest,
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    """Register a new account and return it with a bearer token."""
    user, token = AuthService.register(db, payload)
    return ok(
        "User registered successfully",
        schemas.AuthPayload(user=schemas.User.model_validate(user), token=token),
    )


@router.post("/login", response_model=schemas.ApiResponse[schemas.AuthPayload])
@limiter.limit(settings.RATE_LIMIT_LOGIN)
def login(
    request: Request,
    credentials: schemas.LoginRequest,
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    """
    Login with username or email.

    Five consecutive failures lock the account for two hours.
    """
    user, token = AuthService.authenticate(db, credentials.username, credentials.password)
    return ok(
        "Login successful",
        schemas.AuthPayload(user=schemas.User.model_validate(user), token=token),
    )


@router.get("/me", response_model=schemas.ApiResponse[schemas.User])
async def read_users_me(
    current_user: db_models.User = Depends(auth.get_current_user),
) -> schemas.ApiResponse:
    """Get current user."""
    return ok("User retrieved successfully", schemas.User.model_validate(current_user))


@router.put("/change-password", response_model=schemas.ApiResponse[None])
def change_password(
    payload: schemas.ChangePasswordRequest,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    AuthService.change_password(
        db, current_user.id, payload.current_password, payload.new_password
    )
    return ok("Password changed successfully")


# Account administration (admin only)


def get_user_filter(
    search: Optional[str] = Query(None, description="Matches username or email"),
    role: Optional[db_models.UserRole] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
) -> schemas.UserFilter:
    return schemas.UserFilter(search=search, role=role, is_active=is_active)


@router.get(
    "/users",
    response_model=schemas.ApiResponse[schemas.PaginatedData[schemas.User]],
)
def list_users(
    filters: schemas.UserFilter = Depends(get_user_filter),
    params: PageParams = Depends(get_page_params),
    admin: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    users, pagination = UserService(db).list(filters.to_filter(), params)
    return page("Users retrieved successfully", users, schemas.User, pagination)


@router.post(
    "/users",
    response_model=schemas.ApiResponse[schemas.User],
    status_code=status.HTTP_201_CREATED,
)
def create_user(
    payload: schemas.AdminUserCreate,
    admin: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    user = UserService(db).create(payload.model_dump(), admin.id)
    return ok("User created successfully", schemas.User.model_validate(user))


@router.get("/users/{user_id}", response_model=schemas.ApiResponse[schemas.User])
def get_user(
    user_id: int,
    admin: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    user = UserService(db).get_by_id(user_id)
    return ok("User retrieved successfully", schemas.User.model_validate(user))


@router.put("/users/{user_id}", response_model=schemas.ApiResponse[schemas.User])
def update_user(
    user_id: int,
    payload: schemas.AdminUserUpdate,
    admin: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    user = UserService(db).update(user_id, payload.model_dump(exclude_unset=True), admin.id)
    return ok("User updated successfully", schemas.User.model_validate(user))


@router.delete("/users/{user_id}", response_model=schemas.ApiResponse[None])
def delete_user(
    user_id: int,
    admin: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    UserService(db).delete_user(user_id, admin.id)
    return ok("User deleted successfully")


@router.patch(
    "/users/{user_id}/toggle-status", response_model=schemas.ApiResponse[schemas.User]
)
def toggle_user_status(
    user_id: int,
    admin: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    user = UserService(db).toggle_status(user_id, admin.id)
    state = "activated" if user.is_active else "deactivated"
    return ok(f"User {state} successfully", schemas.User.model_validate(user))


@router.patch("/users/{user_id}/reset-password", response_model=schemas.ApiResponse[None])
def reset_user_password(
    user_id: int,
    payload: schemas.ResetPasswordRequest,
    admin: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    UserService(db).reset_password(user_id, payload.new_password)
    return ok("Password reset successfully")


@router.get("/stats", response_model=schemas.ApiResponse[schemas.UserStats])
def get_user_stats(
    admin: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
) -> schemas.ApiResponse:
    return ok("User statistics retrieved successfully", UserService(db).stats())
