"""
Account administration service.

Admin-only operations on accounts. Passwords only ever reach the database
through ``prepare``, which replaces the plaintext with its bcrypt hash.
"""

from typing import Any, Mapping, Optional

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from authentication.security import PasswordHasher, get_password_hasher
from models.exceptions import BusinessRuleException
from repositories.user_repository import UserRepository
from services.crud_service import CrudService
from services.file_store import FileStore


class UserService(CrudService[db_models.User]):
    """Service for managing accounts."""

    model = db_models.User
    create_schema = schemas.AdminUserCreate
    update_schema = schemas.AdminUserUpdate
    resource_name = "User"
    name_column = "username"
    creator_field = None
    updater_field = None

    def __init__(
        self,
        db: Session,
        hasher: Optional[PasswordHasher] = None,
        file_store: Optional[FileStore] = None,
    ):
        super().__init__(db, file_store)
        self.hasher = hasher or get_password_hasher()
        self.users = UserRepository(db)

    def merge(
        self,
        entity: db_models.User,
        patch: Mapping[str, Any],
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        # The stored hash cannot be re-validated as a password, so only the patch is checked
        return {**self.validate_patch(patch), **(overrides or {})}

    def prepare(
        self, values: dict[str, Any], entity: Optional[db_models.User] = None
    ) -> dict[str, Any]:
        values = dict(values)
        password = values.pop("password", None)
        if password is not None:
            values["hashed_password"] = self.hasher.hash(password)
        # Unset role falls through to the column default
        if "role" in values:
            if values["role"] is None:
                values.pop("role")
            else:
                values["role"] = db_models.UserRole(values["role"])
        for key in ("username", "email", "is_active"):
            if key in values and values[key] is None and entity is not None:
                values.pop(key)
        return values

    def delete_user(self, user_id: int, actor_id: int) -> None:
        if user_id == actor_id:
            raise BusinessRuleException("Cannot delete your own account")
        self.delete(user_id)

    def toggle_status(self, user_id: int, actor_id: int) -> db_models.User:
        if user_id == actor_id:
            raise BusinessRuleException("Cannot modify your own account status")
        user = self.get_or_404(user_id)
        user.is_active = not user.is_active
        user = self._commit(user)
        logger.info(
            f"User {user_id} {'activated' if user.is_active else 'deactivated'} by {actor_id}"
        )
        return user

    def reset_password(self, user_id: int, new_password: str) -> db_models.User:
        user = self.get_or_404(user_id)
        user.hashed_password = self.hasher.hash(new_password)
        user = self._commit(user)
        logger.info(f"Password reset for user {user_id}")
        return user

    def stats(self) -> schemas.UserStats:
        by_role = self.users.count_by_role()
        active = self.users.count_active(True)
        inactive = self.users.count_active(False)
        return schemas.UserStats(
            total_users=active + inactive,
            active_users=active,
            inactive_users=inactive,
            admin_users=by_role.get(db_models.UserRole.ADMIN.value, 0),
            user_users=by_role.get(db_models.UserRole.USER.value, 0),
        )
