"""
User repository for database operations.
"""

from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, undefer

import repositories.db_models as db_models
from .base import BaseRepository


class UserRepository(BaseRepository[db_models.User]):
    """Repository for User entity database operations."""

    def __init__(self, db: Session):
        """
        Initialize user repository.

        Args:
            db: Database session
        """
        super().__init__(db_models.User, db)

    def get_by_email(self, email: str) -> Optional[db_models.User]:
        """
        Get user by email.

        Args:
            email: User email (matched lower-cased)

        Returns:
            User if found, None otherwise
        """
        return (
            self.db.query(db_models.User)
            .filter(db_models.User.email == email.strip().lower())
            .first()
        )

    def get_by_username(self, username: str) -> Optional[db_models.User]:
        """
        Get user by username.

        Args:
            username: Username

        Returns:
            User if found, None otherwise
        """
        return (
            self.db.query(db_models.User)
            .filter(db_models.User.username == username)
            .first()
        )

    def get_with_credentials(self, identifier: str) -> Optional[db_models.User]:
        """
        Get user by username or email with the password hash loaded.

        The hash column is deferred on every other read.

        Args:
            identifier: Username or email

        Returns:
            User if found, None otherwise
        """
        identifier = identifier.strip()
        return (
            self.db.query(db_models.User)
            .options(undefer(db_models.User.hashed_password))
            .filter(
                or_(
                    db_models.User.username == identifier,
                    db_models.User.email == identifier.lower(),
                )
            )
            .first()
        )

    def get_by_id_with_credentials(self, user_id: int) -> Optional[db_models.User]:
        return (
            self.db.query(db_models.User)
            .options(undefer(db_models.User.hashed_password))
            .filter(db_models.User.id == user_id)
            .first()
        )

    def count_by_role(self) -> dict[str, int]:
        """
        Count users per role.

        Returns:
            Mapping of role value to number of users
        """
        rows = (
            self.db.query(db_models.User.role, func.count(db_models.User.id))
            .group_by(db_models.User.role)
            .all()
        )
        return {role.value: total for role, total in rows}

    def count_active(self, is_active: bool) -> int:
        return (
            self.db.query(db_models.User)
            .filter(db_models.User.is_active == is_active)
            .count()
        )
