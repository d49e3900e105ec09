"""
Unit tests for UserService.
"""

import pytest
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from authentication.security import get_password_hasher
from helpers.pagination import make_page_params
from models.exceptions import (
    BusinessRuleException,
    ConflictException,
    NotFoundException,
    ValidationException,
)
from repositories.user_repository import UserRepository
from services.user_service import UserService


def stored_hash(db_session: Session, user_id: int) -> str:
    return UserRepository(db_session).get_by_id_with_credentials(user_id).hashed_password


def user_filter(**kwargs):
    return schemas.UserFilter(**kwargs).to_filter()


@pytest.fixture
def service(db_session: Session) -> UserService:
    return UserService(db_session)


class TestCreateUser:
    def test_admin_created_account_defaults_to_user_role(self, service):
        user = service.create(
            {"username": "helper", "email": "helper@example.com", "password": "Secret1x"}
        )
        assert user.role == db_models.UserRole.USER
        assert user.is_active is True

    def test_password_is_hashed(self, service, db_session):
        user = service.create(
            {"username": "helper", "email": "helper@example.com", "password": "Secret1x"}
        )
        digest = stored_hash(db_session, user.id)
        assert digest != "Secret1x"
        assert get_password_hasher().verify("Secret1x", digest)

    def test_weak_password_is_rejected(self, service):
        with pytest.raises(ValidationException) as exc_info:
            service.create(
                {"username": "helper", "email": "helper@example.com", "password": "weak"}
            )
        assert exc_info.value.errors[0]["field"] == "password"

    def test_username_pattern(self, service):
        with pytest.raises(ValidationException):
            service.create(
                {"username": "no spaces!", "email": "x@example.com", "password": "Secret1x"}
            )

    def test_duplicate_email(self, service, test_user):
        with pytest.raises(ConflictException) as exc_info:
            service.create(
                {"username": "fresh", "email": "test@example.com", "password": "Secret1x"}
            )
        assert exc_info.value.field == "email"


class TestUpdateUser:
    def test_update_role_and_email(self, service, test_user):
        user = service.update(
            test_user.id, {"role": "moderator", "email": "NEW@example.com"}
        )
        assert user.role == db_models.UserRole.MODERATOR
        assert user.email == "new@example.com"
        assert user.username == "testuser"

    def test_update_password(self, service, test_user, db_session):
        service.update(test_user.id, {"password": "Changed1x"})
        assert get_password_hasher().verify("Changed1x", stored_hash(db_session, test_user.id))

    def test_update_does_not_touch_password_when_absent(self, service, test_user, db_session):
        before = stored_hash(db_session, test_user.id)
        service.update(test_user.id, {"isActive": False})
        assert stored_hash(db_session, test_user.id) == before

    def test_update_missing(self, service):
        with pytest.raises(NotFoundException) as exc_info:
            service.update(999, {"role": "user"})
        assert exc_info.value.message == "User not found"


class TestAccountAdministration:
    def test_cannot_delete_self(self, service, admin_user):
        with pytest.raises(BusinessRuleException) as exc_info:
            service.delete_user(admin_user.id, admin_user.id)
        assert exc_info.value.message == "Cannot delete your own account"

    def test_delete_other(self, service, admin_user, test_user, db_session):
        service.delete_user(test_user.id, admin_user.id)
        assert db_session.get(db_models.User, test_user.id) is None

    def test_toggle_status(self, service, admin_user, test_user):
        assert service.toggle_status(test_user.id, admin_user.id).is_active is False
        assert service.toggle_status(test_user.id, admin_user.id).is_active is True

    def test_cannot_toggle_self(self, service, admin_user):
        with pytest.raises(BusinessRuleException):
            service.toggle_status(admin_user.id, admin_user.id)

    def test_reset_password(self, service, test_user, db_session):
        service.reset_password(test_user.id, "Reset123")
        assert get_password_hasher().verify("Reset123", stored_hash(db_session, test_user.id))


class TestListAndStats:
    def test_filter_and_search(self, service, admin_user, test_user):
        users, pagination = service.list(
            user_filter(role=db_models.UserRole.ADMIN), make_page_params()
        )
        assert [u.username for u in users] == ["adminuser"]
        assert pagination["total"] == 1

        users, _ = service.search("TEST@", make_page_params())
        assert [u.username for u in users] == ["testuser"]

    def test_stats(self, service, admin_user, test_user):
        service.toggle_status(test_user.id, admin_user.id)

        stats = service.stats()

        assert stats.total_users == 2
        assert stats.active_users == 1
        assert stats.inactive_users == 1
        assert stats.admin_users == 1
        assert stats.user_users == 1
