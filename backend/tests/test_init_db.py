"""Unit tests for init_db functionality."""

from types import SimpleNamespace

import pytest
from sqlalchemy.orm import sessionmaker

import init_db as init_db_module
import repositories.db_models as db_models
from authentication.security import get_password_hasher
from repositories.user_repository import UserRepository


def admin_config(**overrides) -> SimpleNamespace:
    values = {
        "ADMIN_USERNAME": "bootstrap",
        "ADMIN_EMAIL": "Owner@Example.com",
        "ADMIN_PASSWORD": "Bootstrap1",
    }
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.fixture(autouse=True)
def test_database(db_session, monkeypatch):
    """Run init_db against the in-memory test database."""
    bind = db_session.get_bind()
    monkeypatch.setattr(init_db_module, "engine", bind)
    monkeypatch.setattr(init_db_module, "SessionLocal", sessionmaker(bind=bind))


class TestInitDb:
    def test_creates_admin_account(self, db_session, capsys):
        assert init_db_module.init_db(admin_config()) is True

        user = UserRepository(db_session).get_with_credentials("bootstrap")
        assert user is not None
        assert user.email == "owner@example.com"
        assert user.role == db_models.UserRole.ADMIN
        assert user.is_active is True
        assert get_password_hasher().verify("Bootstrap1", user.hashed_password)

        output = capsys.readouterr().out
        assert "[OK] Admin user created" in output
        assert "Bootstrap1" not in output

    @pytest.mark.parametrize(
        "overrides", [{"ADMIN_EMAIL": None}, {"ADMIN_PASSWORD": None}, {"ADMIN_PASSWORD": ""}]
    )
    def test_skips_without_credentials(self, db_session, overrides):
        assert init_db_module.init_db(admin_config(**overrides)) is False
        assert db_session.query(db_models.User).count() == 0

    def test_is_idempotent(self, db_session):
        assert init_db_module.init_db(admin_config()) is True
        assert init_db_module.init_db(admin_config()) is False
        assert db_session.query(db_models.User).count() == 1

    def test_existing_username_is_not_duplicated(self, db_session, admin_user):
        config = admin_config(ADMIN_USERNAME="adminuser", ADMIN_EMAIL="other@example.com")
        assert init_db_module.init_db(config) is False
        assert db_session.query(db_models.User).count() == 1

    def test_weak_password_is_reported(self, db_session, capsys):
        assert init_db_module.init_db(admin_config(ADMIN_PASSWORD="weak")) is False
        assert "Error creating admin account" in capsys.readouterr().out
        assert db_session.query(db_models.User).count() == 0
