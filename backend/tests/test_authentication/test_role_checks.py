"""Tests for role checks used by protected endpoints."""

import pytest

import repositories.db_models as db_models
from authentication.auth import require_role
from models.exceptions import AuthenticationRequiredException, ForbiddenException


def test_missing_identity_requires_authentication():
    with pytest.raises(AuthenticationRequiredException) as exc_info:
        require_role(None, [db_models.UserRole.ADMIN])
    assert exc_info.value.message == "Authentication required"


def test_role_not_allowed(test_user):
    with pytest.raises(ForbiddenException) as exc_info:
        require_role(test_user, [db_models.UserRole.ADMIN])
    assert exc_info.value.message == "Insufficient permissions"


def test_role_allowed_by_value(admin_user):
    assert require_role(admin_user, ["admin", "moderator"]) is admin_user


def test_unknown_role_name_is_a_programming_error(admin_user):
    with pytest.raises(ValueError):
        require_role(admin_user, ["superuser"])
