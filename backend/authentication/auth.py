"""
FastAPI dependencies for bearer authentication and role checks.
"""

from typing import Callable, Iterable, Optional

from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from authentication.security import TokenIssuer, get_token_issuer
from models.exceptions import AuthenticationRequiredException, ForbiddenException
from repositories.database import get_db
from services.auth_service import AuthService

# Raw header, so malformed values reach resolve_bearer and get its error messages
authorization_header = APIKeyHeader(
    name="Authorization",
    auto_error=False,
    description="Bearer token: `Bearer <token>`",
)


async def get_current_user(
    authorization: Optional[str] = Depends(authorization_header),
    db: Session = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> db_models.User:
    """
    Get the current authenticated user from the bearer token.

    Raises:
        AuthenticationException: Missing, malformed, invalid or expired token,
            or the account no longer exists.
        AccountInactiveException: If the account has been deactivated.
        AccountLockedException: If the account is locked.
    """
    return AuthService.resolve_bearer(db, authorization, issuer)


async def get_current_user_optional(
    authorization: Optional[str] = Depends(authorization_header),
    db: Session = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Optional[db_models.User]:
    """
    Get current user if a token was sent, otherwise return None.

    A token that is sent but does not resolve still fails the request.
    """
    if not authorization:
        return None
    return AuthService.resolve_bearer(db, authorization, issuer)


def require_role(
    identity: Optional[db_models.User], allowed_roles: Iterable[db_models.UserRole | str]
) -> db_models.User:
    """
    Check an identity against a set of roles.

    Raises:
        AuthenticationRequiredException: If there is no identity.
        ForbiddenException: If the identity's role is not allowed.
    """
    if identity is None:
        raise AuthenticationRequiredException()
    allowed = {db_models.UserRole(role) for role in allowed_roles}
    if identity.role not in allowed:
        raise ForbiddenException()
    return identity


def require_roles(
    *roles: db_models.UserRole | str,
) -> Callable[..., db_models.User]:
    """Dependency factory: ``Depends(require_roles(UserRole.ADMIN))``."""

    async def dependency(
        current_user: db_models.User = Depends(get_current_user),
    ) -> db_models.User:
        return require_role(current_user, roles)

    return dependency


get_admin_user = require_roles(db_models.UserRole.ADMIN)
