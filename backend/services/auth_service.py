"""
Authentication Service

Credential verification with failed-attempt tracking and timed lockout,
bearer token issuance, and bearer token resolution back to an account.

Unknown, inactive and wrong-password logins all fail with the same
``InvalidCredentialsException``; the distinguishing reason only goes to the
log. Neither passwords nor tokens are ever logged.
"""

from datetime import datetime, timedelta
from typing import Optional

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from authentication.security import (
    PasswordHasher,
    TokenIssuer,
    get_password_hasher,
    get_token_issuer,
)
from helpers.time_utils import utc_now
from models.config import settings
from models.exceptions import (
    AccountInactiveException,
    AccountLockedException,
    AccountNotFoundException,
    InvalidCredentialsException,
    InvalidTokenException,
    MissingTokenException,
    ValidationException,
)
from repositories.user_repository import UserRepository
from services.lockout import (
    Locked,
    LockoutPolicy,
    evaluate_lock_state,
    register_failure,
    register_success,
)
from services.user_service import UserService

BEARER_PREFIX = "Bearer "


def lockout_policy() -> LockoutPolicy:
    return LockoutPolicy(
        max_attempts=settings.MAX_LOGIN_ATTEMPTS,
        lock_duration=timedelta(minutes=settings.LOCK_DURATION_MINUTES),
    )


class AuthService:
    """Service for authentication business logic."""

    @staticmethod
    def issue_token(
        user: db_models.User, issuer: Optional[TokenIssuer] = None
    ) -> str:
        issuer = issuer or get_token_issuer()
        return issuer.issue({"sub": str(user.id), "role": user.role.value})

    @staticmethod
    def authenticate(
        db: Session,
        identifier: str,
        password: str,
        hasher: Optional[PasswordHasher] = None,
        issuer: Optional[TokenIssuer] = None,
        policy: Optional[LockoutPolicy] = None,
        now: Optional[datetime] = None,
    ) -> tuple[db_models.User, str]:
        """
        Verify credentials and issue a token.

        Args:
            db: Database session
            identifier: Username or email
            password: Plaintext password
            now: Clock override for tests

        Returns:
            Tuple of (account, bearer token)

        Raises:
            InvalidCredentialsException: Unknown account, inactive account or
                wrong password.
            AccountLockedException: Account is inside its lockout window.
        """
        hasher = hasher or get_password_hasher()
        policy = policy or lockout_policy()
        now = now or utc_now()

        user_repo = UserRepository(db)
        user = user_repo.get_with_credentials(identifier)
        if user is None:
            logger.info("Login failed: unknown account")
            raise InvalidCredentialsException()
        if not user.is_active:
            logger.info(f"Login failed: account {user.id} is inactive")
            raise InvalidCredentialsException()

        state = evaluate_lock_state(now, user.login_attempts, user.lock_until)
        if isinstance(state, Locked):
            logger.warning(f"Login rejected: account {user.id} locked until {state.until}")
            raise AccountLockedException()

        if not hasher.verify(password, user.hashed_password):
            update = register_failure(state, now, policy)
            user.login_attempts = update.login_attempts
            user.lock_until = update.lock_until
            user_repo.commit()
            if update.locked:
                logger.warning(
                    f"Account {user.id} locked after {update.login_attempts} failed logins"
                )
            else:
                logger.info(
                    f"Login failed: wrong password for account {user.id} "
                    f"(attempt {update.login_attempts})"
                )
            raise InvalidCredentialsException()

        update = register_success()
        user.login_attempts = update.login_attempts
        user.lock_until = update.lock_until
        user.last_login = now
        user_repo.commit()
        user_repo.refresh(user)

        logger.info(f"Account {user.id} logged in")
        return user, AuthService.issue_token(user, issuer)

    @staticmethod
    def resolve_bearer(
        db: Session,
        authorization: Optional[str],
        issuer: Optional[TokenIssuer] = None,
    ) -> db_models.User:
        """
        Resolve an ``Authorization`` header value to an account.

        Raises:
            MissingTokenException: No header, or not ``Bearer <token>``.
            InvalidTokenException / ExpiredTokenException: Token does not verify.
            AccountNotFoundException: Token refers to a deleted account.
            AccountInactiveException: Account was deactivated.
            AccountLockedException: Account is inside its lockout window.
        """
        if not authorization or not authorization.startswith(BEARER_PREFIX):
            raise MissingTokenException()
        token = authorization[len(BEARER_PREFIX):].strip()
        if not token:
            raise MissingTokenException()

        claims = (issuer or get_token_issuer()).verify(token)
        try:
            user_id = int(claims["sub"])
        except (KeyError, TypeError, ValueError):
            raise InvalidTokenException()

        user = UserRepository(db).get_by_id(user_id)
        if user is None:
            raise AccountNotFoundException()
        if not user.is_active:
            raise AccountInactiveException()
        if user.is_locked:
            raise AccountLockedException()
        return user

    @staticmethod
    def register(
        db: Session,
        request: schemas.RegisterRequest,
        hasher: Optional[PasswordHasher] = None,
        issuer: Optional[TokenIssuer] = None,
    ) -> tuple[db_models.User, str]:
        """
        Create an account and log it in.

        Uniqueness of username and email is enforced by the unique indexes;
        a collision surfaces as ``ConflictException`` naming the field.
        """
        user = UserService(db, hasher=hasher).insert(request.model_dump())
        logger.info(f"Account {user.id} registered")
        return user, AuthService.issue_token(user, issuer)

    @staticmethod
    def change_password(
        db: Session,
        user_id: int,
        current_password: str,
        new_password: str,
        hasher: Optional[PasswordHasher] = None,
    ) -> None:
        hasher = hasher or get_password_hasher()
        user_repo = UserRepository(db)
        user = user_repo.get_by_id_with_credentials(user_id)
        if user is None:
            raise AccountNotFoundException()

        if not hasher.verify(current_password, user.hashed_password):
            raise ValidationException(
                "Current password is incorrect",
                errors=[
                    {"field": "currentPassword", "message": "Current password is incorrect"}
                ],
            )

        user.hashed_password = hasher.hash(new_password)
        user_repo.commit()
        logger.info(f"Account {user_id} changed its password")
