"""
Password hashing and bearer token primitives.

Both are plain objects built from explicit configuration. The request path
gets them through ``get_password_hasher`` / ``get_token_issuer``, which tests
can override or clear.
"""

from datetime import datetime, timedelta
from functools import lru_cache
from typing import Any, Optional

import bcrypt
import jwt
from loguru import logger

from helpers.time_utils import utc_now
from models.config import settings
from models.exceptions import ExpiredTokenException, InvalidTokenException


class PasswordHasher:
    """bcrypt with a configurable cost factor."""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        return bcrypt.hashpw(
            plaintext.encode(), bcrypt.gensalt(rounds=self.rounds)
        ).decode()

    def verify(self, plaintext: str, digest: str) -> bool:
        """Return True when ``plaintext`` matches ``digest``; False on any malformed digest."""
        if not digest:
            return False
        try:
            return bcrypt.checkpw(plaintext.encode(), digest.encode())
        except ValueError:
            logger.warning("Stored password digest is malformed")
            return False


class TokenIssuer:
    """Signs and verifies HS256 bearer tokens bound to an issuer and audience."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        issuer: str = "admin-panel-api",
        audience: str = "admin-panel-client",
        expires_minutes: int = 24 * 60,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.default_ttl = timedelta(minutes=expires_minutes)

    def issue(
        self,
        claims: dict[str, Any],
        ttl: Optional[timedelta] = None,
        now: Optional[datetime] = None,
    ) -> str:
        issued_at = now or utc_now()
        payload = dict(claims)
        payload.update(
            {
                "iat": issued_at,
                "exp": issued_at + (ttl if ttl is not None else self.default_ttl),
                "iss": self.issuer,
                "aud": self.audience,
            }
        )
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> dict[str, Any]:
        """
        Decode and validate a token.

        Raises:
            ExpiredTokenException: If the expiry has passed.
            InvalidTokenException: For bad signatures, malformed tokens or
                wrong issuer/audience.
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenException()
        except jwt.InvalidTokenError as exc:
            logger.debug(f"Token rejected: {exc.__class__.__name__}")
            raise InvalidTokenException()


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=settings.BCRYPT_ROUNDS)


@lru_cache
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        issuer=settings.JWT_ISSUER,
        audience=settings.JWT_AUDIENCE,
        expires_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )
