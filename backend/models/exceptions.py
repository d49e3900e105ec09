"""
Custom domain exceptions for the application.

These exceptions are raised by the service layer and converted to the JSON
failure envelope by centralized exception handlers in main.py, so services
and the authentication flow stay HTTP-agnostic and can be reused from
scripts such as init_db.py.

Every exception carries a correlation ID (the request's, when raised inside
a request) for error reporting.
"""

from core.correlation import generate_correlation_id, get_correlation_id


class DomainException(Exception):
    """
    Base class for all domain exceptions.

    Attributes:
        message: Human-readable error message.
        correlation_id: Unique ID for error tracking (auto-generated if not provided).
    """

    def __init__(self, message: str, correlation_id: str | None = None):
        self.message = message
        self.correlation_id = (
            correlation_id or get_correlation_id() or generate_correlation_id()
        )
        super().__init__(self.message)


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    pass


class ValidationException(DomainException):
    """
    Raised when input validation fails.

    Attributes:
        errors: Field-level messages as ``[{"field": ..., "message": ...}]``.
    """

    def __init__(
        self,
        message: str,
        errors: list[dict[str, str]] | None = None,
        correlation_id: str | None = None,
    ):
        super().__init__(message, correlation_id)
        self.errors = errors or []


class ConflictException(DomainException):
    """
    Raised when a write collides with a uniqueness constraint.

    Attributes:
        field: Name of the field that collided, when known.
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    pass


class UpstreamFailureException(DomainException):
    """Raised when the database or the file system fails underneath us."""

    pass


# Authentication (401)


class AuthenticationException(DomainException):
    """Raised when the caller cannot be authenticated."""

    pass


class InvalidCredentialsException(AuthenticationException):
    """Unknown account, inactive account or wrong password.

    The three cases share one message so responses do not reveal which
    accounts exist.
    """

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class MissingTokenException(AuthenticationException):
    """No bearer token, or a malformed Authorization header."""

    def __init__(self, message: str = "Access token is required"):
        super().__init__(message)


class InvalidTokenException(AuthenticationException):
    """Token signature, structure or claims do not verify."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class ExpiredTokenException(AuthenticationException):
    """Token expiry has passed."""

    def __init__(self, message: str = "Token expired"):
        super().__init__(message)


class AccountNotFoundException(AuthenticationException):
    """Token refers to an account that no longer exists."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class AuthenticationRequiredException(AuthenticationException):
    """A role check ran without an authenticated identity."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


# Account state


class AccountLockedException(DomainException):
    """Account is temporarily locked after repeated failed logins."""

    def __init__(self, message: str = "Account is temporarily locked"):
        super().__init__(message)


class PermissionDeniedException(DomainException):
    """Raised when the caller lacks required permissions."""

    pass


class AccountInactiveException(PermissionDeniedException):
    """Account has been deactivated by an administrator."""

    def __init__(self, message: str = "Account is deactivated"):
        super().__init__(message)


class ForbiddenException(PermissionDeniedException):
    """Caller's role is not allowed to perform the operation."""

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message)
