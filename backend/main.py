# ruff: noqa: E402
# E402 disabled: load_dotenv() must run before other imports for Sentry DSN

import time
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import sentry_sdk
from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from core.correlation import (
    CORRELATION_HEADER,
    generate_correlation_id,
    get_correlation_id,
    resolve_correlation_id,
    set_correlation_id,
)
from core.logging_config import configure_logging
from core.sentry_config import init_sentry
from helpers.rate_limiter import limiter
from helpers.responses import failure
from helpers.security_headers import SecurityHeadersMiddleware
from helpers.time_utils import format_iso8601, utc_now
from models.config import settings
from models.exceptions import (
    AccountLockedException,
    AuthenticationException,
    BusinessRuleException,
    ConflictException,
    DomainException,
    NotFoundException,
    PermissionDeniedException,
    UpstreamFailureException,
    ValidationException,
)
from repositories.database import Base, engine
from routers import (
    animal_food_router,
    auth_router,
    education_router,
    report_router,
    rescue_team_router,
    vet_router,
)

# Initialize Sentry BEFORE app creation
init_sentry(settings)

# Configure logging with Loguru
configure_logging(settings.ENVIRONMENT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    - Optionally create tables when `AUTO_CREATE_DB` is enabled (development).
    - Make sure the upload directory exists.
    """
    if settings.AUTO_CREATE_DB:
        logger.info(
            "AUTO_CREATE_DB enabled; creating database tables via SQLAlchemy create_all()"
        )
        Base.metadata.create_all(bind=engine)
    else:
        logger.info("AUTO_CREATE_DB disabled; run 'alembic upgrade head' to manage the schema")

    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    logger.info(f"PawBuddy Admin API started ({settings.ENVIRONMENT})")
    yield
    logger.info("PawBuddy Admin API stopped")


app = FastAPI(title="PawBuddy Admin API", lifespan=lifespan)

# Attach rate limiter to app
app.state.limiter = limiter


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Inject correlation ID into request context and Sentry."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request with correlation ID tracking."""
        correlation_id = resolve_correlation_id(request.headers.get(CORRELATION_HEADER))
        set_correlation_id(correlation_id)

        # Add to Sentry context
        sentry_sdk.set_tag("correlation_id", correlation_id)

        response = await call_next(request)

        # Include in response headers
        response.headers[CORRELATION_HEADER] = correlation_id

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all incoming requests with performance monitoring."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request and log timing information."""
        start_time = time.perf_counter()

        client_host = request.client.host if request.client else "unknown"
        logger.info(f"Request: {request.method} {request.url.path} from {client_host}")

        response = await call_next(request)

        duration = time.perf_counter() - start_time

        logger.info(
            f"Response: {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration:.3f}s"
        )

        # Warn on slow requests (configurable threshold)
        if duration > settings.SLOW_REQUEST_THRESHOLD:
            logger.warning(
                f"Slow request: {request.method} {request.url.path} "
                f"took {duration:.2f}s (threshold: {settings.SLOW_REQUEST_THRESHOLD}s)"
            )

        response.headers["X-Response-Time"] = f"{duration:.3f}s"

        return response


# Middleware runs in reverse order of registration
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(CorrelationIdMiddleware)

# Configure CORS from environment settings
# In development, allow all origins for mobile/network testing
cors_origins = ["*"] if settings.ENVIRONMENT == "development" else settings.CORS_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=settings.ENVIRONMENT != "development",
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", CORRELATION_HEADER],
    expose_headers=[CORRELATION_HEADER],
)


def _domain_failure(
    request: Request,
    exc: DomainException,
    status_code: int,
    label: str,
    errors: list[dict[str, str]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    sentry_sdk.set_tag("correlation_id", exc.correlation_id)
    sentry_sdk.set_tag("exception_type", exc.__class__.__name__)

    logger.warning(
        f"{label}: {exc.message}",
        correlation_id=exc.correlation_id,
        exception_type=exc.__class__.__name__,
        path=str(request.url.path),
    )

    return failure(status_code, exc.message, exc.correlation_id, errors, headers)


# Global unhandled exception handler (returns generic 500 and logs details)
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch all unhandled exceptions with full Sentry capture."""
    correlation_id = get_correlation_id() or generate_correlation_id()

    sentry_sdk.set_tag("correlation_id", correlation_id)
    sentry_sdk.capture_exception(exc)

    # Use repr() to escape curly braces in exception message
    # (loguru's .format() interprets them as placeholders otherwise)
    logger.exception(
        f"Unhandled exception: {exc!r}",
        correlation_id=correlation_id,
        path=str(request.url.path),
        method=request.method,
    )

    return failure(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", correlation_id
    )


# Centralized exception handlers
@app.exception_handler(ValidationException)
async def validation_exception_handler(
    request: Request, exc: ValidationException
) -> JSONResponse:
    return _domain_failure(
        request, exc, status.HTTP_400_BAD_REQUEST, "Validation error", errors=exc.errors
    )


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render FastAPI's own body/query/path validation failures like ValidationException."""
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header", "form"):
            loc = loc[1:]
        errors.append({"field": ".".join(loc) or "body", "message": error.get("msg", "")})
    return _domain_failure(
        request,
        ValidationException("Validation failed", errors=errors),
        status.HTTP_400_BAD_REQUEST,
        "Request validation error",
        errors=errors,
    )


@app.exception_handler(NotFoundException)
async def not_found_exception_handler(
    request: Request, exc: NotFoundException
) -> JSONResponse:
    return _domain_failure(request, exc, status.HTTP_404_NOT_FOUND, "Not found")


@app.exception_handler(ConflictException)
async def conflict_exception_handler(
    request: Request, exc: ConflictException
) -> JSONResponse:
    errors = [{"field": exc.field, "message": exc.message}] if exc.field else None
    return _domain_failure(request, exc, status.HTTP_409_CONFLICT, "Conflict", errors=errors)


@app.exception_handler(AuthenticationException)
async def authentication_exception_handler(
    request: Request, exc: AuthenticationException
) -> JSONResponse:
    return _domain_failure(
        request,
        exc,
        status.HTTP_401_UNAUTHORIZED,
        "Authentication failed",
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(AccountLockedException)
async def account_locked_exception_handler(
    request: Request, exc: AccountLockedException
) -> JSONResponse:
    return _domain_failure(request, exc, status.HTTP_423_LOCKED, "Account locked")


@app.exception_handler(PermissionDeniedException)
async def permission_denied_exception_handler(
    request: Request, exc: PermissionDeniedException
) -> JSONResponse:
    return _domain_failure(request, exc, status.HTTP_403_FORBIDDEN, "Permission denied")


@app.exception_handler(BusinessRuleException)
async def business_rule_exception_handler(
    request: Request, exc: BusinessRuleException
) -> JSONResponse:
    return _domain_failure(
        request, exc, status.HTTP_400_BAD_REQUEST, "Business rule violation"
    )


@app.exception_handler(UpstreamFailureException)
async def upstream_failure_exception_handler(
    request: Request, exc: UpstreamFailureException
) -> JSONResponse:
    sentry_sdk.capture_exception(exc)
    return _domain_failure(
        request, exc, status.HTTP_503_SERVICE_UNAVAILABLE, "Upstream failure"
    )


@app.exception_handler(DomainException)
async def domain_exception_handler(
    request: Request, exc: DomainException
) -> JSONResponse:
    """Fallback for domain exceptions without a dedicated handler."""
    return _domain_failure(request, exc, status.HTTP_400_BAD_REQUEST, "Domain error")


@app.exception_handler(RateLimitExceeded)
async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    logger.warning(f"Rate limit exceeded: {request.method} {request.url.path}")
    return failure(
        status.HTTP_429_TOO_MANY_REQUESTS,
        "Too many requests from this IP, please try again later.",
        get_correlation_id() or None,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Unknown routes and unsupported methods get the failure envelope too."""
    message = "Route not found" if exc.status_code == 404 else str(exc.detail)
    return failure(
        exc.status_code, message, get_correlation_id() or None, headers=exc.headers
    )


app.include_router(auth_router.router, prefix="/api")
app.include_router(vet_router.router, prefix="/api")
app.include_router(rescue_team_router.router, prefix="/api")
app.include_router(animal_food_router.router, prefix="/api")
app.include_router(education_router.router, prefix="/api")
app.include_router(report_router.router, prefix="/api")


@app.get("/health")
@limiter.exempt
def health_check() -> dict:
    """Liveness probe."""
    return {
        "status": "OK",
        "message": "Admin Panel API is running",
        "timestamp": format_iso8601(utc_now()),
    }
