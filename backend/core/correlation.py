"""
Correlation ID generation and request-scoped context.

Every request gets a short ID that is echoed in the ``X-Correlation-ID``
response header, attached to log records and included in error envelopes,
so a user-reported failure can be matched to server logs.
"""

import re
import uuid
from contextvars import ContextVar

CORRELATION_HEADER = "X-Correlation-ID"

# Incoming IDs are accepted only when they look like something we would issue
_VALID_INCOMING_ID = re.compile(r"^[A-Za-z0-9_-]{6,64}$")

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """
    Generate a short, unique correlation ID.

    Returns:
        8-character hexadecimal string.
    """
    return uuid.uuid4().hex[:8]


def get_correlation_id() -> str:
    """Return the current request's correlation ID, or "" outside a request."""
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """Bind a correlation ID to the current context."""
    correlation_id_var.set(correlation_id)


def resolve_correlation_id(incoming: str | None) -> str:
    """
    Pick the correlation ID for a new request.

    A well-formed ID supplied by the client (frontend retry, upstream proxy)
    is reused; anything else is replaced by a freshly generated one.

    Args:
        incoming: Raw value of the X-Correlation-ID request header.

    Returns:
        The correlation ID to bind for this request.
    """
    if incoming and _VALID_INCOMING_ID.match(incoming):
        return incoming
    return generate_correlation_id()
