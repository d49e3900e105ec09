"""
Sentry SDK configuration.

Sentry stays disabled unless ``SENTRY_DSN`` is configured. Events are
scrubbed of account identifiers and credentials before they leave the process.
"""

from typing import TYPE_CHECKING

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.loguru import LoguruIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.types import Event, Hint

if TYPE_CHECKING:
    from models.config import Settings

_SENSITIVE_HEADERS = ("authorization", "cookie")


def _before_send(event: Event, hint: Hint) -> Event | None:
    """
    Scrub PII before sending to Sentry.

    Only the account id is kept on the user context; the Authorization
    header (bearer token) and cookies are filtered from request data.
    """
    user = event.get("user")
    if user:
        user.pop("email", None)
        user.pop("username", None)
        if "ip_address" in user:
            user["ip_address"] = "{{auto}}"

    request = event.get("request")
    if request and isinstance(request, dict):
        request.pop("cookies", None)
        headers = request.get("headers")
        if isinstance(headers, dict):
            for name in list(headers):
                if name.lower() in _SENSITIVE_HEADERS:
                    headers[name] = "[Filtered]"
        # Login and password payloads never leave the process
        request.pop("data", None)

    return event


def _traces_sampler(sampling_context: dict) -> float:
    """Never trace health checks; sample auth traffic more than the rest."""
    if sampling_context.get("parent_sampled") is True:
        return 1.0

    path = sampling_context.get("asgi_scope", {}).get("path", "")
    if path in ("/health", "/api/health"):
        return 0.0
    if path.startswith("/api/auth"):
        return 0.5
    return 0.2


def init_sentry(config: "Settings") -> bool:
    """
    Initialize Sentry SDK with FastAPI integration.

    Call this BEFORE creating the FastAPI app instance.

    Args:
        config: Application settings.

    Returns:
        True when Sentry was initialized, False when disabled.
    """
    if not config.SENTRY_DSN:
        return False

    sentry_sdk.init(
        dsn=config.SENTRY_DSN,
        environment=config.ENVIRONMENT,
        send_default_pii=False,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
            LoguruIntegration(),
        ],
        traces_sampler=_traces_sampler,
        sample_rate=1.0,
        before_send=_before_send,
        attach_stacktrace=True,
        max_breadcrumbs=50,
    )
    return True
