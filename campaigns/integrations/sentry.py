# =============================================================================
# Sentry Error Tracking Integration
# =============================================================================
#
# Setup:
#   Set SENTRY_DSN=https://...@sentry.io/... in the environment or .env
#
# Usage:
#   init_sentry(settings) is called at app startup (campaigns/api/app.py)
#
# =============================================================================

from __future__ import annotations

import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from campaigns.config import Settings
from campaigns.core.exceptions import CampaignsError

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = ("authorization", "cookie", "x-api-key")
SENSITIVE_FIELDS = ("password", "password_hash", "token")


def init_sentry(settings: Settings) -> bool:
    """
    Initialize Sentry error tracking.

    Returns True if initialized, False if skipped.
    """
    if not settings.sentry_dsn:
        logger.info("SENTRY_DSN not set - error tracking disabled")
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        traces_sample_rate=0.1 if settings.is_production else 1.0,
        integrations=[
            FastApiIntegration(transaction_style="url"),
            StarletteIntegration(transaction_style="url"),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        send_default_pii=False,
        before_send=filter_event,
        before_send_transaction=filter_transaction,
    )

    logger.info(f"Sentry initialized for {settings.environment}")
    return True


def filter_event(event: dict, hint: dict) -> dict | None:
    """Drop expected domain errors and scrub credentials."""
    if "exc_info" in hint:
        _, exc_value, _ = hint["exc_info"]
        if isinstance(exc_value, CampaignsError):
            return None

    request = event.get("request") or {}
    headers = request.get("headers") or {}
    for key in list(headers.keys()):
        if key.lower() in SENSITIVE_HEADERS:
            headers[key] = "[Filtered]"

    data = request.get("data")
    if isinstance(data, dict):
        for key in list(data.keys()):
            if key.lower() in SENSITIVE_FIELDS:
                data[key] = "[Filtered]"

    return event


def filter_transaction(event: dict, hint: dict) -> dict | None:
    """Skip health checks (transactions are named by route path)."""
    if event.get("transaction", "") in ("/health", "/healthz"):
        return None
    return event


def set_user(account_id: int, username: str | None = None) -> None:
    """Attach the current account to error reports (no email: PII stays out)."""
    if sentry_sdk.get_client().is_active():
        sentry_sdk.set_user({"id": str(account_id), "username": username})
