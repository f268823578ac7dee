"""
Domain errors.

Everything except ``ConfigurationError`` is recovered at the API boundary and
rendered as a response envelope with the error's ``status_code``.
"""

from __future__ import annotations


class CampaignsError(Exception):
    """Base exception for expected, caller-visible failures."""

    status_code: int = 400
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None, errors: list[str] | None = None):
        self.message = message or self.default_message
        self.errors = list(errors or [])
        super().__init__(self.message)


class InvalidCredentialsError(CampaignsError):
    """Unknown account, inactive account or wrong password. Never says which."""

    status_code = 401
    default_message = "Invalid email or password"


class DuplicateIdentityError(CampaignsError):
    """Registration email or username is already taken."""

    status_code = 409
    default_message = "An account with this email or username already exists"


class TokenInvalidError(CampaignsError):
    """Bad signature, wrong issuer/audience, expired or malformed token."""

    status_code = 401
    default_message = "Invalid or expired token"


class NotFoundError(CampaignsError):
    status_code = 404
    default_message = "Resource not found"


class ForbiddenError(CampaignsError):
    status_code = 403
    default_message = "You are not authorized to perform this action"


class ValidationFailedError(CampaignsError):
    """Input violates field constraints. ``errors`` holds one message per violation."""

    status_code = 400
    default_message = "Validation failed"


class ConfigurationError(Exception):
    """Fatal misconfiguration detected at startup (e.g. missing signing secret)."""
