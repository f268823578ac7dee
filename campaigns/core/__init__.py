"""
Core module - data models, errors and shared utilities.
"""

from campaigns.core.exceptions import (
    CampaignsError,
    ConfigurationError,
    DuplicateIdentityError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
    TokenInvalidError,
    ValidationFailedError,
)
from campaigns.core.models import (
    Account,
    Campaign,
    CampaignResponse,
    CampaignStatus,
    Page,
    Role,
    Session,
)

__all__ = [
    "Account",
    "Campaign",
    "CampaignResponse",
    "CampaignStatus",
    "Page",
    "Role",
    "Session",
    "CampaignsError",
    "ConfigurationError",
    "DuplicateIdentityError",
    "ForbiddenError",
    "InvalidCredentialsError",
    "NotFoundError",
    "TokenInvalidError",
    "ValidationFailedError",
]
