"""
Shared utility functions for the campaigns service.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone


def generate_token_id() -> str:
    """Random unique identifier used as a token's ``jti`` claim."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def start_of_today() -> datetime:
    """Midnight UTC of the current day."""
    return utc_now().replace(hour=0, minute=0, second=0, microsecond=0)


def ensure_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to an aware UTC datetime.

    Naive values are assumed to already be in UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
