"""
Policies - who may change what.

The ownership rule is a pure function so it can be applied identically
before every mutation (update and soft delete) and tested without I/O.
"""

from __future__ import annotations

import logging

from campaigns.core.exceptions import ForbiddenError
from campaigns.core.models import Role

logger = logging.getLogger(__name__)


def can_mutate(requester_id: int, requester_role: Role, owner_id: int) -> bool:
    """True iff the requester owns the record or is an Admin."""
    return requester_id == owner_id or requester_role == Role.ADMIN


def ensure_can_mutate(
    requester_id: int,
    requester_role: Role,
    owner_id: int,
    action: str = "modify",
) -> None:
    """
    Raise ForbiddenError unless ``can_mutate`` allows the request.

    Denial is final: callers must not fall back to a partial write.
    """
    if not can_mutate(requester_id, requester_role, owner_id):
        logger.warning(
            f"Account {requester_id} denied permission to {action} a record owned by {owner_id}"
        )
        raise ForbiddenError(f"You are not authorized to {action} this campaign")
