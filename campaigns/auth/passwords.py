"""
Password hashing with bcrypt.
"""

from __future__ import annotations

import logging

import bcrypt

logger = logging.getLogger(__name__)

# Bcrypt work factor
BCRYPT_ROUNDS = 12


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """
    Hash a password using bcrypt.

    Returns the bcrypt hash string (salt embedded).
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against its hash.

    A malformed or empty hash is reported as a mismatch, never raised.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        logger.warning("Stored password hash is malformed")
        return False
