"""
Authentication and authorization.

- tokens: stateless signed session tokens (issue / validate)
- passwords: bcrypt hashing
- service: login and registration
- policies: ownership rule for mutations
- context: the authenticated caller, built from token claims
"""

from campaigns.auth.context import AuthContext
from campaigns.auth.passwords import hash_password, verify_password
from campaigns.auth.policies import can_mutate, ensure_can_mutate
from campaigns.auth.service import AuthService
from campaigns.auth.tokens import TokenClaims, TokenService, TokenSettings

__all__ = [
    "AuthContext",
    "AuthService",
    "TokenClaims",
    "TokenService",
    "TokenSettings",
    "can_mutate",
    "ensure_can_mutate",
    "hash_password",
    "verify_password",
]
