"""
Auth context - who is making the request.

Built once per request from validated token claims and handed to the
services, so nothing downstream re-reads the token.
"""

from __future__ import annotations

from dataclasses import dataclass

from campaigns.auth.policies import can_mutate
from campaigns.auth.tokens import TokenClaims
from campaigns.core.models import Role


@dataclass(frozen=True)
class AuthContext:
    """
    Authenticated caller.

    Usage in routes:
        async def my_route(ctx: AuthContext = Depends(require_auth)):
            if ctx.can_mutate(campaign.created_by):
                ...
    """

    account_id: int
    email: str
    username: str
    role: Role
    full_name: str = ""
    token_id: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def can_mutate(self, owner_id: int) -> bool:
        """Can this caller update or delete a record owned by ``owner_id``?"""
        return can_mutate(self.account_id, self.role, owner_id)

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> AuthContext:
        return cls(
            account_id=claims.account_id,
            email=claims.email,
            username=claims.username,
            role=claims.role,
            full_name=claims.full_name,
            token_id=claims.token_id,
        )
