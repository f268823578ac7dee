"""
FastAPI dependencies.

Services live on ``app.state`` (built in the lifespan); these hand them to
route handlers and resolve the caller from the bearer token.
"""

from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from campaigns.auth.context import AuthContext
from campaigns.auth.service import AuthService
from campaigns.auth.tokens import TokenService
from campaigns.core.exceptions import TokenInvalidError
from campaigns.integrations.sentry import set_user
from campaigns.services.campaigns import CampaignService

# auto_error=False so a missing header is reported through our own envelope
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_campaign_service(request: Request) -> CampaignService:
    return request.app.state.campaign_service


async def require_auth(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> AuthContext:
    """
    Resolve the caller from the bearer token.

    Usage:
        @router.get("/things")
        async def list_things(ctx: AuthContext = Depends(require_auth)):
            ...
    """
    if credentials is None:
        raise TokenInvalidError("Authentication required")
    ctx = AuthContext.from_claims(tokens.validate(credentials.credentials))
    set_user(ctx.account_id, ctx.username)
    return ctx
