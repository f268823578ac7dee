# =============================================================================
# Auth API Routes
# =============================================================================
#
# Endpoints:
#   POST /api/auth/register  - Create account (and log in)
#   POST /api/auth/login     - Get a session token
#   GET  /api/auth/me        - Current account
#
# =============================================================================

from fastapi import APIRouter, Depends

from campaigns.api.dependencies import get_auth_service, require_auth
from campaigns.api.responses import ApiResponse, ok
from campaigns.auth.context import AuthContext
from campaigns.auth.service import AuthService
from campaigns.core.exceptions import (
    DuplicateIdentityError,
    InvalidCredentialsError,
    NotFoundError,
)
from campaigns.core.models import AccountResponse, LoginRequest, RegisterRequest, Session

router = APIRouter(prefix="/api/auth", tags=["auth"])


# =============================================================================
# Public Endpoints
# =============================================================================


@router.post("/login", response_model=ApiResponse[Session])
async def login(
    data: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """
    Authenticate and get a token.
    """
    session = await auth.login(data.email, data.password)
    if session is None:
        raise InvalidCredentialsError()
    return ok(session, "Login successful")


@router.post("/register", response_model=ApiResponse[Session], status_code=201)
async def register(
    data: RegisterRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """
    Create a new account.

    Returns a session token on success (auto-login).
    """
    session = await auth.register(data.username, data.email, data.password, data.full_name)
    if session is None:
        raise DuplicateIdentityError()
    return ok(session, "Registration successful")


# =============================================================================
# Protected Endpoints
# =============================================================================


@router.get("/me", response_model=ApiResponse[AccountResponse])
async def get_current_account(
    ctx: AuthContext = Depends(require_auth),
    auth: AuthService = Depends(get_auth_service),
):
    """
    Get the current authenticated account.
    """
    account = await auth.get_account(ctx.account_id)
    if account is None:
        raise NotFoundError("Account not found")
    return ok(AccountResponse.from_account(account))
