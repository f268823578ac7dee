# =============================================================================
# Session Tokens (JWT)
# =============================================================================
#
# Stateless, HMAC-signed tokens:
#   - issue():    claims from an Account, signed with the shared secret
#   - validate(): signature, issuer, audience and expiry (zero leeway)
#
# Validation never consults a store, so a token cannot be revoked before it
# expires. The ``jti`` claim is there for a future denylist.
#
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel

from campaigns.core.exceptions import ConfigurationError, TokenInvalidError
from campaigns.core.models import Account, Role
from campaigns.core.utils import ensure_utc, generate_token_id, utc_now

logger = logging.getLogger(__name__)

MIN_SECRET_BYTES = 32
SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")
REQUIRED_CLAIMS = ["sub", "exp", "iat", "iss", "aud", "jti"]


# =============================================================================
# Models
# =============================================================================


@dataclass(frozen=True)
class TokenSettings:
    """Signing configuration, injected into TokenService at construction."""

    secret_key: str
    issuer: str = "CampaignsAPI"
    audience: str = "CampaignsAPIClients"
    expiry_minutes: int = 60
    algorithm: str = "HS256"


class TokenClaims(BaseModel):
    """Identity claims carried by a validated token."""

    account_id: int
    email: str
    username: str
    role: Role
    full_name: str
    token_id: str
    issued_at: datetime
    expires_at: datetime
    issuer: str
    audience: str


# =============================================================================
# Service
# =============================================================================


class TokenService:
    """Issues and validates signed session tokens."""

    def __init__(self, settings: TokenSettings):
        if not settings.secret_key:
            raise ConfigurationError("JWT secret key not configured")
        if len(settings.secret_key.encode("utf-8")) < MIN_SECRET_BYTES:
            raise ConfigurationError(
                f"JWT secret key must be at least {MIN_SECRET_BYTES} bytes"
            )
        if settings.algorithm not in SUPPORTED_ALGORITHMS:
            raise ConfigurationError(f"Unsupported JWT algorithm: {settings.algorithm}")
        if settings.expiry_minutes <= 0:
            raise ConfigurationError("JWT expiry must be a positive number of minutes")
        self._settings = settings

    @property
    def ttl(self) -> timedelta:
        return timedelta(minutes=self._settings.expiry_minutes)

    def expires_at(self, issued_at: datetime) -> datetime:
        """Expiry instant for a token issued at ``issued_at`` (whole seconds)."""
        issued_at = ensure_utc(issued_at).replace(microsecond=0)
        return issued_at + self.ttl

    def issue(self, account: Account, issued_at: datetime | None = None) -> str:
        """Create a signed token for ``account``."""
        now = ensure_utc(issued_at or utc_now()).replace(microsecond=0)
        payload = {
            "sub": str(account.id),
            "email": account.email,
            "unique_name": account.username,
            "role": account.role.value,
            "name": account.full_name,
            "jti": generate_token_id(),
            "iat": now,
            "exp": self.expires_at(now),
            "iss": self._settings.issuer,
            "aud": self._settings.audience,
        }
        token = jwt.encode(payload, self._settings.secret_key, algorithm=self._settings.algorithm)
        logger.debug(f"Issued token for account {account.id}")
        return token

    def validate(self, token: str) -> TokenClaims:
        """
        Decode and validate a token.

        Returns:
            TokenClaims with the embedded identity

        Raises:
            TokenInvalidError: for every kind of failure (bad signature,
                wrong issuer or audience, expired, malformed)
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key,
                algorithms=[self._settings.algorithm],
                audience=self._settings.audience,
                issuer=self._settings.issuer,
                leeway=0,
                options={"require": REQUIRED_CLAIMS},
            )
            return TokenClaims(
                account_id=int(payload["sub"]),
                email=payload["email"],
                username=payload["unique_name"],
                role=Role(payload["role"]),
                full_name=payload.get("name", ""),
                token_id=payload["jti"],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                issuer=payload["iss"],
                audience=payload["aud"],
            )
        except (jwt.InvalidTokenError, KeyError, TypeError, ValueError) as e:
            logger.debug(f"Token validation failed: {e}")
            raise TokenInvalidError() from e

    def validate_bearer_token(self, value: str | None) -> TokenClaims:
        """Validate a raw token or an ``Authorization: Bearer <token>`` value."""
        if not value:
            raise TokenInvalidError()
        scheme, _, credentials = value.strip().partition(" ")
        if credentials:
            if scheme.lower() != "bearer":
                raise TokenInvalidError()
            value = credentials.strip()
        return self.validate(value)
