"""
Tests for session token issuance and validation.
"""

from datetime import timedelta

import jwt
import pytest

from campaigns.auth.tokens import TokenService, TokenSettings
from campaigns.core.exceptions import ConfigurationError, TokenInvalidError
from campaigns.core.models import Role
from campaigns.core.utils import utc_now

from conftest import TEST_SECRET


def _flip_char(value: str, index: int) -> str:
    replacement = "A" if value[index] != "A" else "B"
    return value[:index] + replacement + value[index + 1:]


# =============================================================================
# Configuration
# =============================================================================


class TestTokenServiceConfiguration:
    def test_missing_secret_is_fatal(self):
        with pytest.raises(ConfigurationError):
            TokenService(TokenSettings(secret_key=""))

    def test_short_secret_is_fatal(self):
        with pytest.raises(ConfigurationError):
            TokenService(TokenSettings(secret_key="x" * 31))

    def test_unsupported_algorithm_is_fatal(self):
        with pytest.raises(ConfigurationError):
            TokenService(TokenSettings(secret_key=TEST_SECRET, algorithm="RS256"))

    def test_default_ttl_is_sixty_minutes(self, token_service):
        assert token_service.ttl == timedelta(minutes=60)


# =============================================================================
# Issue / Validate
# =============================================================================


class TestRoundTrip:
    def test_claims_match_account(self, token_service, account):
        claims = token_service.validate(token_service.issue(account))

        assert claims.account_id == account.id
        assert claims.email == account.email
        assert claims.username == account.username
        assert claims.role == Role.USER
        assert claims.full_name == account.full_name
        assert claims.issuer == "CampaignsAPI"
        assert claims.audience == "CampaignsAPIClients"
        assert claims.token_id

    def test_expiry_is_issue_time_plus_ttl(self, token_service, account):
        issued_at = utc_now()
        claims = token_service.validate(token_service.issue(account, issued_at=issued_at))

        assert claims.expires_at - claims.issued_at == timedelta(minutes=60)
        assert claims.expires_at == token_service.expires_at(issued_at)

    def test_token_ids_are_unique(self, token_service, account):
        first = token_service.validate(token_service.issue(account))
        second = token_service.validate(token_service.issue(account))

        assert first.token_id != second.token_id

    def test_admin_role_survives(self, token_service, account):
        admin = account.model_copy(update={"role": Role.ADMIN})
        assert token_service.validate(token_service.issue(admin)).role == Role.ADMIN

    def test_subject_is_a_string_claim(self, token_service, account):
        payload = jwt.decode(token_service.issue(account), options={"verify_signature": False})
        assert payload["sub"] == "42"
        assert payload["unique_name"] == "alice"


class TestRejection:
    def test_expired_token_rejected(self, token_service, account):
        token = token_service.issue(account, issued_at=utc_now() - timedelta(minutes=61))
        with pytest.raises(TokenInvalidError):
            token_service.validate(token)

    def test_no_clock_skew_tolerance(self, token_service, account):
        # Expired by about one second
        token = token_service.issue(account, issued_at=utc_now() - timedelta(minutes=60, seconds=1))
        with pytest.raises(TokenInvalidError):
            token_service.validate(token)

    @pytest.mark.parametrize("position", [0, 5, 10, 20, 30])
    def test_tampered_signature_rejected(self, token_service, account, position):
        header, payload, signature = token_service.issue(account).split(".")
        tampered = ".".join([header, payload, _flip_char(signature, position)])

        with pytest.raises(TokenInvalidError):
            token_service.validate(tampered)

    def test_tampered_payload_rejected(self, token_service, account):
        header, payload, signature = token_service.issue(account).split(".")
        tampered = ".".join([header, _flip_char(payload, 10), signature])

        with pytest.raises(TokenInvalidError):
            token_service.validate(tampered)

    def test_other_secret_rejected(self, token_service, account):
        other = TokenService(TokenSettings(secret_key="another-secret-key-that-is-32-bytes-or-more"))
        with pytest.raises(TokenInvalidError):
            token_service.validate(other.issue(account))

    def test_wrong_audience_rejected(self, token_service, account):
        other = TokenService(TokenSettings(secret_key=TEST_SECRET, audience="SomeoneElse"))
        with pytest.raises(TokenInvalidError):
            token_service.validate(other.issue(account))

    def test_wrong_issuer_rejected(self, token_service, account):
        other = TokenService(TokenSettings(secret_key=TEST_SECRET, issuer="Impostor"))
        with pytest.raises(TokenInvalidError):
            token_service.validate(other.issue(account))

    def test_unsigned_token_rejected(self, token_service, account):
        now = utc_now()
        token = jwt.encode(
            {
                "sub": "42", "email": "a@x.com", "unique_name": "a", "role": "Admin",
                "jti": "x", "iat": now, "exp": now + timedelta(minutes=5),
                "iss": "CampaignsAPI", "aud": "CampaignsAPIClients",
            },
            key=None,
            algorithm="none",
        )
        with pytest.raises(TokenInvalidError):
            token_service.validate(token)

    def test_missing_claims_rejected(self, token_service):
        now = utc_now()
        token = jwt.encode(
            {"sub": "42", "iat": now, "exp": now + timedelta(minutes=5),
             "iss": "CampaignsAPI", "aud": "CampaignsAPIClients", "jti": "x"},
            TEST_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(TokenInvalidError):
            token_service.validate(token)

    def test_unknown_role_rejected(self, token_service):
        now = utc_now()
        token = jwt.encode(
            {"sub": "42", "email": "a@x.com", "unique_name": "a", "role": "Superuser",
             "name": "", "jti": "x", "iat": now, "exp": now + timedelta(minutes=5),
             "iss": "CampaignsAPI", "aud": "CampaignsAPIClients"},
            TEST_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(TokenInvalidError):
            token_service.validate(token)

    @pytest.mark.parametrize("garbage", ["", "not-a-token", "a.b.c", "Bearer"])
    def test_malformed_rejected(self, token_service, garbage):
        with pytest.raises(TokenInvalidError):
            token_service.validate(garbage)


class TestBearerHeader:
    def test_accepts_bearer_prefix(self, token_service, account):
        token = token_service.issue(account)
        assert token_service.validate_bearer_token(f"Bearer {token}").account_id == 42

    def test_accepts_raw_token(self, token_service, account):
        token = token_service.issue(account)
        assert token_service.validate_bearer_token(token).account_id == 42

    @pytest.mark.parametrize("value", [None, "", "Basic abc"])
    def test_rejects_other_values(self, token_service, value):
        with pytest.raises(TokenInvalidError):
            token_service.validate_bearer_token(value)
