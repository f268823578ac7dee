"""
Shared fixtures.

bcrypt is run at its minimum cost in tests; the production default stays 12.
"""

import functools
from datetime import timedelta
from decimal import Decimal

import pytest

from campaigns.auth import passwords
from campaigns.auth.service import AuthService
from campaigns.auth.tokens import TokenService, TokenSettings
from campaigns.core.models import Account, Role
from campaigns.core.utils import utc_now
from campaigns.services.campaigns import CampaignService
from campaigns.storage import create_local_storage

TEST_SECRET = "test-secret-key-that-is-at-least-32-bytes-long"


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Cheap bcrypt rounds so the suite stays fast."""
    fast = functools.partial(passwords.hash_password, rounds=4)
    for target in ("campaigns.auth.service.hash_password", "campaigns.api.seed.hash_password"):
        monkeypatch.setattr(target, fast)


@pytest.fixture
def token_settings():
    return TokenSettings(secret_key=TEST_SECRET)


@pytest.fixture
def token_service(token_settings):
    return TokenService(token_settings)


@pytest.fixture
def storage():
    return create_local_storage()


@pytest.fixture
def auth_service(storage, token_service):
    return AuthService(storage, token_service)


@pytest.fixture
def campaign_service(storage):
    return CampaignService(storage)


@pytest.fixture
def account():
    return Account(
        id=42,
        username="alice",
        email="alice@x.com",
        password_hash="unused",
        full_name="Alice Example",
        role=Role.USER,
    )


@pytest.fixture
def make_campaign_fields():
    """Factory for a valid create payload starting tomorrow."""
    return campaign_fields


def campaign_fields(**overrides):
    start = utc_now() + timedelta(days=1)
    fields = {
        "name": "Spring Launch",
        "description": "Launch of the spring collection",
        "budget": Decimal("5000"),
        "start_date": start,
        "end_date": start + timedelta(days=30),
        "status": "Draft",
    }
    fields.update(overrides)
    return fields
