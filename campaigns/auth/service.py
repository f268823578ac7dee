"""
Authentication: login and registration.

Both return ``None`` for the expected business failures (wrong credentials,
taken identity) so callers cannot tell an unknown account from a wrong
password. Unexpected storage failures propagate.
"""

from __future__ import annotations

import logging

from campaigns.auth.passwords import hash_password, verify_password
from campaigns.auth.tokens import TokenService
from campaigns.core.models import (
    Account,
    RegisterRequest,
    Role,
    Session,
    parse_model,
)
from campaigns.core.utils import generate_token_id, utc_now
from campaigns.storage import Collections, DuplicateKeyError, StorageProvider

logger = logging.getLogger(__name__)


class AuthService:
    """Credential lookup, password verification and token issuance."""

    def __init__(self, storage: StorageProvider, tokens: TokenService):
        self.storage = storage
        self.tokens = tokens
        self._dummy_hash: str | None = None

    @property
    def _metadata(self):
        return self.storage.metadata

    async def login(self, email: str, password: str) -> Session | None:
        """
        Authenticate by email and password.

        Unknown email, inactive account and wrong password all return None.
        """
        doc = await self._metadata.find_one(
            Collections.ACCOUNTS,
            {"email": _normalize_email(email), "is_active": True},
        )
        if doc is None:
            # Unknown emails pay the same bcrypt cost as a wrong password
            verify_password(password, self._get_dummy_hash())
            logger.warning(f"Login attempt with unknown email: {email}")
            return None

        account = Account(**doc)
        if not verify_password(password, account.password_hash):
            logger.warning(f"Login attempt with invalid password for account {account.id}")
            return None

        session = self._create_session(account)
        await self._record_login(account)
        logger.info(f"Account {account.id} logged in")
        return session

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        full_name: str = "",
    ) -> Session | None:
        """
        Create an account and log it in.

        Returns None if the email or username is already taken, including
        when a concurrent registration wins the race at insert time.

        Raises:
            ValidationFailedError: input violates the registration rules
        """
        data = parse_model(
            RegisterRequest,
            {"username": username, "email": email, "password": password, "full_name": full_name},
        )
        email = _normalize_email(data.email)

        if await self._metadata.find_one(Collections.ACCOUNTS, {"email": email}):
            logger.warning(f"Registration attempt with existing email: {email}")
            return None
        if await self._metadata.find_one(Collections.ACCOUNTS, {"username": data.username}):
            logger.warning(f"Registration attempt with existing username: {data.username}")
            return None

        record = {
            "username": data.username,
            "email": email,
            "password_hash": hash_password(data.password),
            "full_name": data.full_name,
            "role": Role.USER,
            "is_active": True,
            "created_at": utc_now(),
            "last_login_at": None,
        }
        try:
            doc = await self._metadata.insert(Collections.ACCOUNTS, record)
        except DuplicateKeyError as e:
            logger.warning(f"Registration lost uniqueness race on {e.field}")
            return None

        account = Account(**doc)
        logger.info(f"New account registered: {account.id}")
        return self._create_session(account)

    async def get_account(self, account_id: int) -> Account | None:
        """Active account by id."""
        doc = await self._metadata.find_one(
            Collections.ACCOUNTS, {"id": account_id, "is_active": True}
        )
        return Account(**doc) if doc else None

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = hash_password(generate_token_id())
        return self._dummy_hash

    def _create_session(self, account: Account) -> Session:
        issued_at = utc_now()
        return Session(
            token=self.tokens.issue(account, issued_at=issued_at),
            user_id=account.id,
            username=account.username,
            email=account.email,
            role=account.role,
            expires_at=self.tokens.expires_at(issued_at),
        )

    async def _record_login(self, account: Account) -> None:
        # Best effort: the session is already issued.
        try:
            await self._metadata.update(
                Collections.ACCOUNTS, account.id, {"last_login_at": utc_now()}
            )
        except Exception:
            logger.exception(f"Failed to record last login for account {account.id}")


def _normalize_email(email: str) -> str:
    return email.strip().lower()
