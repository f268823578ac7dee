"""
Core data models for the campaigns service.

Accounts own campaigns. Campaigns are never physically removed; a deleted
campaign only has its ``is_deleted`` flag set.
"""

from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Generic, Sequence, TypeVar

from pydantic import (
    BaseModel,
    EmailStr,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)

from campaigns.core.exceptions import ValidationFailedError
from campaigns.core.utils import ensure_utc, start_of_today, utc_now


# =============================================================================
# Enums
# =============================================================================


class Role(str, Enum):
    """Account role. Parsed once at the token boundary, passed around typed."""

    ADMIN = "Admin"
    USER = "User"


class CampaignStatus(str, Enum):
    """Campaign lifecycle status, declared in lifecycle order."""

    DRAFT = "Draft"
    ACTIVE = "Active"
    PAUSED = "Paused"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)

    @classmethod
    def parse(cls, value: Any) -> CampaignStatus:
        """
        Accept a status by value ("Active"), name ("active") or ordinal (1).

        Raises ValueError for anything else.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) or (isinstance(value, str) and value.strip().isdigit()):
            index = int(value)
            if 0 <= index < len(_STATUS_ORDER):
                return _STATUS_ORDER[index]
            raise ValueError(f"Invalid campaign status: {value}")
        if isinstance(value, str):
            wanted = value.strip().lower()
            for status in cls:
                if status.value.lower() == wanted:
                    return status
        raise ValueError(f"Invalid campaign status: {value}")


_STATUS_ORDER = list(CampaignStatus)


def status_rank(value: str) -> int:
    """Sort key for a stored status value."""
    return CampaignStatus(value).rank


# =============================================================================
# Stored entities
# =============================================================================


class Account(BaseModel):
    """A registered identity with credentials and a role."""

    id: int
    username: str
    email: str
    password_hash: str
    full_name: str = ""
    role: Role = Role.USER
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    last_login_at: datetime | None = None


class Campaign(BaseModel):
    """The protected, owned record."""

    id: int
    name: str
    description: str = ""
    budget: Decimal
    start_date: datetime
    end_date: datetime
    status: CampaignStatus = CampaignStatus.DRAFT
    created_by: int  # owner account id, immutable
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime | None = None
    is_deleted: bool = False


class AccountResponse(BaseModel):
    """Account data returned to clients (no credentials)."""

    id: int
    username: str
    email: str
    full_name: str
    role: Role
    created_at: datetime
    last_login_at: datetime | None = None

    @classmethod
    def from_account(cls, account: Account) -> AccountResponse:
        return cls(**account.model_dump(exclude={"password_hash", "is_active"}))


class Session(BaseModel):
    """Result of a successful login or registration."""

    token: str
    user_id: int
    username: str
    email: str
    role: Role
    expires_at: datetime


# =============================================================================
# Requests
# =============================================================================


USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")

PASSWORD_RULES = [
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[0-9]"), "Password must contain at least one number"),
    (re.compile(r"[@$!%*?&#]"), "Password must contain at least one special character"),
]

MAX_BUDGET = Decimal("10000000")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=100)
    email: EmailStr = Field(max_length=255)
    password: str = Field(min_length=8)
    full_name: str = Field(default="", max_length=100)

    @field_validator("username")
    @classmethod
    def _username_charset(cls, value: str) -> str:
        if not USERNAME_PATTERN.match(value):
            raise ValueError("Username can only contain letters, numbers, hyphens, and underscores")
        return value

    @field_validator("password")
    @classmethod
    def _password_strength(cls, value: str) -> str:
        # bcrypt only accepts up to 72 bytes of input
        if len(value.encode("utf-8")) > 72:
            raise ValueError("Password cannot exceed 72 bytes")
        for pattern, message in PASSWORD_RULES:
            if not pattern.search(value):
                raise ValueError(message)
        return value


class CampaignCreate(BaseModel):
    name: str = Field(min_length=3, max_length=200)
    description: str = Field(default="", max_length=1000)
    budget: Decimal = Field(gt=0, le=MAX_BUDGET)
    start_date: datetime
    end_date: datetime
    status: CampaignStatus = CampaignStatus.DRAFT

    @field_validator("start_date", "end_date")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: Any) -> CampaignStatus:
        return CampaignStatus.parse(value)

    @model_validator(mode="after")
    def _check_dates(self) -> CampaignCreate:
        # One message per line; format_errors reports each separately
        problems = []
        if self.start_date < start_of_today():
            problems.append("Start date cannot be in the past")
        if self.end_date <= self.start_date:
            problems.append("End date must be after start date")
        if problems:
            raise ValueError("\n".join(problems))
        return self


class CampaignUpdate(BaseModel):
    """Partial update; only fields that are set are applied."""

    name: str | None = Field(default=None, min_length=3, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    budget: Decimal | None = Field(default=None, gt=0, le=MAX_BUDGET)
    start_date: datetime | None = None
    end_date: datetime | None = None
    status: CampaignStatus | None = None

    @field_validator("start_date", "end_date")
    @classmethod
    def _to_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: Any) -> CampaignStatus | None:
        return CampaignStatus.parse(value) if value is not None else None

    @model_validator(mode="after")
    def _end_after_start(self) -> CampaignUpdate:
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


# =============================================================================
# Responses
# =============================================================================


class CampaignResponse(BaseModel):
    id: int
    name: str
    description: str
    budget: Decimal
    start_date: datetime
    end_date: datetime
    status: CampaignStatus
    created_by: int
    creator_name: str = ""
    created_at: datetime
    updated_at: datetime | None = None

    @computed_field
    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days

    @computed_field
    @property
    def is_currently_active(self) -> bool:
        now = utc_now()
        return self.start_date <= now <= self.end_date

    @classmethod
    def from_campaign(cls, campaign: Campaign, creator_name: str = "") -> CampaignResponse:
        return cls(
            **campaign.model_dump(exclude={"is_deleted"}),
            creator_name=creator_name,
        )


T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of a filtered, sorted result set."""

    items: list[T]
    page_number: int
    page_size: int
    total_records: int
    total_pages: int

    @computed_field
    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1

    @computed_field
    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages


class CampaignStatistics(BaseModel):
    total_campaigns: int = 0
    total_budget: Decimal = Decimal("0")
    average_budget: Decimal = Decimal("0")
    draft_campaigns: int = 0
    active_campaigns: int = 0
    paused_campaigns: int = 0
    completed_campaigns: int = 0
    cancelled_campaigns: int = 0


# =============================================================================
# Validation helpers
# =============================================================================


_LOCATION_PREFIXES = ("body", "query", "path")


def format_errors(errors: Sequence[dict[str, Any]]) -> list[str]:
    """Render pydantic error dicts as human-readable "field: message" strings."""
    messages = []
    for error in errors:
        ctx = error.get("ctx") or {}
        if error.get("type") == "value_error" and "error" in ctx:
            lines = str(ctx["error"]).splitlines()
        else:
            lines = [error.get("msg", "Invalid value")]
        loc = list(error.get("loc", ()))
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        field = ".".join(str(part) for part in loc)
        messages.extend(f"{field}: {line}" if field else line for line in lines)
    return messages


def validation_messages(exc: ValidationError) -> list[str]:
    return format_errors(exc.errors())


ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_model(model: type[ModelT], data: ModelT | dict[str, Any]) -> ModelT:
    """Validate ``data`` into ``model``, raising ValidationFailedError on failure."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ValidationFailedError(errors=validation_messages(e)) from e
