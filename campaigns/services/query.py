"""
List-query parameters for campaigns.

Normalization never fails: out-of-range paging is clamped, unknown sort
fields fall back to the creation time and unknown directions to descending.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from campaigns.core.models import CampaignStatus, status_rank
from campaigns.storage import OrderBy, TextSearch

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
DEFAULT_SORT_FIELD = "created_at"

# Accepted sort names (case-insensitive) -> stored field
SORT_FIELDS: dict[str, str] = {
    "name": "name",
    "amount": "budget",
    "budget": "budget",
    "start": "start_date",
    "startdate": "start_date",
    "start_date": "start_date",
    "end": "end_date",
    "enddate": "end_date",
    "end_date": "end_date",
    "status": "status",
    "created": "created_at",
    "createdat": "created_at",
    "created_at": "created_at",
}

SEARCH_FIELDS = ("name", "description")

# Stored value -> sort value, for fields whose natural order isn't the stored one
SORT_KEYS = {
    "status": status_rank,
}


@dataclass
class CampaignQueryParams:
    """Raw list parameters as received from a caller."""

    status: CampaignStatus | str | None = None
    search: str | None = None
    sort_by: str | None = None
    sort_order: str | None = None
    page_number: Any = 1
    page_size: Any = DEFAULT_PAGE_SIZE
    created_by: int | None = None


def clamp_page_number(value: Any) -> int:
    return max(1, _as_int(value, 1))


def clamp_page_size(value: Any) -> int:
    return min(MAX_PAGE_SIZE, max(1, _as_int(value, DEFAULT_PAGE_SIZE)))


def resolve_sort_field(sort_by: Any) -> str:
    if not isinstance(sort_by, str):
        return DEFAULT_SORT_FIELD
    return SORT_FIELDS.get(sort_by.strip().lower(), DEFAULT_SORT_FIELD)


def is_descending(sort_order: Any) -> bool:
    return not (isinstance(sort_order, str) and sort_order.strip().lower() == "asc")


def build_order(sort_by: Any, sort_order: Any) -> list[OrderBy]:
    """
    Primary key from the allow-list, then ``id`` ascending.

    The id tie-break makes the order total, so records with equal sort values
    land on exactly one page.
    """
    sort_field = resolve_sort_field(sort_by)
    return [
        OrderBy(sort_field, descending=is_descending(sort_order), key=SORT_KEYS.get(sort_field)),
        OrderBy("id"),
    ]


def build_search(term: str | None) -> TextSearch | None:
    """Whitespace-only terms are no search at all."""
    if term is None or not term.strip():
        return None
    return TextSearch(term=term.strip(), fields=SEARCH_FIELDS)


def total_pages(total_records: int, page_size: int) -> int:
    return math.ceil(total_records / page_size) if total_records else 0


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
