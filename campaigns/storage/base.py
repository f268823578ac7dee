"""
Storage abstraction layer.

All persistence goes through these interfaces. This allows swapping
implementations (in-memory → SQLite/PostgreSQL) without changing the
services. Records are plain dicts keyed by a store-assigned integer ``id``.

Nothing is ever physically deleted: accounts are deactivated and campaigns
are soft-deleted through ``update``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel


# =============================================================================
# Query primitives
# =============================================================================


@dataclass(frozen=True)
class TextSearch:
    """Case-insensitive substring match against any of ``fields``."""

    term: str
    fields: tuple[str, ...]


@dataclass(frozen=True)
class OrderBy:
    """
    One sort key.

    ``key`` optionally maps the stored value to its sort value (e.g. a status
    string to its lifecycle rank).
    """

    field: str
    descending: bool = False
    key: Callable[[Any], Any] | None = None


class DuplicateKeyError(Exception):
    """An insert or update would violate a unique index."""

    def __init__(self, collection: str, field: str):
        self.collection = collection
        self.field = field
        super().__init__(f"Duplicate value for unique field '{field}' in '{collection}'")


# =============================================================================
# Storage Interface
# =============================================================================


class MetadataStorage(ABC):
    """
    Storage for structured records (accounts, campaigns).

    Lookups return ``None`` only when nothing matches; any other failure is
    raised to the caller.
    """

    @abstractmethod
    async def insert(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a record, assigning its ``id``. Returns the stored record.

        Raises DuplicateKeyError if a unique index would be violated.
        """
        pass

    @abstractmethod
    async def get(self, collection: str, id: int) -> dict[str, Any] | None:
        """Get a record by ID."""
        pass

    @abstractmethod
    async def find_one(self, collection: str, filters: dict[str, Any]) -> dict[str, Any] | None:
        """First record whose fields equal all ``filters``."""
        pass

    @abstractmethod
    async def update(self, collection: str, id: int, updates: dict[str, Any]) -> bool:
        """Partial update of a record. Returns False if the id does not exist."""
        pass

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        search: TextSearch | None = None,
        order_by: list[OrderBy] | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Query records with equality filters, text search, ordering and skip/take."""
        pass

    @abstractmethod
    async def count(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        search: TextSearch | None = None,
    ) -> int:
        """Count records matching the same predicate ``query`` uses."""
        pass


# =============================================================================
# Storage Provider (dependency injection container)
# =============================================================================


class StorageProvider(BaseModel):
    """
    Container for storage backends.

    Initialize once at app startup; services receive this and use the
    interfaces without knowing the underlying implementation.
    """

    model_config = {"arbitrary_types_allowed": True}

    metadata: MetadataStorage


# =============================================================================
# Collection Names
# =============================================================================


class Collections:
    """Standard collection/table names."""

    ACCOUNTS = "accounts"
    CAMPAIGNS = "campaigns"


# Unique indexes each backend must enforce atomically on write.
UNIQUE_FIELDS: dict[str, tuple[str, ...]] = {
    Collections.ACCOUNTS: ("email", "username"),
}
