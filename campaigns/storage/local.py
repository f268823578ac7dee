"""
In-memory storage implementation.

Works without any external services; used for development and tests. Each
operation runs without awaiting, so it is atomic with respect to other
coroutines on the same event loop.
"""

from __future__ import annotations

from typing import Any

from campaigns.storage.base import (
    UNIQUE_FIELDS,
    DuplicateKeyError,
    MetadataStorage,
    OrderBy,
    StorageProvider,
    TextSearch,
)


class InMemoryMetadataStorage(MetadataStorage):
    """In-memory record storage with auto-increment ids and unique indexes."""

    def __init__(self, unique_fields: dict[str, tuple[str, ...]] | None = None):
        self._data: dict[str, dict[int, dict[str, Any]]] = {}
        self._next_id: dict[str, int] = {}
        self._unique_fields = UNIQUE_FIELDS if unique_fields is None else unique_fields

    def _collection(self, collection: str) -> dict[int, dict[str, Any]]:
        return self._data.setdefault(collection, {})

    def _check_unique(self, collection: str, data: dict[str, Any], exclude_id: int | None = None) -> None:
        for field in self._unique_fields.get(collection, ()):
            if field not in data:
                continue
            for doc_id, doc in self._collection(collection).items():
                if doc_id != exclude_id and doc.get(field) == data[field]:
                    raise DuplicateKeyError(collection, field)

    async def insert(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        self._check_unique(collection, data)
        new_id = self._next_id.get(collection, 1)
        self._next_id[collection] = new_id + 1
        doc = {**data, "id": new_id}
        self._collection(collection)[new_id] = doc
        return dict(doc)

    async def get(self, collection: str, id: int) -> dict[str, Any] | None:
        doc = self._collection(collection).get(id)
        return dict(doc) if doc is not None else None

    async def find_one(self, collection: str, filters: dict[str, Any]) -> dict[str, Any] | None:
        for doc in self._collection(collection).values():
            if _matches(doc, filters, None):
                return dict(doc)
        return None

    async def update(self, collection: str, id: int, updates: dict[str, Any]) -> bool:
        docs = self._collection(collection)
        if id not in docs:
            return False
        updates = {k: v for k, v in updates.items() if k != "id"}
        self._check_unique(collection, updates, exclude_id=id)
        docs[id].update(updates)
        return True

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        search: TextSearch | None = None,
        order_by: list[OrderBy] | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        results = [doc for doc in self._collection(collection).values() if _matches(doc, filters, search)]

        # Stable sorts applied from the least to the most significant key
        for order in reversed(order_by or []):
            results.sort(key=lambda doc, o=order: _sort_value(doc, o), reverse=order.descending)

        return [dict(doc) for doc in results[offset:offset + limit]]

    async def count(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        search: TextSearch | None = None,
    ) -> int:
        return sum(1 for doc in self._collection(collection).values() if _matches(doc, filters, search))


def _matches(doc: dict[str, Any], filters: dict[str, Any] | None, search: TextSearch | None) -> bool:
    for key, value in (filters or {}).items():
        if doc.get(key) != value:
            return False
    if search is not None:
        term = search.term.lower()
        return any(term in str(doc.get(field) or "").lower() for field in search.fields)
    return True


def _sort_value(doc: dict[str, Any], order: OrderBy) -> Any:
    value = doc.get(order.field)
    return order.key(value) if order.key else value


# =============================================================================
# Factory
# =============================================================================


def create_local_storage() -> StorageProvider:
    """Create a StorageProvider with in-memory implementations."""
    return StorageProvider(metadata=InMemoryMetadataStorage())
