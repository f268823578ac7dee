"""
Storage abstractions.

- MetadataStorage → accounts and campaigns (in-memory locally; a SQL
  database in production)
"""

from campaigns.storage.base import (
    Collections,
    DuplicateKeyError,
    MetadataStorage,
    OrderBy,
    StorageProvider,
    TextSearch,
)
from campaigns.storage.local import InMemoryMetadataStorage, create_local_storage

__all__ = [
    "Collections",
    "DuplicateKeyError",
    "MetadataStorage",
    "OrderBy",
    "StorageProvider",
    "TextSearch",
    "InMemoryMetadataStorage",
    "create_local_storage",
]
