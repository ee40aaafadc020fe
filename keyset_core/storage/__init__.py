# keyset_core/storage/__init__.py

from .models import SerializationRecord
from .provider import StorageProvider
from .providers.memory_provider import InMemoryStorage
from .providers.sqlite_provider import SQLiteStorage
import os


def load_storage_provider(config: dict | None = None) -> StorageProvider:
    """
    Factory resolver for the serialization store backend.

        - memory (default)
        - sqlite
    """
    config = config or {}
    provider = config.get("provider") or os.getenv("KEYSET_STORAGE_PROVIDER", "memory")

    if provider == "memory":
        return InMemoryStorage()

    if provider == "sqlite":
        db_path = config.get("sqlite_path") or os.getenv("KEYSET_DB_PATH", "db/keyset_state.db")
        return SQLiteStorage(str(db_path))

    raise ValueError(f"Unknown storage provider: {provider}")


__all__ = [
    "SerializationRecord",
    "StorageProvider",
    "InMemoryStorage",
    "SQLiteStorage",
    "load_storage_provider",
]
