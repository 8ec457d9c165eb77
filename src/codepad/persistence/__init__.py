"""Durable storage: key-value stores, buffer mirror, version archive."""

from .archive import DEFAULT_ARCHIVE_KEY, ArchiveCorruptedError, Version, VersionArchive
from .kv import KeyValueStore, MemoryStore, SqliteStore, StorageError
from .state import PersistedState, PersistenceLayer

__all__ = [
    "DEFAULT_ARCHIVE_KEY",
    "ArchiveCorruptedError",
    "KeyValueStore",
    "MemoryStore",
    "PersistedState",
    "PersistenceLayer",
    "SqliteStore",
    "StorageError",
    "Version",
    "VersionArchive",
]
