"""Durable key-value stores backing buffers and the version archive."""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import ContextManager, Dict, Iterable, Iterator, Optional, Protocol, Tuple


class StorageError(RuntimeError):
    """Raised when the durable store cannot be read or written."""

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class KeyValueStore(Protocol):
    """String-to-string mapping that survives process restarts."""

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or ``None`` when the key was never written."""
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def set_many(self, items: Iterable[Tuple[str, str]]) -> None:
        """Write every pair atomically."""
        ...

    def transaction(self) -> ContextManager["KeyValueStore"]:
        """Context manager granting exclusive read-modify-write access."""
        ...

    def close(self) -> None:
        ...


class MemoryStore:
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def set_many(self, items: Iterable[Tuple[str, str]]) -> None:
        with self._lock:
            self._data.update(dict(items))

    @contextmanager
    def transaction(self) -> Iterator["MemoryStore"]:
        with self._lock:
            staged = dict(self._data)
            try:
                yield self
            except BaseException:
                self._data = staged
                raise

    def keys(self) -> tuple[str, ...]:
        return tuple(self._data)

    def close(self) -> None:
        return None


class SqliteStore:
    """Single-table sqlite3 store: ``kv(key TEXT PRIMARY KEY, value TEXT)``.

    Each write commits on its own. ``transaction`` opens ``BEGIN IMMEDIATE``
    and holds a process-local lock, so concurrent ``transaction`` users are
    serialised both inside the process and across processes sharing the
    file.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = threading.RLock()
        self._in_transaction = False
        try:
            if str(self.path) != ":memory:":
                self.path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(
                str(self.path), isolation_level=None, check_same_thread=False
            )
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS kv (key TEXT PRIMARY KEY, value TEXT NOT NULL)"
            )
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(f"Cannot open store at {self.path}: {exc}") from exc

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            try:
                row = self._conn.execute(
                    "SELECT value FROM kv WHERE key = ?", (key,)
                ).fetchone()
            except sqlite3.Error as exc:
                raise StorageError(f"Cannot read '{key}': {exc}", key=key) from exc
        return None if row is None else row[0]

    def set(self, key: str, value: str) -> None:
        self.set_many(((key, value),))

    def set_many(self, items: Iterable[Tuple[str, str]]) -> None:
        rows = list(items)
        with self._lock:
            try:
                if self._in_transaction:
                    self._upsert(rows)
                    return
                self._conn.execute("BEGIN")
                try:
                    self._upsert(rows)
                except sqlite3.Error:
                    self._conn.execute("ROLLBACK")
                    raise
                self._conn.execute("COMMIT")
            except sqlite3.Error as exc:
                keys = ",".join(key for key, _ in rows)
                raise StorageError(f"Cannot write '{keys}': {exc}", key=keys) from exc

    @contextmanager
    def transaction(self) -> Iterator["SqliteStore"]:
        with self._lock:
            if self._in_transaction:
                yield self
                return
            try:
                self._conn.execute("BEGIN IMMEDIATE")
            except sqlite3.Error as exc:
                raise StorageError(f"Cannot lock store: {exc}") from exc
            self._in_transaction = True
            try:
                yield self
            except BaseException:
                self._in_transaction = False
                self._conn.execute("ROLLBACK")
                raise
            self._in_transaction = False
            try:
                self._conn.execute("COMMIT")
            except sqlite3.Error as exc:
                raise StorageError(f"Cannot commit store: {exc}") from exc

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def _upsert(self, rows: list[Tuple[str, str]]) -> None:
        self._conn.executemany(
            "INSERT INTO kv (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            rows,
        )


__all__ = ["KeyValueStore", "MemoryStore", "SqliteStore", "StorageError"]
