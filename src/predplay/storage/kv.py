"""Key-value record stores. Values are JSON text."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import duckdb

from predplay.errors import PersistenceUnavailable

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection


class KeyValueStore(ABC):
    """Synchronous local store of JSON records keyed by name."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored JSON text, or None if absent. Raises PersistenceUnavailable."""
        ...

    @abstractmethod
    def set_many(self, records: dict[str, str]) -> None:
        """Write all records atomically. Raises PersistenceUnavailable."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})


class MemoryKeyValueStore(KeyValueStore):
    """In-process store for tests and throwaway sessions."""

    def __init__(self, records: dict[str, str] | None = None) -> None:
        self.records: dict[str, str] = dict(records or {})

    def get(self, key: str) -> str | None:
        return self.records.get(key)

    def set_many(self, records: dict[str, str]) -> None:
        self.records.update(records)

    def delete(self, key: str) -> None:
        self.records.pop(key, None)


class DuckDBKeyValueStore(KeyValueStore):
    """Store backed by the kv_store table. Caller owns the connection."""

    def __init__(self, conn: DuckDBPyConnection) -> None:
        self.conn = conn

    def get(self, key: str) -> str | None:
        try:
            row = self.conn.execute("SELECT value FROM kv_store WHERE key = ?", [key]).fetchone()
        except duckdb.Error as e:
            raise PersistenceUnavailable(f"read {key}: {e}") from e
        if not row:
            return None
        return row[0]

    def set_many(self, records: dict[str, str]) -> None:
        if not records:
            return
        now_ms = int(time.time() * 1000)
        try:
            self.conn.begin()
            for key, value in records.items():
                self.conn.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT (key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    [key, value, now_ms],
                )
            self.conn.commit()
        except duckdb.Error as e:
            try:
                self.conn.rollback()
            except duckdb.Error:
                pass  # no open transaction
            raise PersistenceUnavailable(f"write {sorted(records)}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self.conn.execute("DELETE FROM kv_store WHERE key = ?", [key])
        except duckdb.Error as e:
            raise PersistenceUnavailable(f"delete {key}: {e}") from e
