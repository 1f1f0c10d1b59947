"""Local persistence: DuckDB-backed key-value records."""

from predplay.storage.kv import DuckDBKeyValueStore, KeyValueStore, MemoryKeyValueStore
from predplay.storage.records import read_record, write_records

__all__ = [
    "KeyValueStore",
    "DuckDBKeyValueStore",
    "MemoryKeyValueStore",
    "read_record",
    "write_records",
]
