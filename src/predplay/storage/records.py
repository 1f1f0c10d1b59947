"""Typed record read/write with the degrade-gracefully policy.

Reads treat unavailable storage and undecodable records as absent; writes
that fail are dropped with a warning, leaving in-memory state authoritative.
"""

from __future__ import annotations

from typing import Any, TypeVar

import structlog
from pydantic import TypeAdapter, ValidationError

from predplay.errors import PersistenceUnavailable
from predplay.storage.kv import KeyValueStore

log = structlog.get_logger(__name__)

T = TypeVar("T")


def read_record(store: KeyValueStore, key: str, adapter: TypeAdapter[T]) -> T | None:
    """Load and validate one record. None when missing, unreadable or malformed."""
    try:
        raw = store.get(key)
    except PersistenceUnavailable as e:
        log.warning("persistence_read_failed", key=key, error=str(e))
        return None
    if raw is None:
        return None
    try:
        return adapter.validate_json(raw)
    except ValidationError as e:
        log.warning("malformed_record", key=key, errors=e.error_count())
        return None


def dump_record(adapter: TypeAdapter[Any], value: Any) -> str:
    return adapter.dump_json(value).decode("utf-8")


def write_records(store: KeyValueStore, records: dict[str, str]) -> bool:
    """Write records in one batch. Returns False if the write was dropped."""
    try:
        store.set_many(records)
    except PersistenceUnavailable as e:
        log.warning("persistence_write_dropped", keys=sorted(records), error=str(e))
        return False
    return True
