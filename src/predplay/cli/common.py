"""Shared CLI plumbing: open the configured store and build an engine."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from predplay.config.settings import Settings
from predplay.engine.game import GameEngine
from predplay.storage.db import get_connection, init_schema
from predplay.storage.kv import DuckDBKeyValueStore


@contextmanager
def open_engine(settings: Settings) -> Iterator[GameEngine]:
    """Engine over the DuckDB file in settings; closes the connection on exit."""
    conn = get_connection(settings.db_path)
    init_schema(conn)
    try:
        yield GameEngine.from_settings(DuckDBKeyValueStore(conn), settings)
    finally:
        conn.close()


def format_remaining(seconds: float) -> str:
    s = max(0, int(seconds))
    h, rem = divmod(s, 3600)
    m, r = divmod(rem, 60)
    if h > 0:
        return f"{h:02d}:{m:02d}:{r:02d}"
    return f"{m:02d}:{r:02d}"
