"""Periodic tick driver. Stopping the loop is the only cancellation."""

from __future__ import annotations

import asyncio
import time

import structlog

from predplay.engine.game import GameEngine
from predplay.engine.leaderboard import Leaderboard

log = structlog.get_logger(__name__)


async def run_ticker(
    engine: GameEngine,
    interval_sec: float = 1.0,
    stop_event: asyncio.Event | None = None,
    *,
    leaderboard: Leaderboard | None = None,
    leaderboard_interval_sec: float = 5.0,
) -> int:
    """Call engine.tick() every interval until stop_event is set. Returns ticks run."""
    stop_event = stop_event or asyncio.Event()
    ticks = 0
    last_nudge = time.monotonic()
    log.info("ticker_started", interval_sec=interval_sec)
    while not stop_event.is_set():
        # Tick work is synchronous and always runs to completion
        try:
            engine.tick()
        except Exception as e:
            log.exception("tick_failed", error=str(e))
        ticks += 1
        if leaderboard is not None and time.monotonic() - last_nudge >= leaderboard_interval_sec:
            leaderboard.nudge()
            last_nudge = time.monotonic()
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval_sec)
        except asyncio.TimeoutError:
            pass
    log.info("ticker_stopped", ticks=ticks)
    return ticks
