"""Prediction statistics for the profile screen."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from predplay.models import PeriodStats, Prediction, UserStats

PERIODS = {"day": timedelta(days=1), "week": timedelta(days=7), "month": timedelta(days=30)}


def _period(settled: list[Prediction], since: datetime) -> PeriodStats:
    window = [p for p in settled if p.created_at >= since]
    return PeriodStats(total=len(window), correct=sum(1 for p in window if p.is_correct))


def compute_user_stats(predictions: Iterable[Prediction], user_id: str, now: datetime) -> UserStats:
    """Wins/losses over settled predictions, overall and per rolling period."""
    settled = [p for p in predictions if p.user_id == user_id and p.is_correct is not None]
    wins = sum(1 for p in settled if p.is_correct)
    return UserStats(
        day=_period(settled, now - PERIODS["day"]),
        week=_period(settled, now - PERIODS["week"]),
        month=_period(settled, now - PERIODS["month"]),
        wins=wins,
        losses=len(settled) - wins,
    )
