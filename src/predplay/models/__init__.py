"""Canonical schema (Pydantic) - Event, Prediction, Tournament, profile."""

from predplay.models.event import Event, Prediction, PredictionOutcome, SportType
from predplay.models.profile import LeaderboardEntry, PeriodStats, UserProfile, UserStats
from predplay.models.tournament import Tournament, TournamentEntry, TournamentResult

__all__ = [
    "Event",
    "Prediction",
    "PredictionOutcome",
    "SportType",
    "UserProfile",
    "PeriodStats",
    "UserStats",
    "LeaderboardEntry",
    "Tournament",
    "TournamentEntry",
    "TournamentResult",
]
