"""Event, Prediction and their enumerations."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class SportType(str, Enum):
    FOOTBALL = "football"
    BASKETBALL = "basketball"
    TENNIS = "tennis"
    HOCKEY = "hockey"
    BASEBALL = "baseball"


class PredictionOutcome(str, Enum):
    """Fixed outcome set an event resolves to."""

    HOME_WIN = "home_win"
    DRAW = "draw"
    AWAY_WIN = "away_win"

    @property
    def title(self) -> str:
        return _OUTCOME_TITLES[self]


_OUTCOME_TITLES = {
    PredictionOutcome.HOME_WIN: "Home",
    PredictionOutcome.DRAW: "Draw",
    PredictionOutcome.AWAY_WIN: "Away",
}


class Event(BaseModel):
    """Mock sporting event in the active pool."""

    event_id: str
    sport: SportType
    home_team: str
    away_team: str
    start_time: datetime  # timezone-aware
    outcome: PredictionOutcome | None = None  # set once, by resolution

    def has_started(self, now: datetime) -> bool:
        return now >= self.start_time

    def is_locked(self, now: datetime) -> bool:
        return self.has_started(now)

    @property
    def is_resolved(self) -> bool:
        return self.outcome is not None


class Prediction(BaseModel):
    """A user's predicted outcome for one event."""

    prediction_id: str
    event_id: str
    user_id: str
    created_at: datetime
    outcome: PredictionOutcome
    is_correct: bool | None = None  # None until the event resolves
