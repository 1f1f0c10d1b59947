"""Pydantic schemas for API request/response consistency and OpenAPI docs."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from predplay.models import (
    LeaderboardEntry,
    Prediction,
    PredictionOutcome,
    SportType,
    TournamentResult,
    UserProfile,
    UserStats,
)


# --- Health ---
class HealthResponse(BaseModel):
    status: str = "ok"


# --- Error (consistent shape for 4xx/5xx) ---
class ErrorResponse(BaseModel):
    detail: str = Field(..., description="Human-readable message")
    code: str | None = Field(None, description="Machine-readable code, e.g. event_locked, not_found")


# --- Events feed ---
class EventItem(BaseModel):
    event_id: str
    sport: SportType
    home_team: str
    away_team: str
    start_time: datetime
    locked: bool
    seconds_to_start: float = Field(..., description="0 once locked")
    outcome: PredictionOutcome | None = None
    my_prediction: PredictionOutcome | None = None
    my_prediction_correct: bool | None = None


class EventsResponse(BaseModel):
    events: list[EventItem]
    total: int


class PredictionRequest(BaseModel):
    outcome: PredictionOutcome


class PredictionsResponse(BaseModel):
    predictions: list[Prediction]
    total: int


# --- Points ---
class PointsResponse(BaseModel):
    user_id: str
    balance: int


# --- Tournaments ---
class TournamentItem(BaseModel):
    tournament_id: str
    title: str
    entry_cost: int
    reward: int
    duration_sec: int
    joined: bool = False
    ends_at: datetime | None = None
    seconds_remaining: float | None = None
    result: TournamentResult | None = None


class TournamentsResponse(BaseModel):
    tournaments: list[TournamentItem]
    next_reset_at: datetime


class JoinResponse(BaseModel):
    joined: bool
    balance: int
    code: str | None = Field(None, description="insufficient_points or already_joined when not joined")


# --- Profile ---
class SignInRequest(BaseModel):
    display_name: str = Field(..., min_length=1, max_length=64)


class ProfileResponse(BaseModel):
    user_id: str
    profile: UserProfile | None = None
    balance: int
    stats: UserStats


class LeaderboardResponse(BaseModel):
    entries: list[LeaderboardEntry]
