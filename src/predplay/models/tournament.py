"""Tournament definitions and per-user participation state."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class TournamentResult(str, Enum):
    WON = "won"
    LOST = "lost"


class Tournament(BaseModel):
    """Static tournament definition in the pool."""

    tournament_id: str
    title: str
    entry_cost: int = Field(..., ge=0)
    reward: int = Field(..., ge=0)
    duration_sec: int = Field(..., gt=0)


class TournamentEntry(BaseModel):
    """Participation of one user in one tournament; absent means not joined."""

    tournament_id: str
    user_id: str
    joined_at: datetime
    ends_at: datetime
    result: TournamentResult | None = None
