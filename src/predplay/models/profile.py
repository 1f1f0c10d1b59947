"""User profile, statistics and leaderboard rows."""

from __future__ import annotations

from pydantic import BaseModel, Field, computed_field


class UserProfile(BaseModel):
    user_id: str
    display_name: str
    total_points: int = 0  # snapshot at sign-in; the ledger holds the live balance


class PeriodStats(BaseModel):
    """Settled predictions within one period."""

    total: int = 0
    correct: int = 0

    @computed_field
    @property
    def accuracy(self) -> float:
        if self.total <= 0:
            return 0.0
        return self.correct / self.total

    @computed_field
    @property
    def losses(self) -> int:
        return max(0, self.total - self.correct)


class UserStats(BaseModel):
    day: PeriodStats = Field(default_factory=PeriodStats)
    week: PeriodStats = Field(default_factory=PeriodStats)
    month: PeriodStats = Field(default_factory=PeriodStats)
    wins: int = 0
    losses: int = 0

    @computed_field
    @property
    def accuracy(self) -> float:
        total = self.wins + self.losses
        if total <= 0:
            return 0.0
        return self.wins / total


class LeaderboardEntry(BaseModel):
    entry_id: str
    name: str
    points: int
