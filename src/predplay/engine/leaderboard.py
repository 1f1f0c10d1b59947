"""Cosmetic leaderboard random walk. No effect on the ledger."""

from __future__ import annotations

import random

from predplay.models import LeaderboardEntry

NAMES = (
    "Alex Johnson", "Maria Garcia", "Liam Smith", "Emma Brown", "Noah Davis",
    "Olivia Wilson", "Ava Taylor", "Ethan Martinez", "Sophia Anderson", "Mason Thomas",
    "Isabella Moore", "Logan Jackson", "Mia Martin", "Lucas Lee", "Amelia Perez",
    "James Thompson", "Harper White", "Benjamin Harris", "Evelyn Clark", "Elijah Lewis",
    "Charlotte Walker", "William Hall", "Abigail Allen", "Henry Young", "Emily King",
    "Jackson Wright", "Aiden Scott", "Scarlett Green", "Daniel Adams", "Grace Baker",
)


class Leaderboard:
    def __init__(self, rng: random.Random, nudges_per_step: int = 3) -> None:
        self.rng = rng
        self.nudges_per_step = nudges_per_step
        self.entries: list[LeaderboardEntry] = []

    def load(self) -> list[LeaderboardEntry]:
        self.entries = sorted(
            (
                LeaderboardEntry(entry_id=str(i + 1), name=name, points=self.rng.randint(500, 2000))
                for i, name in enumerate(NAMES)
            ),
            key=lambda e: e.points,
            reverse=True,
        )
        return list(self.entries)

    def nudge(self) -> list[LeaderboardEntry]:
        if not self.entries:
            return self.load()
        updated = list(self.entries)
        for _ in range(self.nudges_per_step):
            idx = self.rng.randrange(len(updated))
            entry = updated[idx]
            updated[idx] = entry.model_copy(update={"points": entry.points + self.rng.randint(-10, 25)})
        self.entries = sorted(updated, key=lambda e: e.points, reverse=True)
        return list(self.entries)
