"""Tournament engine: pay-to-enter timed draws sharing the points ledger."""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import Any, Iterable

import structlog
from pydantic import BaseModel, Field, TypeAdapter

from predplay.engine.clock import Clock, next_local_midnight
from predplay.engine.ledger import PointsLedger
from predplay.errors import UnknownTournament
from predplay.models import Tournament, TournamentEntry, TournamentResult
from predplay.storage.kv import KeyValueStore
from predplay.storage.records import dump_record, read_record, write_records

log = structlog.get_logger(__name__)

TOURNAMENTS_KEY = "tournaments.state"

DEFAULT_TOURNAMENTS: tuple[Tournament, ...] = (
    Tournament(tournament_id="t1", title="Daily Sprint", entry_cost=20, reward=60, duration_sec=180),
    Tournament(tournament_id="t2", title="Weekly Marathon", entry_cost=50, reward=200, duration_sec=300),
    Tournament(tournament_id="t3", title="High Roller", entry_cost=100, reward=500, duration_sec=420),
)


class TournamentState(BaseModel):
    """Persisted participation state for the current pool."""

    entries: list[TournamentEntry] = Field(default_factory=list)
    next_reset_at: datetime | None = None


_STATE = TypeAdapter(TournamentState)


def parse_tournament_pool(raw: Iterable[dict[str, Any]]) -> tuple[Tournament, ...]:
    """Definitions from config; empty input means the built-in pool."""
    pool = tuple(Tournament.model_validate(item) for item in raw)
    return pool or DEFAULT_TOURNAMENTS


class TournamentEngine:
    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock,
        ledger: PointsLedger,
        rng: random.Random,
        definitions: Iterable[Tournament] = DEFAULT_TOURNAMENTS,
    ) -> None:
        self.store = store
        self.clock = clock
        self.ledger = ledger
        self.rng = rng
        self._definitions = tuple(definitions)
        self.tournaments: list[Tournament] = list(self._definitions)
        state = read_record(store, TOURNAMENTS_KEY, _STATE) or TournamentState()
        known = {t.tournament_id for t in self.tournaments}
        self._entries: dict[tuple[str, str], TournamentEntry] = {
            (e.tournament_id, e.user_id): e for e in state.entries if e.tournament_id in known
        }
        self.next_reset_at: datetime = state.next_reset_at or next_local_midnight(clock.now())

    def _save(self) -> bool:
        state = TournamentState(entries=list(self._entries.values()), next_reset_at=self.next_reset_at)
        return write_records(self.store, {TOURNAMENTS_KEY: dump_record(_STATE, state)})

    def get(self, tournament_id: str) -> Tournament:
        for t in self.tournaments:
            if t.tournament_id == tournament_id:
                return t
        raise UnknownTournament(tournament_id)

    def entry(self, tournament_id: str, user_id: str) -> TournamentEntry | None:
        return self._entries.get((tournament_id, user_id))

    def entries(self, user_id: str | None = None) -> list[TournamentEntry]:
        return [e for e in self._entries.values() if user_id is None or e.user_id == user_id]

    def is_joined(self, tournament_id: str, user_id: str) -> bool:
        return (tournament_id, user_id) in self._entries

    def join(self, tournament_id: str, user_id: str) -> bool:
        """Pay the entry cost and start the countdown. False if already joined or unaffordable."""
        tournament = self.get(tournament_id)
        if self.is_joined(tournament_id, user_id):
            log.info("tournament_join_rejected", tournament_id=tournament_id, user_id=user_id, reason="already_joined")
            return False
        if not self.ledger.debit(tournament.entry_cost):
            log.info("tournament_join_rejected", tournament_id=tournament_id, user_id=user_id, reason="insufficient_points")
            return False
        now = self.clock.now()
        self._entries[(tournament_id, user_id)] = TournamentEntry(
            tournament_id=tournament_id,
            user_id=user_id,
            joined_at=now,
            ends_at=now + timedelta(seconds=tournament.duration_sec),
        )
        log.info("tournament_joined", tournament_id=tournament_id, user_id=user_id, cost=tournament.entry_cost)
        self._save()
        return True

    def time_remaining(self, tournament_id: str, user_id: str) -> float | None:
        """Seconds until the entry ends (never negative); None if not joined."""
        entry = self.entry(tournament_id, user_id)
        if entry is None:
            return None
        return max(0.0, (entry.ends_at - self.clock.now()).total_seconds())

    def settle(self) -> list[TournamentEntry]:
        """Draw win/loss for every expired, unresolved entry; credit rewards on wins."""
        now = self.clock.now()
        settled: list[TournamentEntry] = []
        reward_total = 0
        for key, entry in list(self._entries.items()):
            if entry.result is not None or now < entry.ends_at:
                continue
            won = self.rng.choice((True, False))
            entry = entry.model_copy(update={"result": TournamentResult.WON if won else TournamentResult.LOST})
            self._entries[key] = entry
            settled.append(entry)
            if won:
                reward_total += self.get(entry.tournament_id).reward
            log.info("tournament_settled", tournament_id=entry.tournament_id, user_id=entry.user_id, result=entry.result.value)
        if settled:
            self._save()
            self.ledger.credit(reward_total)
        return settled

    def reset_pool(self) -> None:
        """Clear all participation and reinstate the definitions."""
        self.tournaments = list(self._definitions)
        self._entries.clear()
        self.next_reset_at = next_local_midnight(self.clock.now())
        log.info("tournament_pool_reset", next_reset_at=self.next_reset_at.isoformat())
        self._save()

    def tick(self) -> list[TournamentEntry]:
        settled = self.settle()
        if self.clock.now() >= self.next_reset_at:
            self.reset_pool()
        return settled
