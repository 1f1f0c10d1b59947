"""Event schedule: rolling pool of mock events, generated deterministically per slot."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import Sequence

import structlog
from pydantic import TypeAdapter

from predplay.engine.clock import Clock, is_same_local_day
from predplay.engine.reminders import NullReminderScheduler, ReminderScheduler
from predplay.models import Event, PredictionOutcome, SportType
from predplay.storage.kv import KeyValueStore
from predplay.storage.records import dump_record, read_record, write_records

log = structlog.get_logger(__name__)

EVENTS_KEY = "events.active"
_EVENTS = TypeAdapter(list[Event])

DEFAULT_ROTATION: tuple[SportType, ...] = (
    SportType.FOOTBALL,
    SportType.BASKETBALL,
    SportType.TENNIS,
    SportType.HOCKEY,
)

ROSTERS: dict[SportType, tuple[str, ...]] = {
    SportType.FOOTBALL: ("Real Madrid", "Barcelona", "Liverpool", "Manchester City", "PSG", "Bayern"),
    SportType.BASKETBALL: ("Lakers", "Celtics", "Warriors", "Bulls", "Heat", "Nets"),
    SportType.TENNIS: ("Djokovic", "Alcaraz", "Sinner", "Medvedev", "Zverev", "Nadal"),
    SportType.HOCKEY: ("Maple Leafs", "Canadiens", "Rangers", "Bruins", "Red Wings", "Blackhawks"),
    SportType.BASEBALL: ("Yankees", "Red Sox", "Dodgers", "Cubs", "Giants", "Mets"),
}


def teams_for(sport: SportType, index: int) -> tuple[str, str]:
    """(home, away) for a slot index: adjacent roster entries, wrapping."""
    roster = ROSTERS[sport]
    return roster[index % len(roster)], roster[(index + 1) % len(roster)]


def sport_for(index: int, rotation: Sequence[SportType] = DEFAULT_ROTATION) -> SportType:
    return rotation[index % len(rotation)]


def generate_event(index: int, start_time: datetime, rotation: Sequence[SportType] = DEFAULT_ROTATION) -> Event:
    sport = sport_for(index, rotation)
    home, away = teams_for(sport, index)
    return Event(
        event_id=str(uuid.uuid4()),
        sport=sport,
        home_team=home,
        away_team=away,
        start_time=start_time,
    )


class EventScheduleManager:
    """Owns the active event pool: generation, pruning, top-up and persistence."""

    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock,
        *,
        reminders: ReminderScheduler | None = None,
        rotation: Sequence[SportType] = DEFAULT_ROTATION,
        initial_count: int = 12,
        spacing_minutes: int = 5,
    ) -> None:
        if not rotation:
            raise ValueError("sport rotation must not be empty")
        self.store = store
        self.clock = clock
        self.reminders = reminders or NullReminderScheduler()
        self.rotation = tuple(rotation)
        self.initial_count = initial_count
        self.spacing_minutes = spacing_minutes
        self._events: list[Event] | None = None

    # --- pool access ---

    def _load(self) -> list[Event]:
        if self._events is None:
            self._events = read_record(self.store, EVENTS_KEY, _EVENTS) or []
        return self._events

    @property
    def events(self) -> list[Event]:
        """Current pool without generating; empty if nothing cached."""
        return list(self._load())

    def get_event(self, event_id: str) -> Event | None:
        for event in self._load():
            if event.event_id == event_id:
                return event
        return None

    def records(self) -> dict[str, str]:
        return {EVENTS_KEY: dump_record(_EVENTS, self._load())}

    def save(self) -> bool:
        return write_records(self.store, self.records())

    # --- generation ---

    def _is_current(self, events: list[Event], now: datetime) -> bool:
        """Stale only when the earliest event falls on a date before today."""
        if not events:
            return False
        earliest = min(e.start_time for e in events)
        return is_same_local_day(earliest, now) or earliest > now

    def _generate(self, count: int, first_start: datetime, spacing: timedelta) -> list[Event]:
        generated = [
            generate_event(index, first_start + spacing * index, self.rotation) for index in range(count)
        ]
        for event in generated:
            self._request_reminder(event)
        return generated

    def _request_reminder(self, event: Event) -> None:
        try:
            self.reminders.schedule_event_reminder(event)
        except Exception as e:
            log.debug("reminder_failed", event_id=event.event_id, error=str(e))

    def fetch_active_events(self) -> list[Event]:
        """Return today's pool, generating a fresh one if absent or stale."""
        now = self.clock.now()
        events = self._load()
        if self._is_current(events, now):
            return list(events)
        spacing = timedelta(minutes=self.spacing_minutes)
        generated = self._generate(self.initial_count, now + spacing, spacing)
        generated.sort(key=lambda e: e.start_time)
        self._events = generated
        log.info("event_pool_generated", count=len(generated), stale=bool(events))
        self.save()
        return list(generated)

    def maintain_rolling_schedule(self, target_count: int = 12, spacing_minutes: int = 5) -> list[Event]:
        """Prune finished events and top the pool back up to target_count."""
        if target_count < 0:
            raise ValueError(f"target_count must be non-negative, got {target_count}")
        if spacing_minutes < 1:
            raise ValueError(f"spacing_minutes must be at least 1, got {spacing_minutes}")
        now = self.clock.now()
        before = [e.event_id for e in self._load()]
        events = [e for e in self._load() if not (e.has_started(now) and e.is_resolved)]
        pruned = len(before) - len(events)

        spacing = timedelta(minutes=spacing_minutes)
        last_start = max((e.start_time for e in events), default=now)
        next_start = max(now + spacing, last_start + spacing)
        missing = max(0, target_count - len(events))
        events.extend(self._generate(missing, next_start, spacing))

        events.sort(key=lambda e: e.start_time)
        trimmed = events[target_count:]
        events = events[:target_count]

        self._events = events
        if [e.event_id for e in events] != before:
            log.info(
                "schedule_maintained",
                pruned=pruned,
                added=missing,
                trimmed=len(trimmed),
                count=len(events),
            )
            self.save()
        return list(events)

    # --- resolution hook ---

    def attach_outcome(self, event_id: str, outcome: PredictionOutcome) -> Event | None:
        """Set the outcome in memory; caller persists. None if absent, unstarted or already resolved."""
        now = self.clock.now()
        events = self._load()
        for i, event in enumerate(events):
            if event.event_id != event_id:
                continue
            if event.is_resolved or not event.has_started(now):
                return None
            events[i] = event.model_copy(update={"outcome": outcome})
            return events[i]
        return None
