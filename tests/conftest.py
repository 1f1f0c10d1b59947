"""Shared fixtures: manual clock, in-memory store, scripted randomness."""

import random
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import TypeAdapter

from predplay.engine.clock import ManualClock
from predplay.engine.game import GameEngine
from predplay.engine.identity import StaticIdentity
from predplay.engine.reminders import NullReminderScheduler
from predplay.engine.schedule import EVENTS_KEY
from predplay.models import Event, SportType
from predplay.storage.kv import MemoryKeyValueStore

T0 = datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)


class ScriptedRandom(random.Random):
    """random.Random whose choice() returns queued values first."""

    def __init__(self, draws=()):
        super().__init__(1234)
        self.draws = list(draws)

    def choice(self, seq):
        if self.draws:
            value = self.draws.pop(0)
            assert value in seq
            return value
        return super().choice(seq)


def make_event(event_id: str, start_time: datetime, outcome=None, sport=SportType.FOOTBALL) -> Event:
    return Event(
        event_id=event_id,
        sport=sport,
        home_team="Home FC",
        away_team="Away FC",
        start_time=start_time,
        outcome=outcome,
    )


def seed_events(store, events) -> None:
    store.set(EVENTS_KEY, TypeAdapter(list[Event]).dump_json(events).decode("utf-8"))


@pytest.fixture
def clock():
    return ManualClock(T0)


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def rng():
    return ScriptedRandom()


@pytest.fixture
def engine(store, clock, rng):
    return GameEngine(
        store,
        clock=clock,
        rng=rng,
        identity=StaticIdentity("u1"),
        reminders=NullReminderScheduler(),
    )


@pytest.fixture
def counter():
    """Callable that counts how often it is invoked."""

    class Counter:
        def __init__(self):
            self.calls = 0

        def __call__(self):
            self.calls += 1

    return Counter()


def minutes(n: int) -> timedelta:
    return timedelta(minutes=n)
