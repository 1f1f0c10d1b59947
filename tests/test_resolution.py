"""Resolution: draws after lock, settles the acting user's predictions, batches credit."""

from datetime import timedelta

import pytest

from conftest import T0, ScriptedRandom, make_event, minutes, seed_events
from predplay.engine.game import GameEngine
from predplay.engine.identity import StaticIdentity
from predplay.engine.reminders import NullReminderScheduler
from predplay.errors import PersistenceUnavailable
from predplay.models import PredictionOutcome
from predplay.storage.kv import MemoryKeyValueStore

HOME = PredictionOutcome.HOME_WIN
DRAW = PredictionOutcome.DRAW
AWAY = PredictionOutcome.AWAY_WIN


def _engine(store, clock, draws=()):
    return GameEngine(
        store,
        clock=clock,
        rng=ScriptedRandom(draws),
        identity=StaticIdentity("u1"),
        reminders=NullReminderScheduler(),
    )


def _predict_then_start(store, clock, draws, outcome=HOME):
    """One event a minute out; predict, then move to one second past its start."""
    seed_events(store, [make_event("e1", T0 + minutes(1))])
    engine = _engine(store, clock, draws)
    engine.predict("e1", outcome)
    clock.set(T0 + minutes(1) + timedelta(seconds=1))
    return engine


def test_correct_prediction_awards_ten(store, clock):
    engine = _predict_then_start(store, clock, [HOME])
    report = engine.resolver.resolve()
    assert report.resolved_event_ids == ["e1"]
    assert report.points_awarded == 10
    assert engine.predictions.find("e1", "u1").is_correct is True
    assert engine.schedule.get_event("e1").outcome == HOME
    assert engine.ledger.balance() == 10


def test_credited_pass_notifies_once(store, clock, counter):
    engine = _predict_then_start(store, clock, [HOME])
    engine.signals.predictions_changed.connect(counter)
    resolved = []
    engine.signals.events_resolved.connect(lambda: resolved.append(True))
    engine.resolver.resolve()
    assert counter.calls == 1
    assert resolved == [True]


def test_settled_loss_notifies_once(store, clock, counter):
    engine = _predict_then_start(store, clock, [AWAY])
    engine.signals.predictions_changed.connect(counter)
    engine.resolver.resolve()
    assert counter.calls == 1


@pytest.mark.parametrize("drawn", [DRAW, AWAY])
def test_wrong_prediction_awards_nothing(store, clock, drawn):
    engine = _predict_then_start(store, clock, [drawn])
    report = engine.resolver.resolve()
    assert report.points_awarded == 0
    assert report.settled_prediction_ids == [engine.predictions.find("e1", "u1").prediction_id]
    assert engine.predictions.find("e1", "u1").is_correct is False
    assert engine.ledger.balance() == 0


def test_no_resolution_before_start(store, clock):
    seed_events(store, [make_event("e1", T0 + minutes(1))])
    engine = _engine(store, clock, [HOME])
    report = engine.resolver.resolve()
    assert not report.changed
    assert engine.schedule.get_event("e1").outcome is None


def test_resolution_is_idempotent(store, clock, counter):
    engine = _predict_then_start(store, clock, [HOME])
    engine.resolver.resolve()
    snapshot = dict(store.records)
    engine.signals.events_resolved.connect(counter)
    engine.signals.predictions_changed.connect(counter)

    second = engine.resolver.resolve()
    assert not second.changed
    assert second.points_awarded == 0
    assert counter.calls == 0
    assert store.records == snapshot
    assert engine.ledger.balance() == 10


def test_outcome_never_redrawn_across_ticks(store, clock):
    engine = _predict_then_start(store, clock, [AWAY])
    engine.resolver.resolve()
    for _ in range(5):
        clock.advance(seconds=1)
        engine.resolver.resolve()
    assert engine.schedule.get_event("e1").outcome == AWAY


def test_only_acting_user_is_settled(store, clock):
    seed_events(store, [make_event("e1", T0 + minutes(1))])
    engine = _engine(store, clock, [DRAW])
    engine.predictions.submit("e1", "u2", DRAW)
    engine.predict("e1", DRAW)
    clock.advance(minutes=2)
    report = engine.resolver.resolve()
    assert report.points_awarded == 10
    assert engine.predictions.find("e1", "u1").is_correct is True
    assert engine.predictions.find("e1", "u2").is_correct is None


def test_unpredicted_event_resolves_without_credit(store, clock, counter):
    seed_events(store, [make_event("e1", T0 - timedelta(seconds=1))])
    engine = _engine(store, clock, [HOME])
    engine.signals.predictions_changed.connect(counter)
    resolved = []
    engine.signals.events_resolved.connect(lambda: resolved.append(True))
    report = engine.resolver.resolve()
    assert report.resolved_event_ids == ["e1"]
    assert resolved == [True]
    assert counter.calls == 0
    assert engine.ledger.balance() == 0


def test_credit_is_batched_per_pass(store, clock, monkeypatch):
    seed_events(
        store,
        [make_event("e1", T0 + minutes(1)), make_event("e2", T0 + minutes(2)), make_event("e3", T0 + minutes(3))],
    )
    engine = _engine(store, clock, [HOME, HOME, AWAY])
    for event_id in ("e1", "e2", "e3"):
        engine.predict(event_id, HOME)
    credits = []
    original = engine.ledger.credit
    monkeypatch.setattr(engine.ledger, "credit", lambda amount: (credits.append(amount), original(amount)))

    # Drifted tick: all three started since the last pass
    clock.advance(minutes=10)
    report = engine.resolver.resolve()
    assert report.resolved_event_ids == ["e1", "e2", "e3"]
    assert report.correct_count == 2
    assert credits == [20]
    assert engine.ledger.balance() == 20


def test_draws_come_from_outcome_set(store, clock):
    import random

    seed_events(store, [make_event(f"e{i}", T0 - timedelta(seconds=i + 1)) for i in range(30)])
    engine = GameEngine(store, clock=clock, rng=random.Random(7), identity=StaticIdentity("u1"))
    engine.resolver.resolve()
    outcomes = {e.outcome for e in engine.schedule.events}
    assert outcomes <= set(PredictionOutcome)
    assert None not in outcomes


class WriteFailingStore(MemoryKeyValueStore):
    def set_many(self, records):
        raise PersistenceUnavailable("disk full")


def test_write_failure_keeps_in_memory_state(clock):
    store = WriteFailingStore()
    engine = _engine(store, clock, [HOME])
    events = engine.events()  # generated in memory; write dropped
    engine.predict(events[0].event_id, HOME)
    clock.set(events[0].start_time)
    report = engine.resolver.resolve()
    assert report.points_awarded == 10
    assert engine.ledger.balance() == 10
    assert engine.schedule.get_event(events[0].event_id).outcome == HOME
    assert store.records == {}
