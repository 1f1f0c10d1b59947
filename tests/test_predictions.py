"""Prediction store: lock rule, one record per (event, user), settle-once."""

from datetime import timedelta

import pytest

from conftest import T0, make_event, minutes, seed_events
from predplay.engine.predictions import PREDICTIONS_KEY, PredictionStore
from predplay.engine.schedule import EventScheduleManager
from predplay.engine.signals import EngineSignals
from predplay.errors import LockedEvent, PredictionRejected, UnknownEvent
from predplay.models import PredictionOutcome


@pytest.fixture
def signals():
    return EngineSignals()


@pytest.fixture
def predictions(store, clock, signals):
    seed_events(
        store,
        [
            make_event("past", T0 - timedelta(seconds=1)),
            make_event("e1", T0 + minutes(5)),
            make_event("e2", T0 + minutes(10)),
        ],
    )
    schedule = EventScheduleManager(store, clock)
    return PredictionStore(store, clock, schedule, signals)


def test_submit_and_list(predictions):
    p = predictions.submit("e1", "u1", PredictionOutcome.HOME_WIN)
    assert p.is_correct is None
    assert p.created_at == T0
    assert predictions.list("u1") == [p]
    assert predictions.list("u2") == []
    assert predictions.get(p.prediction_id) == p
    assert predictions.find("e1", "u1") == p


def test_resubmit_replaces_previous(predictions):
    predictions.submit("e1", "u1", PredictionOutcome.HOME_WIN)
    latest = predictions.submit("e1", "u1", PredictionOutcome.AWAY_WIN)
    mine = predictions.list("u1")
    assert len(mine) == 1
    assert mine[0].outcome == PredictionOutcome.AWAY_WIN
    assert mine[0].prediction_id == latest.prediction_id


def test_users_are_independent(predictions):
    predictions.submit("e1", "u1", PredictionOutcome.HOME_WIN)
    predictions.submit("e1", "u2", PredictionOutcome.DRAW)
    predictions.submit("e2", "u1", PredictionOutcome.DRAW)
    assert len(predictions.all()) == 3
    assert set(predictions.by_event("u1")) == {"e1", "e2"}


def test_submit_after_start_is_locked(predictions, store):
    before = store.get(PREDICTIONS_KEY)
    with pytest.raises(LockedEvent) as exc:
        predictions.submit("past", "u1", PredictionOutcome.DRAW)
    assert exc.value.event_id == "past"
    assert isinstance(exc.value, PredictionRejected)
    assert predictions.all() == []
    assert store.get(PREDICTIONS_KEY) == before


def test_submit_at_exact_start_is_locked(predictions, clock):
    clock.set(T0 + minutes(5))
    with pytest.raises(LockedEvent):
        predictions.submit("e1", "u1", PredictionOutcome.DRAW)


def test_submit_unknown_event(predictions):
    with pytest.raises(UnknownEvent):
        predictions.submit("nope", "u1", PredictionOutcome.DRAW)


def test_submit_notifies(predictions, signals, counter):
    signals.predictions_changed.connect(counter)
    predictions.submit("e1", "u1", PredictionOutcome.DRAW)
    assert counter.calls == 1


def test_mark_resolved_once(predictions):
    p = predictions.submit("e1", "u1", PredictionOutcome.DRAW)
    assert predictions.mark_resolved(p.prediction_id, True) is True
    assert predictions.get(p.prediction_id).is_correct is True
    assert predictions.mark_resolved(p.prediction_id, False) is False
    assert predictions.get(p.prediction_id).is_correct is True
    assert predictions.mark_resolved("missing", True) is False


def test_predictions_persist(predictions, store, clock, signals):
    p = predictions.submit("e2", "u1", PredictionOutcome.AWAY_WIN)
    reloaded = PredictionStore(store, clock, EventScheduleManager(store, clock), signals)
    assert reloaded.list("u1") == [p]
