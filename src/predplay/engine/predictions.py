"""Prediction store: one record per (event, user), settled once on resolution."""

from __future__ import annotations

import uuid

import structlog
from pydantic import TypeAdapter

from predplay.engine.clock import Clock
from predplay.engine.schedule import EventScheduleManager
from predplay.engine.signals import EngineSignals
from predplay.errors import LockedEvent, UnknownEvent
from predplay.models import Prediction, PredictionOutcome
from predplay.storage.kv import KeyValueStore
from predplay.storage.records import dump_record, read_record, write_records

log = structlog.get_logger(__name__)

PREDICTIONS_KEY = "predictions"
_PREDICTIONS = TypeAdapter(list[Prediction])


class PredictionStore:
    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock,
        schedule: EventScheduleManager,
        signals: EngineSignals,
    ) -> None:
        self.store = store
        self.clock = clock
        self.schedule = schedule
        self.signals = signals
        self._items: list[Prediction] | None = None

    def _load(self) -> list[Prediction]:
        if self._items is None:
            self._items = read_record(self.store, PREDICTIONS_KEY, _PREDICTIONS) or []
        return self._items

    def records(self) -> dict[str, str]:
        return {PREDICTIONS_KEY: dump_record(_PREDICTIONS, self._load())}

    def save(self) -> bool:
        return write_records(self.store, self.records())

    def submit(self, event_id: str, user_id: str, outcome: PredictionOutcome) -> Prediction:
        """Insert or replace the user's prediction. Raises UnknownEvent or LockedEvent."""
        event = self.schedule.get_event(event_id)
        if event is None:
            raise UnknownEvent(event_id)
        now = self.clock.now()
        if event.is_locked(now):
            raise LockedEvent(event_id)
        prediction = Prediction(
            prediction_id=str(uuid.uuid4()),
            event_id=event_id,
            user_id=user_id,
            created_at=now,
            outcome=PredictionOutcome(outcome),
        )
        items = [p for p in self._load() if not (p.event_id == event_id and p.user_id == user_id)]
        replaced = len(items) != len(self._load())
        items.append(prediction)
        self._items = items
        log.info("prediction_submitted", event_id=event_id, user_id=user_id, outcome=prediction.outcome.value, replaced=replaced)
        self.save()
        self.signals.predictions_changed.emit()
        return prediction

    def all(self) -> list[Prediction]:
        return list(self._load())

    def list(self, user_id: str) -> list[Prediction]:
        return [p for p in self._load() if p.user_id == user_id]

    def by_event(self, user_id: str) -> dict[str, Prediction]:
        return {p.event_id: p for p in self.list(user_id)}

    def get(self, prediction_id: str) -> Prediction | None:
        for p in self._load():
            if p.prediction_id == prediction_id:
                return p
        return None

    def find(self, event_id: str, user_id: str) -> Prediction | None:
        for p in self._load():
            if p.event_id == event_id and p.user_id == user_id:
                return p
        return None

    def mark_resolved(self, prediction_id: str, correct: bool) -> bool:
        """Set the correctness flag in memory; caller persists. False if absent or already set."""
        items = self._load()
        for i, p in enumerate(items):
            if p.prediction_id != prediction_id:
                continue
            if p.is_correct is not None:
                return False
            items[i] = p.model_copy(update={"is_correct": correct})
            return True
        return False
