"""Resolution engine: draws outcomes for locked events and settles predictions."""

from __future__ import annotations

import random
from dataclasses import dataclass, field

import structlog

from predplay.engine.clock import Clock
from predplay.engine.identity import IdentityProvider
from predplay.engine.ledger import PointsLedger
from predplay.engine.predictions import PredictionStore
from predplay.engine.schedule import EventScheduleManager
from predplay.engine.signals import EngineSignals
from predplay.models import PredictionOutcome
from predplay.storage.records import write_records

log = structlog.get_logger(__name__)

OUTCOMES: tuple[PredictionOutcome, ...] = tuple(PredictionOutcome)


@dataclass
class ResolutionReport:
    """What one resolution pass changed."""

    resolved_event_ids: list[str] = field(default_factory=list)
    settled_prediction_ids: list[str] = field(default_factory=list)
    correct_count: int = 0
    points_awarded: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.resolved_event_ids)


class ResolutionEngine:
    def __init__(
        self,
        clock: Clock,
        schedule: EventScheduleManager,
        predictions: PredictionStore,
        ledger: PointsLedger,
        identity: IdentityProvider,
        signals: EngineSignals,
        rng: random.Random,
        *,
        points_per_correct: int = 10,
    ) -> None:
        self.clock = clock
        self.schedule = schedule
        self.predictions = predictions
        self.ledger = ledger
        self.identity = identity
        self.signals = signals
        self.rng = rng
        self.points_per_correct = points_per_correct

    def resolve(self) -> ResolutionReport:
        """One pass: resolve every started, unresolved event for the acting user."""
        now = self.clock.now()
        user_id = self.identity.current_user_id()
        report = ResolutionReport()

        for event in self.schedule.events:
            if event.is_resolved or not event.has_started(now):
                continue
            drawn = self.rng.choice(OUTCOMES)
            if self.schedule.attach_outcome(event.event_id, drawn) is None:
                continue
            report.resolved_event_ids.append(event.event_id)
            log.info("event_resolved", event_id=event.event_id, outcome=drawn.value)

            prediction = self.predictions.find(event.event_id, user_id)
            if prediction is None or prediction.is_correct is not None:
                continue
            correct = prediction.outcome == drawn
            if self.predictions.mark_resolved(prediction.prediction_id, correct):
                report.settled_prediction_ids.append(prediction.prediction_id)
                if correct:
                    report.correct_count += 1
                    report.points_awarded += self.points_per_correct

        if not report.changed:
            return report

        # Events and their settled predictions land in one write
        write_records(self.schedule.store, self.schedule.records() | self.predictions.records())
        self.ledger.credit(report.points_awarded)
        log.info(
            "resolution_pass",
            resolved=len(report.resolved_event_ids),
            settled=len(report.settled_prediction_ids),
            points=report.points_awarded,
        )
        # A non-zero credit has already emitted predictions_changed
        if report.settled_prediction_ids and not report.points_awarded:
            self.signals.predictions_changed.emit()
        self.signals.events_resolved.emit()
        return report
