"""GameEngine: wires the components and runs one maintenance tick."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable

import structlog

from predplay.config.settings import Settings
from predplay.engine.clock import Clock, SystemClock
from predplay.engine.identity import IdentityProvider, LocalAuth
from predplay.engine.ledger import PointsLedger
from predplay.engine.predictions import PredictionStore
from predplay.engine.reminders import LoggingReminderScheduler, ReminderScheduler
from predplay.engine.resolution import ResolutionEngine, ResolutionReport
from predplay.engine.schedule import EventScheduleManager
from predplay.engine.signals import EngineSignals
from predplay.engine.stats import compute_user_stats
from predplay.engine.tournaments import DEFAULT_TOURNAMENTS, TournamentEngine, parse_tournament_pool
from predplay.models import Event, Prediction, PredictionOutcome, Tournament, TournamentEntry, UserStats
from predplay.storage.kv import KeyValueStore

log = structlog.get_logger(__name__)


@dataclass
class TickReport:
    resolution: ResolutionReport
    event_count: int
    settled_tournaments: list[TournamentEntry] = field(default_factory=list)


class GameEngine:
    """Single-device game: schedule, predictions, resolution, ledger, tournaments."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        clock: Clock | None = None,
        rng: random.Random | None = None,
        identity: IdentityProvider | None = None,
        reminders: ReminderScheduler | None = None,
        initial_count: int = 12,
        target_count: int = 12,
        spacing_minutes: int = 5,
        points_per_correct: int = 10,
        tournaments: Iterable[Tournament] = DEFAULT_TOURNAMENTS,
    ) -> None:
        self.store = store
        self.clock = clock or SystemClock()
        self.rng = rng or random.Random()
        self.signals = EngineSignals()
        self.target_count = target_count
        self.spacing_minutes = spacing_minutes

        self.auth = LocalAuth(store, self.signals)
        self.identity = identity or self.auth
        self.ledger = PointsLedger(store, self.signals)
        self.schedule = EventScheduleManager(
            store,
            self.clock,
            reminders=reminders or LoggingReminderScheduler(self.clock),
            initial_count=initial_count,
            spacing_minutes=spacing_minutes,
        )
        self.predictions = PredictionStore(store, self.clock, self.schedule, self.signals)
        self.resolver = ResolutionEngine(
            self.clock,
            self.schedule,
            self.predictions,
            self.ledger,
            self.identity,
            self.signals,
            self.rng,
            points_per_correct=points_per_correct,
        )
        self.tournaments = TournamentEngine(store, self.clock, self.ledger, self.rng, tournaments)

    @classmethod
    def from_settings(
        cls,
        store: KeyValueStore,
        settings: Settings,
        *,
        clock: Clock | None = None,
        rng: random.Random | None = None,
    ) -> GameEngine:
        clock = clock or SystemClock()
        return cls(
            store,
            clock=clock,
            rng=rng,
            reminders=LoggingReminderScheduler(clock, lead_sec=settings.reminder_lead_sec),
            initial_count=settings.initial_event_count,
            target_count=settings.target_event_count,
            spacing_minutes=settings.spacing_minutes,
            points_per_correct=settings.correct_prediction_points,
            tournaments=parse_tournament_pool(settings.tournament_pool),
        )

    def current_user_id(self) -> str:
        return self.identity.current_user_id()

    # --- user intents ---

    def events(self) -> list[Event]:
        return self.schedule.fetch_active_events()

    def predict(self, event_id: str, outcome: PredictionOutcome) -> Prediction:
        return self.predictions.submit(event_id, self.current_user_id(), outcome)

    def join_tournament(self, tournament_id: str) -> bool:
        return self.tournaments.join(tournament_id, self.current_user_id())

    def user_stats(self) -> UserStats:
        return compute_user_stats(self.predictions.all(), self.current_user_id(), self.clock.now())

    # --- periodic maintenance ---

    def tick(self) -> TickReport:
        """Resolution, schedule upkeep and tournament settlement, in that order.

        Never regenerates the pool; maintain_rolling_schedule tops up an empty one.
        """
        resolution = self.resolver.resolve()
        events = self.schedule.maintain_rolling_schedule(self.target_count, self.spacing_minutes)
        settled = self.tournaments.tick()
        if resolution.changed or settled:
            log.debug(
                "tick",
                resolved=len(resolution.resolved_event_ids),
                points=resolution.points_awarded,
                tournaments_settled=len(settled),
            )
        return TickReport(resolution=resolution, event_count=len(events), settled_tournaments=settled)
