"""Event lifecycle and points-economy engine."""

from predplay.engine.clock import Clock, ManualClock, SystemClock
from predplay.engine.game import GameEngine, TickReport
from predplay.engine.ledger import PointsLedger
from predplay.engine.predictions import PredictionStore
from predplay.engine.resolution import ResolutionEngine, ResolutionReport
from predplay.engine.schedule import EventScheduleManager
from predplay.engine.signals import EngineSignals, Signal
from predplay.engine.tournaments import TournamentEngine

__all__ = [
    "Clock",
    "ManualClock",
    "SystemClock",
    "GameEngine",
    "TickReport",
    "PointsLedger",
    "PredictionStore",
    "ResolutionEngine",
    "ResolutionReport",
    "EventScheduleManager",
    "EngineSignals",
    "Signal",
    "TournamentEngine",
]
