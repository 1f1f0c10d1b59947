"""Game error taxonomy.

Insufficient points is deliberately absent: a failed debit or tournament
join is reported as ``False``, never raised.
"""

from __future__ import annotations


class GameError(Exception):
    """Base for all PredPlay errors."""


class PredictionRejected(GameError):
    """A prediction could not be accepted; no state was changed."""

    def __init__(self, event_id: str, message: str) -> None:
        super().__init__(message)
        self.event_id = event_id


class LockedEvent(PredictionRejected):
    """Prediction submitted at or after the event's start time."""

    def __init__(self, event_id: str) -> None:
        super().__init__(event_id, f"Event {event_id} has started; predictions are locked")


class UnknownEvent(PredictionRejected):
    """Prediction references an event that is not in the active pool."""

    def __init__(self, event_id: str) -> None:
        super().__init__(event_id, f"Event not found: {event_id}")


class UnknownTournament(GameError):
    def __init__(self, tournament_id: str) -> None:
        super().__init__(f"Tournament not found: {tournament_id}")
        self.tournament_id = tournament_id


class PersistenceUnavailable(GameError):
    """Underlying storage read or write failed."""
