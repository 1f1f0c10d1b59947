"""Change notifications scoped to one engine instance."""

from __future__ import annotations

from typing import Callable

import structlog

log = structlog.get_logger(__name__)

Receiver = Callable[[], None]


class Signal:
    """Synchronous callback list. Emitting carries no payload."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._receivers: list[Receiver] = []

    def connect(self, receiver: Receiver) -> Receiver:
        if receiver not in self._receivers:
            self._receivers.append(receiver)
        return receiver

    def disconnect(self, receiver: Receiver) -> None:
        if receiver in self._receivers:
            self._receivers.remove(receiver)

    def emit(self) -> None:
        for receiver in list(self._receivers):
            try:
                receiver()
            except Exception as e:
                log.warning("signal_receiver_failed", signal=self.name, error=str(e))

    def __len__(self) -> int:
        return len(self._receivers)


class EngineSignals:
    """The two named signals the presentation layer re-renders on."""

    def __init__(self) -> None:
        self.predictions_changed = Signal("predictions_changed")
        self.events_resolved = Signal("events_resolved")
