"""Best-effort local reminders ahead of event start."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol

import structlog
from pydantic import BaseModel

from predplay.engine.clock import Clock
from predplay.models import Event

log = structlog.get_logger(__name__)


class ReminderScheduler(Protocol):
    def schedule_event_reminder(self, event: Event) -> None: ...


class Reminder(BaseModel):
    identifier: str
    title: str
    body: str
    fire_at: datetime


class NullReminderScheduler:
    def schedule_event_reminder(self, event: Event) -> None:
        return None


class LoggingReminderScheduler:
    """Records reminders and logs them; a stand-in for a device notification centre."""

    def __init__(self, clock: Clock, lead_sec: int = 120) -> None:
        self.clock = clock
        self.lead_sec = lead_sec
        self.pending: dict[str, Reminder] = {}

    def schedule_event_reminder(self, event: Event) -> None:
        now = self.clock.now()
        fire_at = max(now + timedelta(seconds=1), event.start_time - timedelta(seconds=self.lead_sec))
        reminder = Reminder(
            identifier=f"event_{event.event_id}",
            title="Starting soon",
            body=f"{event.home_team} vs {event.away_team} starts soon. Make your prediction!",
            fire_at=fire_at,
        )
        # Fired reminders are dropped; same identifier replaces the earlier request
        self.pending = {k: r for k, r in self.pending.items() if r.fire_at > now}
        self.pending[reminder.identifier] = reminder
        log.debug("reminder_scheduled", identifier=reminder.identifier, fire_at=fire_at.isoformat())
