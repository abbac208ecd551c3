"""Daily workout reminders, silenced once a workout is completed."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime

from hiit.core.storage import KeyValueStore


logger = logging.getLogger(__name__)

REMINDERS_ENABLED_KEY = "workoutRemindersEnabled"
LAST_COMPLETED_KEY = "lastWorkoutCompleted"
DEFAULT_REMINDER_HOURS: tuple[int, ...] = (9, 12, 15, 18, 21)


@dataclass(frozen=True)
class Reminder:
    title: str
    body: str
    slot_hour: int


class ReminderScheduler:
    def __init__(
        self,
        store: KeyValueStore,
        slots: tuple[int, ...] = DEFAULT_REMINDER_HOURS,
    ) -> None:
        self._store = store
        self._slots = tuple(sorted(slots))
        self._fired: set[tuple[date, int]] = set()

    @property
    def enabled(self) -> bool:
        return self._store.get(REMINDERS_ENABLED_KEY) == "true"

    def enable(self) -> None:
        self._store.set(REMINDERS_ENABLED_KEY, "true")

    def disable(self) -> None:
        self._store.set(REMINDERS_ENABLED_KEY, "false")

    def on_workout_completed(self, today: date | datetime) -> None:
        day = today.date() if isinstance(today, datetime) else today
        self._store.set(LAST_COMPLETED_KEY, day.isoformat())
        logger.debug("Reminders suppressed for %s", day)

    def completed_on(self, today: date | datetime) -> bool:
        day = today.date() if isinstance(today, datetime) else today
        return self._store.get(LAST_COMPLETED_KEY) == day.isoformat()

    def due_reminder(self, now: datetime) -> Reminder | None:
        if not self.enabled or self.completed_on(now):
            return None

        passed = [hour for hour in self._slots if hour <= now.hour]
        if not passed:
            return None
        slot = passed[-1]
        today = now.date()
        self._fired = {fired for fired in self._fired if fired[0] >= today}
        key = (today, slot)
        if key in self._fired:
            return None
        self._fired.add(key)
        return Reminder(
            title="Keep Your Streak Going!",
            body="It's time for your daily workout. Don't break your streak!",
            slot_hour=slot,
        )
