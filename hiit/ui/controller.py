"""Controller used by the web UI."""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from hiit.core.storage import KeyValueStore
from hiit.workout.model import (
    DEFAULT_EXERCISES,
    DEFAULT_ROUNDS,
    CueEvent,
    WorkoutConfig,
    WorkoutState,
)
from hiit.workout.reminders import Reminder, ReminderScheduler
from hiit.workout.runner import WorkoutSession
from hiit.workout.settings import TimerSettings, load_settings, save_settings
from hiit.workout.streak import StreakLedger, StreakRecord


class UIController:
    def __init__(
        self,
        store: KeyValueStore,
        exercises: tuple[str, ...] = DEFAULT_EXERCISES,
        now: Callable[[], datetime] = datetime.now,
        interval_ms: int = 1000,
    ) -> None:
        self._store = store
        self._now = now
        self.exercises = exercises
        self.rounds = DEFAULT_ROUNDS
        self.settings = load_settings(store)
        self.ledger = StreakLedger(store)
        self.reminders = ReminderScheduler(store)
        self._session = WorkoutSession(
            self.ledger,
            reminders=self.reminders,
            now=now,
            interval_ms=interval_ms,
        )

    def update_settings(self, **changes: int) -> TimerSettings:
        values = {
            "prepare_time": self.settings.prepare_time,
            "exercise_time": self.settings.exercise_time,
            "rest_time": self.settings.rest_time,
            "round_rest_time": self.settings.round_rest_time,
        }
        values.update(changes)
        settings = TimerSettings(**values)
        save_settings(self._store, settings)
        self.settings = settings
        return settings

    def set_rounds(self, rounds: int) -> int:
        self.rounds = max(1, int(rounds))
        return self.rounds

    def start_workout(
        self,
        on_progress: Callable[[WorkoutState], None],
        on_cue: Callable[[CueEvent], None],
        on_finish: Callable[[StreakRecord], None],
    ) -> WorkoutState:
        config = self.settings.to_config(self.rounds, self.exercises)
        return self._session.start(
            config,
            on_progress=on_progress,
            on_cue=on_cue,
            on_finish=on_finish,
        )

    def reset_workout(self) -> WorkoutState:
        return self._session.reset()

    def streak(self) -> StreakRecord:
        return self.ledger.load()

    def streak_at_risk(self) -> bool:
        return self.ledger.check_streak_risk(self._now())

    def set_reminders(self, enabled: bool) -> bool:
        if enabled:
            self.reminders.enable()
        else:
            self.reminders.disable()
        return self.reminders.enabled

    def due_reminder(self) -> Reminder | None:
        return self.reminders.due_reminder(self._now())

    @property
    def workout_running(self) -> bool:
        return self._session.is_running

    @property
    def state(self) -> WorkoutState:
        return self._session.state

    @property
    def config(self) -> WorkoutConfig | None:
        return self._session.config
