"""Workout session execution: clock, state machine and streak ledger."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

from hiit.core.clock import ClockDriver
from hiit.core.storage import PersistenceWriteError
from hiit.workout.machine import WorkoutStateMachine
from hiit.workout.model import CueEvent, WorkoutConfig, WorkoutState
from hiit.workout.reminders import ReminderScheduler
from hiit.workout.streak import StreakLedger, StreakRecord, StreakWriteError


logger = logging.getLogger(__name__)

ProgressCallback = Callable[[WorkoutState], None]
CueCallback = Callable[[CueEvent], None]
FinishCallback = Callable[[StreakRecord], None]


class WorkoutSession:
    def __init__(
        self,
        ledger: StreakLedger,
        reminders: ReminderScheduler | None = None,
        clock: ClockDriver | None = None,
        now: Callable[[], datetime] = datetime.now,
        interval_ms: int = 1000,
    ) -> None:
        self._ledger = ledger
        self._reminders = reminders
        self._clock = clock or ClockDriver()
        self._now = now
        self._interval_ms = interval_ms
        self._machine = WorkoutStateMachine()
        self._on_progress: ProgressCallback | None = None
        self._on_cue: CueCallback | None = None
        self._on_finish: FinishCallback | None = None

    @property
    def is_running(self) -> bool:
        return self._clock.is_running

    @property
    def state(self) -> WorkoutState:
        return self._machine.state

    @property
    def config(self) -> WorkoutConfig | None:
        return self._machine.config

    def start(
        self,
        config: WorkoutConfig,
        on_progress: ProgressCallback | None = None,
        on_cue: CueCallback | None = None,
        on_finish: FinishCallback | None = None,
    ) -> WorkoutState:
        # Reject a bad config before touching the session already running.
        config.validate()
        self._clock.stop()
        state = self._machine.start(config)
        self._on_progress = on_progress
        self._on_cue = on_cue
        self._on_finish = on_finish
        self._clock.start(self.tick, interval_ms=self._interval_ms)
        self._notify(on_progress, state)
        return state

    def reset(self) -> WorkoutState:
        self._clock.stop()
        self._on_progress = None
        self._on_cue = None
        self._on_finish = None
        return self._machine.reset()

    def tick(self) -> None:
        if self._machine.state.phase in ("idle", "completed"):
            self._clock.stop()
            return

        events = self._machine.tick()
        state = self._machine.state
        completed = state.phase == "completed"
        if completed:
            self._clock.stop()

        for event in events:
            self._notify(self._on_cue, event)
        self._notify(self._on_progress, state)
        if completed:
            self._complete()

    def _complete(self) -> None:
        now = self._now()
        try:
            record = self._ledger.record_workout(now)
        except StreakWriteError as exc:
            logger.warning("Workout completed but streak was not saved: %s", exc)
            record = exc.record

        if self._reminders is not None:
            try:
                self._reminders.on_workout_completed(now)
            except PersistenceWriteError as exc:
                logger.warning("Unable to silence today's reminders: %s", exc)

        self._notify(self._on_finish, record)

    def _notify(self, callback: Callable[[Any], None] | None, payload: object) -> None:
        if callback is None:
            return
        try:
            callback(payload)
        except Exception:
            logger.exception("Session callback failed for %r", payload)
