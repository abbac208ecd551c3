"""Async runtime engine for running a HIIT session in the terminal."""

from __future__ import annotations

import asyncio
import sys
from datetime import datetime
from typing import Callable, TextIO

from hiit.ui.presentation import format_time, phase_hint, phase_title, streak_message
from hiit.workout.model import CueEvent, WorkoutConfig, WorkoutState
from hiit.workout.reminders import ReminderScheduler
from hiit.workout.runner import WorkoutSession
from hiit.workout.streak import StreakLedger, StreakRecord


class HIITEngine:
    def __init__(
        self,
        ledger: StreakLedger,
        reminders: ReminderScheduler | None = None,
        bell: bool = True,
        out: TextIO | None = None,
        now: Callable[[], datetime] = datetime.now,
        interval_ms: int = 1000,
    ) -> None:
        self._session = WorkoutSession(
            ledger,
            reminders=reminders,
            now=now,
            interval_ms=interval_ms,
        )
        self._bell = bell
        self._out = out or sys.stdout
        self._config: WorkoutConfig | None = None
        self._done = asyncio.Event()
        self.record: StreakRecord | None = None

    async def run(self, config: WorkoutConfig) -> StreakRecord | None:
        self._config = config
        self._done = asyncio.Event()
        self.record = None
        total = config.total_ticks
        self._print(
            f"Starting {config.total_rounds} round(s) of {len(config.exercises)} exercises "
            f"(~{total // 60}m{total % 60:02d}s)"
        )
        self._session.start(
            config,
            on_progress=self._on_progress,
            on_cue=self._on_cue,
            on_finish=self._on_finish,
        )
        try:
            await self._done.wait()
        finally:
            if self._session.is_running:
                self.stop()
        return self.record

    def stop(self) -> None:
        self._session.reset()
        self._print("Workout ended")
        self._done.set()

    def _on_progress(self, state: WorkoutState) -> None:
        if self._config is None or state.phase in ("idle", "completed"):
            return
        self._print(
            f"Round {state.current_round}/{self._config.total_rounds} | "
            f"{phase_title(state, self._config)} | {phase_hint(state.phase)} | "
            f"{format_time(state.time_left)}"
        )

    def _on_cue(self, event: CueEvent) -> None:
        if event.type == "workout_completed":
            self._print("Workout Complete!")
            return
        if self._bell:
            self._out.write("\a")
            self._out.flush()

    def _on_finish(self, record: StreakRecord) -> None:
        self.record = record
        title, body = streak_message(record)
        self._print(
            f"Streak: {record.current_streak} | Best: {record.best_streak} | "
            f"Total: {record.total_workouts}"
        )
        self._print(f"{title} {body}")
        self._done.set()

    def _print(self, line: str) -> None:
        print(line, file=self._out)
