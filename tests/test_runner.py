from __future__ import annotations

import asyncio
from datetime import datetime

import pytest

from hiit.core.storage import MemoryStore, PersistenceWriteError
from hiit.workout.model import ConfigurationError, CueEvent, WorkoutConfig, WorkoutState
from hiit.workout.reminders import ReminderScheduler
from hiit.workout.runner import WorkoutSession
from hiit.workout.streak import StreakLedger, StreakRecord


SHORT = WorkoutConfig(
    prepare_sec=1,
    exercise_sec=2,
    rest_sec=0,
    round_rest_sec=1,
    total_rounds=2,
    exercises=("Squats", "Rows"),
)


class ReadOnlyStore(MemoryStore):
    def set(self, key: str, value: str) -> None:
        raise PersistenceWriteError("read-only")


def _fixed_now() -> datetime:
    return datetime(2024, 1, 2, 18, 30)


def test_session_runs_to_completion_and_records_streak() -> None:
    async def _run() -> None:
        store = MemoryStore()
        reminders = ReminderScheduler(store)
        session = WorkoutSession(
            StreakLedger(store),
            reminders=reminders,
            now=_fixed_now,
            interval_ms=5,
        )
        progresses: list[WorkoutState] = []
        cues: list[CueEvent] = []
        finishes: list[StreakRecord] = []

        session.start(
            SHORT,
            on_progress=progresses.append,
            on_cue=cues.append,
            on_finish=finishes.append,
        )
        assert session.is_running
        await asyncio.sleep(SHORT.total_ticks * 0.005 + 0.5)

        assert not session.is_running
        assert session.state.phase == "completed"
        assert len(finishes) == 1
        assert finishes[0].current_streak == 1
        assert finishes[0].total_workouts == 1
        assert [c.type for c in cues].count("workout_completed") == 1
        assert progresses[0].phase == "prepare"
        assert progresses[-1].phase == "completed"
        assert reminders.completed_on(_fixed_now())
        assert StreakLedger(store).load().total_workouts == 1

    asyncio.run(_run())


def test_reset_stops_ticks_and_cues() -> None:
    async def _run() -> None:
        store = MemoryStore()
        session = WorkoutSession(StreakLedger(store), now=_fixed_now, interval_ms=5)
        cues: list[CueEvent] = []
        progresses: list[WorkoutState] = []
        session.start(SHORT, on_progress=progresses.append, on_cue=cues.append)
        await asyncio.sleep(0.03)

        session.reset()
        assert session.state.phase == "idle"
        assert not session.is_running
        seen_cues = len(cues)
        seen_progress = len(progresses)

        await asyncio.sleep(0.1)
        assert len(cues) == seen_cues
        assert len(progresses) == seen_progress
        assert session.state.phase == "idle"
        assert StreakLedger(store).load().total_workouts == 0

    asyncio.run(_run())


def test_write_failure_still_completes() -> None:
    async def _run() -> None:
        session = WorkoutSession(
            StreakLedger(ReadOnlyStore()),
            reminders=ReminderScheduler(ReadOnlyStore()),
            now=_fixed_now,
            interval_ms=5,
        )
        finishes: list[StreakRecord] = []
        session.start(SHORT, on_finish=finishes.append)
        await asyncio.sleep(SHORT.total_ticks * 0.005 + 0.5)

        assert session.state.phase == "completed"
        assert len(finishes) == 1
        assert finishes[0].current_streak == 1

    asyncio.run(_run())


def test_restart_after_completion() -> None:
    async def _run() -> None:
        store = MemoryStore()
        session = WorkoutSession(StreakLedger(store), now=_fixed_now, interval_ms=5)
        finishes: list[StreakRecord] = []
        for _ in range(2):
            session.start(SHORT, on_finish=finishes.append)
            await asyncio.sleep(SHORT.total_ticks * 0.005 + 0.5)

        assert len(finishes) == 2
        # Same calendar day: streak unchanged, total incremented.
        assert finishes[1].current_streak == 1
        assert finishes[1].total_workouts == 2

    asyncio.run(_run())


def test_invalid_restart_leaves_running_session_alone() -> None:
    async def _run() -> None:
        session = WorkoutSession(StreakLedger(MemoryStore()), now=_fixed_now, interval_ms=5)
        progresses: list[WorkoutState] = []
        session.start(WorkoutConfig(prepare_sec=50), on_progress=progresses.append)
        await asyncio.sleep(0.03)

        with pytest.raises(ConfigurationError):
            session.start(WorkoutConfig(prepare_sec=-1))

        assert session.is_running
        assert session.state.phase == "prepare"
        before = session.state.time_left
        seen = len(progresses)
        await asyncio.sleep(0.05)
        assert session.state.time_left < before
        assert len(progresses) > seen
        session.reset()

    asyncio.run(_run())


def test_failing_cue_callback_does_not_stop_the_clock() -> None:
    async def _run() -> None:
        store = MemoryStore()
        session = WorkoutSession(StreakLedger(store), now=_fixed_now, interval_ms=5)
        finishes: list[StreakRecord] = []

        def broken_speaker(event: CueEvent) -> None:
            raise RuntimeError("audio device gone")

        session.start(SHORT, on_cue=broken_speaker, on_finish=finishes.append)
        await asyncio.sleep(SHORT.total_ticks * 0.005 + 0.5)

        assert session.state.phase == "completed"
        assert not session.is_running
        assert len(finishes) == 1
        assert StreakLedger(store).load().total_workouts == 1

    asyncio.run(_run())
