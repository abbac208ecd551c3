from __future__ import annotations

import asyncio
from datetime import datetime
from pathlib import Path

from hiit.core.storage import JsonFileStore
from hiit.ui.controller import UIController
from hiit.workout.model import CueEvent, WorkoutState
from hiit.workout.streak import StreakRecord


def test_ui_like_start_reset_and_complete(tmp_path: Path) -> None:
    async def _run() -> None:
        store = JsonFileStore(tmp_path / "store.json")
        controller = UIController(
            store,
            exercises=("Goblet Squats", "Lunges"),
            now=lambda: datetime(2024, 1, 1, 9, 30),
            interval_ms=5,
        )
        controller.update_settings(prepare_time=1, exercise_time=3, rest_time=1, round_rest_time=2)
        controller.set_rounds(2)
        assert controller.set_rounds(0) == 1
        controller.set_rounds(2)

        progresses: list[WorkoutState] = []
        cues: list[CueEvent] = []
        finishes: list[StreakRecord] = []

        controller.start_workout(progresses.append, cues.append, finishes.append)
        await asyncio.sleep(0.03)
        assert controller.workout_running

        controller.reset_workout()
        assert controller.state.phase == "idle"
        assert not controller.workout_running
        assert finishes == []

        controller.start_workout(progresses.append, cues.append, finishes.append)
        assert controller.config is not None
        await asyncio.sleep(controller.config.total_ticks * 0.005 + 0.5)

        assert finishes[-1].current_streak == 1
        assert controller.state.phase == "completed"
        assert any(p.phase == "rest" for p in progresses)
        assert any(p.phase == "round_rest" for p in progresses)
        assert any(c.type == "final_beep" for c in cues)

        # Settings and streak survive a new controller on the same store.
        reopened = UIController(JsonFileStore(tmp_path / "store.json"))
        assert reopened.settings.exercise_time == 3
        assert reopened.streak().total_workouts == 1
        assert reopened.reminders.completed_on(datetime(2024, 1, 1))

    asyncio.run(_run())


def test_reminders_toggle_and_risk(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "store.json")
    controller = UIController(store, now=lambda: datetime(2024, 1, 2, 12, 5))
    assert controller.set_reminders(True) is True
    controller.ledger.record_workout(datetime(2024, 1, 1, 19, 0))

    assert controller.streak_at_risk() is True
    reminder = controller.due_reminder()
    assert reminder is not None
    assert reminder.slot_hour == 12

    assert controller.set_reminders(False) is False
    assert controller.due_reminder() is None
