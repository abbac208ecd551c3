from __future__ import annotations

from datetime import date, datetime

from hiit.core.storage import MemoryStore
from hiit.workout.reminders import ReminderScheduler


def test_disabled_by_default() -> None:
    scheduler = ReminderScheduler(MemoryStore())
    assert scheduler.enabled is False
    assert scheduler.due_reminder(datetime(2024, 1, 1, 10, 0)) is None


def test_enable_disable_persisted() -> None:
    store = MemoryStore()
    ReminderScheduler(store).enable()
    assert store.data["workoutRemindersEnabled"] == "true"
    assert ReminderScheduler(store).enabled is True

    ReminderScheduler(store).disable()
    assert ReminderScheduler(store).enabled is False


def test_fires_once_per_slot() -> None:
    scheduler = ReminderScheduler(MemoryStore())
    scheduler.enable()

    assert scheduler.due_reminder(datetime(2024, 1, 1, 8, 30)) is None

    first = scheduler.due_reminder(datetime(2024, 1, 1, 9, 5))
    assert first is not None
    assert first.slot_hour == 9
    assert first.title == "Keep Your Streak Going!"
    assert scheduler.due_reminder(datetime(2024, 1, 1, 11, 59)) is None

    second = scheduler.due_reminder(datetime(2024, 1, 1, 12, 0))
    assert second is not None
    assert second.slot_hour == 12


def test_suppressed_after_workout_completed() -> None:
    scheduler = ReminderScheduler(MemoryStore())
    scheduler.enable()
    scheduler.on_workout_completed(datetime(2024, 1, 1, 7, 45))

    assert scheduler.completed_on(date(2024, 1, 1)) is True
    assert scheduler.due_reminder(datetime(2024, 1, 1, 15, 0)) is None

    # Next day reminders come back.
    reminder = scheduler.due_reminder(datetime(2024, 1, 2, 9, 0))
    assert reminder is not None


def test_fired_slots_from_earlier_days_are_dropped() -> None:
    scheduler = ReminderScheduler(MemoryStore())
    scheduler.enable()
    for day in range(1, 4):
        for hour in (9, 12, 15):
            assert scheduler.due_reminder(datetime(2024, 1, day, hour, 0)) is not None

    assert scheduler.due_reminder(datetime(2024, 1, 4, 9, 0)) is not None
    assert scheduler._fired == {(date(2024, 1, 4), 9)}
