"""Consecutive-day workout streak ledger.

The whole ledger is derived from one persisted record. Day gaps compare
calendar dates (midnight to midnight), never elapsed hours, so the time of
day a workout ends does not matter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime

from hiit.core.storage import (
    KeyValueStore,
    PersistenceReadError,
    PersistenceWriteError,
    read_json_object,
    write_json_object,
)


logger = logging.getLogger(__name__)

STREAK_STORAGE_KEY = "hiit-workout-streak"


@dataclass(frozen=True)
class StreakRecord:
    current_streak: int = 0
    best_streak: int = 0
    total_workouts: int = 0
    last_workout_date: date | None = None

    def to_payload(self) -> dict[str, object]:
        return {
            "currentStreak": self.current_streak,
            "lastWorkoutDate": (
                self.last_workout_date.isoformat() if self.last_workout_date else None
            ),
            "bestStreak": self.best_streak,
            "totalWorkouts": self.total_workouts,
        }

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> StreakRecord:
        current = _parse_count(payload, "currentStreak")
        best = _parse_count(payload, "bestStreak")
        total = _parse_count(payload, "totalWorkouts")

        raw_date = payload.get("lastWorkoutDate")
        last: date | None
        if raw_date is None:
            last = None
        elif isinstance(raw_date, str):
            try:
                last = date.fromisoformat(raw_date)
            except ValueError as exc:
                raise PersistenceReadError(f"lastWorkoutDate: {exc}") from exc
        else:
            raise PersistenceReadError("lastWorkoutDate must be a string or null")

        return cls(
            current_streak=current,
            best_streak=max(best, current),
            total_workouts=total,
            last_workout_date=last,
        )


def _parse_count(payload: dict[str, object], field_name: str) -> int:
    raw = payload.get(field_name, 0)
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise PersistenceReadError(f"{field_name} must be an integer")
    if raw < 0:
        raise PersistenceReadError(f"{field_name} must be >= 0")
    return raw


def calendar_date(moment: date | datetime) -> date:
    if isinstance(moment, datetime):
        return moment.date()
    return moment


def days_between(earlier: date | datetime, later: date | datetime) -> int:
    return (calendar_date(later) - calendar_date(earlier)).days


class StreakWriteError(PersistenceWriteError):
    """The streak was computed but could not be persisted."""

    def __init__(self, message: str, record: StreakRecord) -> None:
        super().__init__(message)
        self.record = record


class StreakLedger:
    def __init__(self, store: KeyValueStore, key: str = STREAK_STORAGE_KEY) -> None:
        self._store = store
        self._key = key

    def load(self) -> StreakRecord:
        try:
            payload = read_json_object(self._store, self._key)
        except PersistenceReadError as exc:
            logger.debug("Resetting corrupt streak record: %s", exc)
            return StreakRecord()
        if payload is None:
            return StreakRecord()
        try:
            return StreakRecord.from_payload(payload)
        except PersistenceReadError as exc:
            logger.debug("Resetting corrupt streak record: %s", exc)
            return StreakRecord()

    def record_workout(self, now: date | datetime) -> StreakRecord:
        today = calendar_date(now)
        prev = self.load()

        if prev.last_workout_date is None:
            new_streak = 1
        elif today == prev.last_workout_date:
            new_streak = prev.current_streak
        else:
            gap = days_between(prev.last_workout_date, today)
            if gap == 1:
                new_streak = prev.current_streak + 1
            elif gap > 1:
                new_streak = 1
            else:
                # Clock moved backwards; keep the streak as if it were the same day.
                new_streak = prev.current_streak

        record = replace(
            prev,
            current_streak=new_streak,
            best_streak=max(new_streak, prev.best_streak),
            total_workouts=prev.total_workouts + 1,
            last_workout_date=today,
        )
        try:
            write_json_object(self._store, self._key, record.to_payload())
        except PersistenceWriteError as exc:
            raise StreakWriteError(str(exc), record) from exc
        return record

    def check_streak_risk(self, now: date | datetime) -> bool:
        last = self.load().last_workout_date
        if last is None:
            return False
        return days_between(last, now) == 1
