"""Persisted timer settings edited between sessions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields

from hiit.core.storage import (
    KeyValueStore,
    PersistenceReadError,
    read_json_object,
    write_json_object,
)
from hiit.workout.model import DEFAULT_EXERCISES, WorkoutConfig


logger = logging.getLogger(__name__)

SETTINGS_STORAGE_KEY = "hiit-timer-settings"


@dataclass(frozen=True)
class SliderRange:
    min_value: int
    max_value: int
    step: int


# Bounds offered by the settings dialog; the state machine accepts any value >= 0.
PREPARE_RANGE = SliderRange(3, 15, 1)
EXERCISE_RANGE = SliderRange(10, 60, 5)
REST_RANGE = SliderRange(0, 30, 5)
ROUND_REST_RANGE = SliderRange(30, 180, 15)

_WIRE_NAMES = {
    "prepare_time": "prepareTime",
    "exercise_time": "exerciseTime",
    "rest_time": "restTime",
    "round_rest_time": "roundRestTime",
}


@dataclass(frozen=True)
class TimerSettings:
    prepare_time: int = 5
    exercise_time: int = 20
    rest_time: int = 0
    round_rest_time: int = 75

    def to_payload(self) -> dict[str, object]:
        return {wire: getattr(self, name) for name, wire in _WIRE_NAMES.items()}

    def to_config(
        self,
        rounds: int,
        exercises: tuple[str, ...] = DEFAULT_EXERCISES,
    ) -> WorkoutConfig:
        return WorkoutConfig(
            prepare_sec=self.prepare_time,
            exercise_sec=self.exercise_time,
            rest_sec=self.rest_time,
            round_rest_sec=self.round_rest_time,
            total_rounds=rounds,
            exercises=exercises,
        )


def load_settings(store: KeyValueStore) -> TimerSettings:
    defaults = TimerSettings()
    try:
        payload = read_json_object(store, SETTINGS_STORAGE_KEY)
    except PersistenceReadError as exc:
        logger.debug("Using default timer settings: %s", exc)
        return defaults
    if payload is None:
        return defaults

    values: dict[str, int] = {}
    for field in fields(TimerSettings):
        raw = payload.get(_WIRE_NAMES[field.name])
        if isinstance(raw, int) and not isinstance(raw, bool) and raw >= 0:
            values[field.name] = raw
        else:
            if raw is not None:
                logger.debug("Ignoring invalid %s=%r", _WIRE_NAMES[field.name], raw)
            values[field.name] = getattr(defaults, field.name)
    return TimerSettings(**values)


def save_settings(store: KeyValueStore, settings: TimerSettings) -> None:
    for field in fields(TimerSettings):
        value = getattr(settings, field.name)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"{field.name} must be an integer >= 0")
    write_json_object(store, SETTINGS_STORAGE_KEY, settings.to_payload())
