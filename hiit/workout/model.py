"""Workout domain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


Phase = Literal["idle", "prepare", "exercise", "rest", "round_rest", "completed"]
CueType = Literal["countdown_beep", "final_beep", "workout_completed"]

DEFAULT_EXERCISES: tuple[str, ...] = (
    "Goblet Squats",
    "Push-ups/Chest Press",
    "Romanian Deadlifts",
    "Dumbbell Rows",
    "Lunges",
    "Shoulder Press",
)
DEFAULT_ROUNDS = 3


class ConfigurationError(ValueError):
    """Raised when a workout configuration cannot be started."""


@dataclass(frozen=True)
class WorkoutConfig:
    prepare_sec: int = 5
    exercise_sec: int = 20
    rest_sec: int = 0
    round_rest_sec: int = 75
    total_rounds: int = DEFAULT_ROUNDS
    exercises: tuple[str, ...] = DEFAULT_EXERCISES

    @property
    def last_exercise_index(self) -> int:
        return len(self.exercises) - 1

    @property
    def total_ticks(self) -> int:
        """Ticks needed from ``start`` until the session reaches ``completed``.

        Every phase takes its duration plus one boundary tick.
        """
        count = len(self.exercises)
        per_exercise = (self.prepare_sec + 1) + (self.exercise_sec + 1)
        rests = (count - 1) * (self.rest_sec + 1 if self.rest_sec > 0 else 0)
        per_round = count * per_exercise + rests
        return self.total_rounds * per_round + (self.total_rounds - 1) * (
            self.round_rest_sec + 1
        )

    def phase_duration(self, phase: Phase) -> int:
        if phase == "prepare":
            return self.prepare_sec
        if phase == "exercise":
            return self.exercise_sec
        if phase == "rest":
            return self.rest_sec
        if phase == "round_rest":
            return self.round_rest_sec
        return 0

    def validate(self) -> None:
        for field_name in ("prepare_sec", "exercise_sec", "rest_sec", "round_rest_sec"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{field_name} must be an integer")
            if value < 0:
                raise ConfigurationError(f"{field_name} must be >= 0")

        if isinstance(self.total_rounds, bool) or not isinstance(self.total_rounds, int):
            raise ConfigurationError("total_rounds must be an integer")
        if self.total_rounds < 1:
            raise ConfigurationError("total_rounds must be >= 1")

        if not self.exercises:
            raise ConfigurationError("Workout must include at least one exercise")
        for i, name in enumerate(self.exercises):
            if not isinstance(name, str) or not name.strip():
                raise ConfigurationError(f"Exercise {i + 1}: name must be a non-empty string")


@dataclass(frozen=True)
class WorkoutState:
    phase: Phase = "idle"
    time_left: int = 0
    exercise_index: int = 0
    current_round: int = 1
    completed: bool = False


@dataclass(frozen=True)
class CueEvent:
    type: CueType


COUNTDOWN_BEEP = CueEvent("countdown_beep")
FINAL_BEEP = CueEvent("final_beep")
WORKOUT_COMPLETED = CueEvent("workout_completed")
