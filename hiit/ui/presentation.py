"""Display helpers shared by the web UI and the terminal engine."""

from __future__ import annotations

from dataclasses import dataclass

from hiit.workout.model import Phase, WorkoutConfig, WorkoutState
from hiit.workout.streak import StreakRecord


PHASE_COLORS: dict[str, str] = {
    "prepare": "#fef9c3",
    "exercise": "#dcfce7",
    "rest": "#dbeafe",
    "round_rest": "#f3e8ff",
}
PHASE_BAR_COLORS: dict[str, str] = {
    "prepare": "yellow-8",
    "exercise": "green",
    "rest": "blue",
    "round_rest": "purple",
}
IDLE_COLOR = "#f3f4f6"


@dataclass(frozen=True)
class UpcomingExercise:
    position: int
    name: str
    current: bool


def format_time(seconds: int) -> str:
    return f"0{seconds}" if 0 <= seconds < 10 else str(seconds)


def phase_title(state: WorkoutState, config: WorkoutConfig) -> str:
    if state.phase == "round_rest":
        return "Rest Between Rounds"
    if state.phase == "completed":
        return "Workout Complete!"
    return config.exercises[state.exercise_index]


def phase_hint(phase: Phase) -> str:
    return {
        "prepare": "Get Ready!",
        "exercise": "Work!",
        "rest": "Rest",
        "round_rest": "Round Rest",
    }.get(phase, "")


def phase_status(state: WorkoutState) -> str:
    seconds = state.time_left
    if state.phase == "prepare":
        return f"Starting in {seconds}s"
    if state.phase == "exercise":
        return f"{seconds}s remaining"
    if state.phase == "rest":
        return f"Next in {seconds}s"
    if state.phase == "round_rest":
        return f"Next round in {seconds}s"
    return ""


def phase_color(phase: Phase) -> str:
    return PHASE_COLORS.get(phase, IDLE_COLOR)


def progress_fraction(state: WorkoutState, config: WorkoutConfig) -> float:
    duration = config.phase_duration(state.phase)
    if duration <= 0:
        return 0.0
    return max(0.0, min(1.0, state.time_left / duration))


def upcoming_exercises(
    state: WorkoutState,
    config: WorkoutConfig,
    count: int = 3,
) -> list[UpcomingExercise]:
    start = state.exercise_index
    return [
        UpcomingExercise(position=index + 1, name=name, current=index == start)
        for index, name in enumerate(config.exercises)
        if start <= index < start + count
    ]


def streak_message(record: StreakRecord) -> tuple[str, str]:
    if record.current_streak > 0:
        return (
            "Keep it up!",
            f"You're on a {record.current_streak} day streak. Don't break the chain!",
        )
    if record.total_workouts > 0:
        return ("Start a new streak!", "Complete a workout today to begin a new streak.")
    return ("Welcome!", "Complete your first workout to start your streak.")


def format_last_workout(record: StreakRecord) -> str:
    if record.last_workout_date is None:
        return "Never"
    day = record.last_workout_date
    return f"{day.strftime('%b')} {day.day}, {day.year}"
