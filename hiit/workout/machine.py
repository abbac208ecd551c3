"""Workout phase state machine.

``tick`` is a pure reducer over ``(WorkoutState, WorkoutConfig)``; it returns
the next state together with the cue events produced by that tick. The
``WorkoutStateMachine`` wrapper keeps the current state for a session.
"""

from __future__ import annotations

from dataclasses import replace

from hiit.workout.model import (
    COUNTDOWN_BEEP,
    FINAL_BEEP,
    WORKOUT_COMPLETED,
    CueEvent,
    WorkoutConfig,
    WorkoutState,
)


COUNTDOWN_CUE_MIN_SEC = 2
COUNTDOWN_CUE_MAX_SEC = 5

TickResult = tuple[WorkoutState, tuple[CueEvent, ...]]


def idle_state() -> WorkoutState:
    return WorkoutState(phase="idle")


def start_state(config: WorkoutConfig) -> WorkoutState:
    config.validate()
    return WorkoutState(
        phase="prepare",
        time_left=config.prepare_sec,
        exercise_index=0,
        current_round=1,
        completed=False,
    )


def tick(state: WorkoutState, config: WorkoutConfig) -> TickResult:
    if state.phase in ("idle", "completed"):
        return state, ()

    if state.time_left > 0:
        time_left = state.time_left - 1
        events: tuple[CueEvent, ...] = ()
        # 0 and 1 are left out so the countdown never overlaps the final beep.
        if (
            state.phase == "exercise"
            and COUNTDOWN_CUE_MIN_SEC <= time_left <= COUNTDOWN_CUE_MAX_SEC
        ):
            events = (COUNTDOWN_BEEP,)
        return replace(state, time_left=time_left), events

    if state.phase == "prepare":
        return (
            replace(state, phase="exercise", time_left=config.exercise_sec),
            (COUNTDOWN_BEEP,),
        )
    if state.phase == "exercise":
        return _finish_exercise(state, config)
    if state.phase in ("rest", "round_rest"):
        return replace(state, phase="prepare", time_left=config.prepare_sec), ()
    return state, ()


def _finish_exercise(state: WorkoutState, config: WorkoutConfig) -> TickResult:
    if state.exercise_index >= config.last_exercise_index:
        if state.current_round < config.total_rounds:
            return (
                replace(
                    state,
                    phase="round_rest",
                    time_left=config.round_rest_sec,
                    current_round=state.current_round + 1,
                    exercise_index=0,
                ),
                (FINAL_BEEP,),
            )
        return (
            replace(state, phase="completed", time_left=0, completed=True),
            (FINAL_BEEP, WORKOUT_COMPLETED),
        )

    next_index = state.exercise_index + 1
    if config.rest_sec > 0:
        return (
            replace(state, phase="rest", time_left=config.rest_sec, exercise_index=next_index),
            (FINAL_BEEP,),
        )
    return (
        replace(
            state,
            phase="prepare",
            time_left=config.prepare_sec,
            exercise_index=next_index,
        ),
        (FINAL_BEEP,),
    )


class WorkoutStateMachine:
    def __init__(self) -> None:
        self._state = idle_state()
        self._config: WorkoutConfig | None = None

    @property
    def state(self) -> WorkoutState:
        return self._state

    @property
    def config(self) -> WorkoutConfig | None:
        return self._config

    def start(self, config: WorkoutConfig) -> WorkoutState:
        self._state = start_state(config)
        self._config = config
        return self._state

    def reset(self) -> WorkoutState:
        self._state = idle_state()
        return self._state

    def tick(self) -> tuple[CueEvent, ...]:
        if self._config is None:
            return ()
        self._state, events = tick(self._state, self._config)
        return events
