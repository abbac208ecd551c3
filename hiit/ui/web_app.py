"""NiceGUI web UI for the HIIT timer."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import time

from nicegui import ui

from hiit.core.storage import JsonFileStore
from hiit.ui.controller import UIController
from hiit.ui.presentation import (
    PHASE_BAR_COLORS,
    format_last_workout,
    format_time,
    phase_color,
    phase_hint,
    phase_status,
    phase_title,
    progress_fraction,
    streak_message,
    upcoming_exercises,
)
from hiit.workout.model import CueEvent, WorkoutState
from hiit.workout.settings import (
    EXERCISE_RANGE,
    PREPARE_RANGE,
    REST_RANGE,
    ROUND_REST_RANGE,
)
from hiit.workout.streak import StreakRecord

FLASH_SEC = 0.5
REFRESH_SEC = 0.1
REMINDER_CHECK_SEC = 60.0

BEEP_JS = """
(() => {
  const ctx = new (window.AudioContext || window.webkitAudioContext)();
  const osc = ctx.createOscillator();
  const gain = ctx.createGain();
  osc.type = 'sine';
  osc.frequency.value = %d;
  gain.gain.value = 0.05;
  osc.connect(gain);
  gain.connect(ctx.destination);
  osc.start();
  setTimeout(() => { osc.stop(); ctx.close(); }, %d);
})();
"""


@dataclass
class WebState:
    status: str = "Ready"
    progress: WorkoutState | None = None
    completed: bool = False
    flash_until: float = 0.0
    last_record: StreakRecord | None = None
    upcoming_index: int | None = None
    pending_cues: list[CueEvent] = field(default_factory=list)


def run_web_ui(
    *,
    store_path: Path | None = None,
    host: str = "127.0.0.1",
    port: int = 8090,
) -> int:
    controller = UIController(JsonFileStore(store_path))
    state = WebState()

    with ui.column().classes("w-full max-w-md mx-auto gap-4") as page:
        with ui.row().classes("w-full items-center justify-between"):
            ui.label("HIIT Workout Timer").classes("text-2xl font-bold")
            settings_btn = ui.button(icon="settings").props("flat round")

        with ui.card().classes("w-full") as setup_view:
            with ui.row().classes("w-full items-center justify-between"):
                ui.label("Rounds:").classes("text-lg")
                with ui.row().classes("items-center gap-1"):
                    rounds_minus = ui.button("-").props("dense")
                    rounds_label = ui.label(str(controller.rounds)).classes("px-4")
                    rounds_plus = ui.button("+").props("dense")
            start_btn = ui.button("Start Workout").classes("w-full").props("color=positive")

        with ui.card().classes("w-full text-center") as workout_view:
            round_label = ui.label("").classes("text-sm text-gray-500")
            title_label = ui.label("").classes("text-xl font-bold")
            hint_label = ui.label("").classes("text-sm text-gray-500")
            time_label = ui.label("00").classes("text-6xl font-bold px-4 rounded-lg")
            progress_bar = ui.linear_progress(value=1.0, show_value=False).classes("w-full")
            with ui.row().classes("w-full justify-between text-sm text-gray-500"):
                exercise_label = ui.label("")
                status_label = ui.label("")
            end_btn = ui.button("End Workout").props("color=negative")

        with ui.card().classes("w-full") as upcoming_view:
            ui.label("Coming Up:").classes("font-bold")
            upcoming_list = ui.column().classes("w-full gap-1")

        with ui.card().classes("w-full text-center") as completed_view:
            ui.label("Workout Complete!").classes("text-2xl font-bold")
            completed_text = ui.label("")
            with ui.row().classes("w-full justify-center gap-2"):
                restart_btn = ui.button("Restart").props("color=primary")
                reset_btn = ui.button("Reset").props("color=grey")

        with ui.card().classes("w-full"):
            ui.label("Your Workout Streak").classes("text-xl font-bold text-center w-full")
            with ui.row().classes("w-full justify-between"):
                with ui.column().classes("items-center"):
                    current_streak_label = ui.label("0").classes("text-3xl font-bold text-green-500")
                    ui.label("Current Streak").classes("text-sm text-gray-500")
                with ui.column().classes("items-center"):
                    best_streak_label = ui.label("0").classes("text-3xl font-bold text-blue-500")
                    ui.label("Best Streak").classes("text-sm text-gray-500")
                with ui.column().classes("items-center"):
                    total_label = ui.label("0").classes("text-3xl font-bold text-purple-500")
                    ui.label("Total Workouts").classes("text-sm text-gray-500")
            last_workout_label = ui.label("Last workout: Never").classes("text-sm text-gray-600")
            streak_title = ui.label("").classes("font-semibold")
            streak_body = ui.label("").classes("text-sm")

    with ui.dialog() as settings_dialog, ui.card().classes("w-96"):
        ui.label("Settings").classes("text-xl font-bold")
        prepare_value = ui.label("")
        prepare_slider = ui.slider(
            min=PREPARE_RANGE.min_value,
            max=PREPARE_RANGE.max_value,
            step=PREPARE_RANGE.step,
            value=controller.settings.prepare_time,
        )
        exercise_value = ui.label("")
        exercise_slider = ui.slider(
            min=EXERCISE_RANGE.min_value,
            max=EXERCISE_RANGE.max_value,
            step=EXERCISE_RANGE.step,
            value=controller.settings.exercise_time,
        )
        rest_value = ui.label("")
        rest_slider = ui.slider(
            min=REST_RANGE.min_value,
            max=REST_RANGE.max_value,
            step=REST_RANGE.step,
            value=controller.settings.rest_time,
        )
        round_rest_value = ui.label("")
        round_rest_slider = ui.slider(
            min=ROUND_REST_RANGE.min_value,
            max=ROUND_REST_RANGE.max_value,
            step=ROUND_REST_RANGE.step,
            value=controller.settings.round_rest_time,
        )
        reminders_switch = ui.switch("Workout reminders", value=controller.reminders.enabled)
        ui.label(
            "Reminders fire at 9am, 12pm, 3pm, 6pm and 9pm until you complete "
            "your daily workout."
        ).classes("text-xs text-gray-500")
        close_settings_btn = ui.button("Close").classes("w-full")

    def refresh_settings_labels() -> None:
        s = controller.settings
        prepare_value.text = f"Preparation Time: {s.prepare_time} seconds"
        exercise_value.text = f"Exercise Time: {s.exercise_time} seconds"
        rest_value.text = f"Rest Between Exercises: {s.rest_time} seconds"
        round_rest_value.text = f"Rest Between Rounds: {s.round_rest_time} seconds"

    def refresh_streak() -> None:
        record = controller.streak()
        current_streak_label.text = str(record.current_streak)
        best_streak_label.text = str(record.best_streak)
        total_label.text = str(record.total_workouts)
        last_workout_label.text = f"Last workout: {format_last_workout(record)}"
        title, body = streak_message(record)
        streak_title.text = title
        streak_body.text = body

    def refresh_upcoming() -> None:
        upcoming_list.clear()
        config = controller.config
        if state.progress is None or config is None:
            state.upcoming_index = None
            return
        state.upcoming_index = state.progress.exercise_index
        with upcoming_list:
            for item in upcoming_exercises(state.progress, config):
                classes = "font-bold bg-green-100 p-2 rounded" if item.current else "text-gray-500 p-2"
                ui.label(f"{item.position}. {item.name}").classes(f"w-full {classes}")

    def play_pending_cues() -> None:
        cues = list(state.pending_cues)
        state.pending_cues.clear()
        for event in cues:
            if event.type == "countdown_beep":
                state.flash_until = time.monotonic() + FLASH_SEC
                ui.run_javascript(BEEP_JS % (880, 150))
            elif event.type == "final_beep":
                ui.run_javascript(BEEP_JS % (520, 400))

    def refresh_ui() -> None:
        play_pending_cues()
        running = state.progress is not None and not state.completed
        setup_view.set_visibility(not running and not state.completed)
        workout_view.set_visibility(running)
        upcoming_view.set_visibility(running)
        completed_view.set_visibility(state.completed)
        rounds_label.text = str(controller.rounds)
        completed_text.text = f"Great job! You've completed all {controller.rounds} rounds."

        progress = state.progress
        config = controller.config
        if progress is None or config is None or not running:
            page.style(f"background-color: {phase_color('idle')};")
            return

        if state.upcoming_index != progress.exercise_index:
            refresh_upcoming()
        page.style(f"background-color: {phase_color(progress.phase)};")
        round_label.text = f"Round {progress.current_round} of {config.total_rounds}"
        title_label.text = phase_title(progress, config)
        hint_label.text = phase_hint(progress.phase)
        time_label.text = format_time(progress.time_left)
        if progress.phase == "exercise" and time.monotonic() < state.flash_until:
            time_label.style("background-color: #ef4444; color: #ffffff;")
        else:
            time_label.style("background-color: transparent; color: inherit;")
        progress_bar.value = progress_fraction(progress, config)
        progress_bar.props(f"color={PHASE_BAR_COLORS.get(progress.phase, 'grey')}")
        exercise_label.text = f"Exercise {progress.exercise_index + 1} of {len(config.exercises)}"
        status_label.text = phase_status(progress)

    def on_progress(progress: WorkoutState) -> None:
        state.progress = progress

    def on_cue(event: CueEvent) -> None:
        state.pending_cues.append(event)

    def on_finish(record: StreakRecord) -> None:
        state.completed = True
        state.last_record = record
        state.status = "Workout completed"
        refresh_streak()

    def on_start() -> None:
        state.completed = False
        state.progress = None
        state.pending_cues.clear()
        controller.start_workout(on_progress=on_progress, on_cue=on_cue, on_finish=on_finish)
        state.status = "Workout started"
        refresh_ui()

    def on_reset() -> None:
        controller.reset_workout()
        state.progress = None
        state.completed = False
        state.flash_until = 0.0
        state.pending_cues.clear()
        state.status = "Ready"
        refresh_upcoming()
        refresh_streak()
        refresh_ui()

    def on_rounds(delta: int) -> None:
        controller.set_rounds(controller.rounds + delta)
        refresh_ui()

    def on_settings_change() -> None:
        controller.update_settings(
            prepare_time=int(prepare_slider.value),
            exercise_time=int(exercise_slider.value),
            rest_time=int(rest_slider.value),
            round_rest_time=int(round_rest_slider.value),
        )
        refresh_settings_labels()

    def on_reminders_toggle() -> None:
        enabled = controller.set_reminders(bool(reminders_switch.value))
        ui.notify(
            "Workout reminders enabled" if enabled else "Workout reminders disabled",
            color="positive" if enabled else "grey",
        )

    def check_reminders() -> None:
        reminder = controller.due_reminder()
        if reminder is not None:
            ui.notify(f"{reminder.title} {reminder.body}", color="warning", timeout=0)

    rounds_minus.on_click(lambda: on_rounds(-1))
    rounds_plus.on_click(lambda: on_rounds(1))
    start_btn.on_click(on_start)
    restart_btn.on_click(on_start)
    end_btn.on_click(on_reset)
    reset_btn.on_click(on_reset)
    settings_btn.on_click(settings_dialog.open)
    close_settings_btn.on_click(settings_dialog.close)
    for slider in (prepare_slider, exercise_slider, rest_slider, round_rest_slider):
        slider.on_value_change(lambda _: on_settings_change())
    reminders_switch.on_value_change(lambda _: on_reminders_toggle())

    refresh_settings_labels()
    refresh_streak()
    refresh_ui()
    ui.timer(REFRESH_SEC, refresh_ui)
    ui.timer(REMINDER_CHECK_SEC, check_reminders)
    ui.run(host=host, port=port, reload=False, title="HIIT Workout Timer")
    return 0
