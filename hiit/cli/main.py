"""Terminal CLI entrypoint for the HIIT timer."""

from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import datetime
from pathlib import Path

from hiit.core.engine import HIITEngine
from hiit.core.storage import JsonFileStore, PersistenceWriteError
from hiit.ui.presentation import format_last_workout, streak_message
from hiit.workout.model import DEFAULT_ROUNDS, ConfigurationError
from hiit.workout.reminders import ReminderScheduler
from hiit.workout.settings import TimerSettings, load_settings, save_settings
from hiit.workout.streak import StreakLedger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="HIIT workout timer")
    parser.add_argument("--run", action="store_true", help="Run a workout in the terminal")
    parser.add_argument(
        "--ui-web",
        action="store_true",
        help="Launch web UI (NiceGUI)",
    )
    parser.add_argument(
        "--web-host",
        default="127.0.0.1",
        help="Host bind for --ui-web",
    )
    parser.add_argument(
        "--web-port",
        type=int,
        default=8090,
        help="Port for --ui-web",
    )
    parser.add_argument(
        "--rounds",
        type=int,
        default=DEFAULT_ROUNDS,
        help="Number of rounds through the exercise list",
    )
    parser.add_argument("--prepare", type=int, default=None, help="Prepare time in seconds")
    parser.add_argument("--exercise", type=int, default=None, help="Exercise time in seconds")
    parser.add_argument(
        "--rest",
        type=int,
        default=None,
        help="Rest between exercises in seconds (0 disables it)",
    )
    parser.add_argument(
        "--round-rest",
        type=int,
        default=None,
        help="Rest between rounds in seconds",
    )
    parser.add_argument(
        "--save-settings",
        action="store_true",
        help="Persist the given --prepare/--exercise/--rest/--round-rest values",
    )
    parser.add_argument("--streak", action="store_true", help="Show the workout streak")
    parser.add_argument(
        "--reminders",
        choices=("on", "off"),
        default=None,
        help="Enable or disable daily workout reminders",
    )
    parser.add_argument(
        "--no-bell",
        action="store_true",
        help="Do not ring the terminal bell on countdown cues",
    )
    parser.add_argument(
        "--store",
        type=Path,
        default=None,
        help="Path of the JSON store (default: ~/.hiit-timer/store.json)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def merge_settings(base: TimerSettings, args: argparse.Namespace) -> TimerSettings:
    return TimerSettings(
        prepare_time=base.prepare_time if args.prepare is None else args.prepare,
        exercise_time=base.exercise_time if args.exercise is None else args.exercise,
        rest_time=base.rest_time if args.rest is None else args.rest,
        round_rest_time=base.round_rest_time if args.round_rest is None else args.round_rest,
    )


def show_streak(ledger: StreakLedger) -> int:
    record = ledger.load()
    print(f"Current streak: {record.current_streak}")
    print(f"Best streak:    {record.best_streak}")
    print(f"Total workouts: {record.total_workouts}")
    print(f"Last workout:   {format_last_workout(record)}")
    title, body = streak_message(record)
    print(f"{title} {body}")
    if ledger.check_streak_risk(datetime.now()):
        print("Your streak is at risk: work out today to keep it going.")
    return 0


async def run_workout(
    store: JsonFileStore,
    settings: TimerSettings,
    rounds: int,
    bell: bool,
) -> int:
    config = settings.to_config(rounds)
    config.validate()
    engine = HIITEngine(
        StreakLedger(store),
        reminders=ReminderScheduler(store),
        bell=bell,
    )
    await engine.run(config)
    return 0


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    if args.ui_web:
        from hiit.ui.web_app import run_web_ui

        return run_web_ui(store_path=args.store, host=args.web_host, port=args.web_port)

    store = JsonFileStore(args.store)
    settings = merge_settings(load_settings(store), args)
    handled = False

    if args.save_settings:
        try:
            save_settings(store, settings)
        except (ValueError, PersistenceWriteError) as exc:
            print(f"Unable to save settings: {exc}")
            return 1
        print("Settings saved")
        handled = True

    if args.reminders is not None:
        reminders = ReminderScheduler(store)
        if args.reminders == "on":
            reminders.enable()
        else:
            reminders.disable()
        print(f"Reminders {'enabled' if reminders.enabled else 'disabled'}")
        handled = True

    if args.streak:
        show_streak(StreakLedger(store))
        handled = True

    if args.run:
        try:
            return asyncio.run(run_workout(store, settings, args.rounds, not args.no_bell))
        except ConfigurationError as exc:
            print(f"Invalid workout configuration: {exc}")
            return 2
        except KeyboardInterrupt:
            return 130

    if not handled:
        parser.print_help()
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
