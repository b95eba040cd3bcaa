"""Interactive terminal menu for the workout journal."""

import argparse
import logging
import math
import sys
from typing import Callable, Optional

from config import load_settings
from csv_codec import normalize_exercise_name
from storage import Err, FileStorage
from validator import parse_date
from workout import Workout
from workout_log import WorkoutLog

logger = logging.getLogger(__name__)

MENU = """
=== Workout Journal ===
1. Add workout
2. View workouts
3. Mark workout completed
4. Remove workout
5. Save and exit"""


class WorkoutApp:
    """Menu loop that loads the log on start and saves it on exit."""

    def __init__(
        self,
        storage: FileStorage,
        log: WorkoutLog | None = None,
        input_func: Callable[[str], str] | None = None,
    ) -> None:
        self.storage = storage
        self.log = log or WorkoutLog()
        self._input = input_func or input

    def _ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def _ask_number(self, prompt: str, cast: Callable[[str], float | int]):
        while True:
            raw = self._ask(prompt)
            try:
                if not raw.isascii():
                    raise ValueError(raw)
                value = cast(raw)
            except ValueError:
                print(f"Invalid number: {raw!r}. Please try again.")
                continue
            if not math.isfinite(value) or value < 0:
                print("Value must be a non-negative number. Please try again.")
                continue
            return value

    def _ask_index(self) -> Optional[int]:
        raw = self._ask("Enter workout index: ")
        try:
            return int(raw)
        except ValueError:
            print(f"Invalid index: {raw!r}.")
            return None

    def load(self) -> bool:
        outcome = self.storage.load_workouts_with_result()
        if isinstance(outcome, Err):
            print(f"Could not load workouts: {outcome.detail}")
            return False
        result = outcome.result
        self.log.replace_all(Workout.from_csv_line(line) for line in result.data)
        for error in result.errors:
            print(f"Warning: {error}")
        print(f"Loaded {result.success_count} workouts from {self.storage.current_file_path}")
        return True

    def save(self) -> bool:
        lines = [w.to_csv_line() for w in self.log.get_all_workouts()]
        outcome = self.storage.save_workouts_with_result(lines)
        if isinstance(outcome, Err):
            print(f"Could not save workouts: {outcome.detail}")
            return False
        result = outcome.result
        for error in result.errors:
            print(f"Warning: {error}")
        print(f"Saved {result.success_count} workouts to {self.storage.current_file_path}")
        return True

    def add_workout(self) -> None:
        print("=== Create a Workout ===")
        while True:
            date = self._ask("Enter date (YYYY-MM-DD, M/D/YY or M/D/YYYY): ")
            if parse_date(date) is not None:
                break
            print(f"Invalid date: {date!r}. Please try again.")
        while True:
            exercise = normalize_exercise_name(self._ask("Enter exercise name: "))
            if exercise:
                break
            print("Exercise name cannot be empty.")
        weight = self._ask_number("Enter weight used: ", float)
        reps = self._ask_number("Enter reps: ", int)
        sets = self._ask_number("Enter number of sets: ", int)
        note = self._ask("Any notes? (press Enter to skip): ")
        completed = self._ask("Mark as completed? (y/n): ").lower() == "y"
        workout = Workout(date, exercise, weight, reps, sets, note, completed)
        self.log.add_workout(workout)
        print("Workout created successfully!")
        print(workout)

    def run(self) -> int:
        if not self.load():
            return 1
        while True:
            print(MENU)
            choice = self._ask("Choose an option: ")
            if choice == "1":
                self.add_workout()
            elif choice == "2":
                self.log.list_all_workouts()
            elif choice == "3":
                index = self._ask_index()
                if index is not None:
                    self.log.mark_completed(index)
            elif choice == "4":
                index = self._ask_index()
                if index is not None and self.log.remove_workout(index) is not None:
                    print("Workout removed.")
            elif choice == "5":
                return 0 if self.save() else 1
            else:
                print(f"Unknown option: {choice!r}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Personal workout journal")
    parser.add_argument("--file", help="CSV file to use instead of the configured one")
    parser.add_argument("--settings", help="Path to settings YAML")
    args = parser.parse_args(argv)

    settings = load_settings(args.settings)
    logging.basicConfig(level=settings.log_level, stream=sys.stderr)
    storage = FileStorage.from_settings(settings, args.file)
    app = WorkoutApp(storage)
    try:
        return app.run()
    except (EOFError, KeyboardInterrupt):
        logger.info("Input closed, saving before exit")
        print()
        return 0 if app.save() else 1


if __name__ == "__main__":
    sys.exit(main())
