import copy
from typing import Iterable, List, Optional

from workout import Workout


class WorkoutLog:
    """In-memory list of workouts addressed by position.

    Invalid indices print a message instead of raising.
    """

    def __init__(self, workouts: Iterable[Workout] | None = None) -> None:
        self._workouts: List[Workout] = list(workouts or [])

    def _valid_index(self, index: int) -> bool:
        return 0 <= index < len(self._workouts)

    def add_workout(self, workout: Workout) -> None:
        self._workouts.append(workout)

    def remove_workout(self, index: int) -> Optional[Workout]:
        if not self._valid_index(index):
            print("Invalid index. No workout removed.")
            return None
        return self._workouts.pop(index)

    def get_workout(self, index: int) -> Optional[Workout]:
        if not self._valid_index(index):
            print("Invalid index. Returning None.")
            return None
        return self._workouts[index]

    def list_all_workouts(self) -> None:
        if not self._workouts:
            print("No workouts in the log.")
            return
        for index, workout in enumerate(self._workouts):
            print(f"[{index}] {workout}")

    def mark_completed(self, index: int) -> bool:
        if not self._valid_index(index):
            print("Invalid index. Cannot mark completed.")
            return False
        self._workouts[index].completed = True
        print("Workout marked as completed.")
        return True

    def get_total_workouts(self) -> int:
        return len(self._workouts)

    def get_all_workouts(self) -> List[Workout]:
        """Return a copy of the stored workouts."""
        return [copy.copy(w) for w in self._workouts]

    def replace_all(self, workouts: Iterable[Workout]) -> None:
        self._workouts = list(workouts)
