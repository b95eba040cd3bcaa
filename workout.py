from dataclasses import dataclass

from csv_codec import FIELD_COUNT, parse_csv_line, to_csv_line


@dataclass
class Workout:
    """One workout journal entry."""

    date: str
    exercise: str
    weight: float
    reps: int
    sets: int
    note: str = ""
    completed: bool = False

    def __str__(self) -> str:
        return (
            f"Date: {self.date}, Exercise: {self.exercise}, Weight: {self.weight}, "
            f"Reps: {self.reps}, Sets: {self.sets}, Note: {self.note}, "
            f"Completed: {str(self.completed).lower()}"
        )

    def to_fields(self) -> list[str]:
        return [
            self.date,
            self.exercise,
            repr(float(self.weight)),
            str(int(self.reps)),
            str(int(self.sets)),
            self.note or "",
            "true" if self.completed else "false",
        ]

    def to_csv_line(self) -> str:
        return to_csv_line(self.to_fields())

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "exercise": self.exercise,
            "weight": self.weight,
            "reps": self.reps,
            "sets": self.sets,
            "note": self.note,
            "completed": self.completed,
        }

    @classmethod
    def from_csv_line(cls, line: str) -> "Workout":
        """Build a workout from a stored CSV line.

        Raises ``ValueError`` if the line is short or a number does not parse.
        """
        fields = parse_csv_line(line)
        if len(fields) < FIELD_COUNT:
            raise ValueError(f"Invalid workout CSV line: {line}")
        return cls(
            date=fields[0],
            exercise=fields[1],
            weight=float(fields[2]),
            reps=int(fields[3]),
            sets=int(fields[4]),
            note=fields[5],
            completed=fields[6].lower() == "true",
        )
