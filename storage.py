"""CSV persistence for workouts with validation, atomic saves and backups."""

import datetime
import enum
import logging
import os
import shutil
import threading
from dataclasses import dataclass, field
from typing import Generic, List, Optional, Sequence, Tuple, TypeVar, Union

from csv_codec import CSV_HEADER, FIELD_COUNT, normalize_exercise_name, parse_csv_line, to_csv_line
from rwlock import ReadWriteLock
from settings_schema import StorageSettings
from validator import validate_entry, validate_fields
from workout import Workout

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "workouts.csv"
DATA_DIRECTORY = "data"
BACKUP_DIRECTORY = os.path.join("data", "backups")
MAX_BACKUPS = 5
BACKUP_MARKER = "_backup_"
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

T = TypeVar("T")


class ErrorKind(enum.Enum):
    PRECONDITION = "precondition"
    IO = "io"


class FileStorageError(Exception):
    """Raised when a storage operation fails as a whole."""

    def __init__(self, kind: ErrorKind, detail: str) -> None:
        super().__init__(detail)
        self.kind = kind
        self.detail = detail


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Counts and per-row errors of one save or load."""

    data: Optional[T]
    processed_count: int
    success_count: int
    skipped_count: int
    errors: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


@dataclass(frozen=True)
class Ok(Generic[T]):
    result: OperationResult[T]

    def unwrap(self) -> OperationResult[T]:
        return self.result


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    detail: str

    def unwrap(self):
        raise FileStorageError(self.kind, self.detail)


Outcome = Union[Ok[T], Err]


class FileStorage:
    """Stores workout rows in a CSV file guarded by a reader/writer lock."""

    def __init__(
        self,
        file_path: str | None = None,
        data_dir: str = DATA_DIRECTORY,
        backup_dir: str = BACKUP_DIRECTORY,
        max_backups: int = MAX_BACKUPS,
        auto_backup: bool = True,
    ) -> None:
        self.data_dir = data_dir
        self.backup_dir = backup_dir
        self.max_backups = max_backups
        self._current_file_path = file_path or os.path.join(data_dir, DEFAULT_FILENAME)
        self._auto_backup_enabled = auto_backup
        self._operation_count = 0
        self._state_lock = threading.Lock()
        self._file_lock = ReadWriteLock()
        self._initialize_directories()

    @classmethod
    def from_settings(cls, settings: StorageSettings, file_path: str | None = None) -> "FileStorage":
        return cls(
            file_path or os.path.join(settings.data_dir, settings.file_name),
            data_dir=settings.data_dir,
            backup_dir=settings.backup_dir,
            max_backups=settings.max_backups,
            auto_backup=settings.auto_backup,
        )

    # accessors

    @property
    def current_file_path(self) -> str:
        return self._current_file_path

    @current_file_path.setter
    def current_file_path(self, file_path: str) -> None:
        self._current_file_path = file_path

    @property
    def auto_backup_enabled(self) -> bool:
        with self._state_lock:
            return self._auto_backup_enabled

    @auto_backup_enabled.setter
    def auto_backup_enabled(self, enabled: bool) -> None:
        with self._state_lock:
            self._auto_backup_enabled = bool(enabled)

    def set_auto_backup_enabled(self, enabled: bool) -> None:
        self.auto_backup_enabled = enabled

    @property
    def operation_count(self) -> int:
        with self._state_lock:
            return self._operation_count

    def _record_operation(self) -> None:
        with self._state_lock:
            self._operation_count += 1

    # typed records

    def save_workout_objects(
        self, workouts: Optional[Sequence[Optional[Workout]]], file_path: str | None = None
    ) -> bool:
        if workouts is None:
            raise FileStorageError(ErrorKind.PRECONDITION, "Cannot save null workout list")
        lines = [w.to_csv_line() for w in workouts if w is not None]
        return self.save_workouts(lines, file_path)

    def load_workout_objects(self, file_path: str | None = None) -> List[Workout]:
        return [Workout.from_csv_line(line) for line in self.load_workouts(file_path)]

    # raw rows

    def save_workouts(self, workout_data: Optional[Sequence[str]], file_path: str | None = None) -> bool:
        """Save rows, raising ``FileStorageError`` on failure.

        Returns False when some rows were skipped as invalid.
        """
        result = self.save_workouts_with_result(workout_data, file_path).unwrap()
        return not result.has_errors

    def load_workouts(self, file_path: str | None = None) -> List[str]:
        return list(self.load_workouts_with_result(file_path).unwrap().data)

    def save_workouts_with_result(
        self, workout_data: Optional[Sequence[str]], file_path: str | None = None
    ) -> Outcome[None]:
        if workout_data is None:
            return Err(ErrorKind.PRECONDITION, "Cannot save null workout data")
        path = self._resolve(file_path)
        if not path:
            return Err(ErrorKind.PRECONDITION, "Cannot save to an empty file path")

        with self._file_lock.write_locked():
            success_count = 0
            skipped_count = 0
            errors: List[str] = []

            if self.auto_backup_enabled and self.file_exists(path):
                self._create_backup(path)

            temp_path = path + ".tmp"
            try:
                with open(temp_path, "w", encoding="utf-8") as f:
                    f.write(CSV_HEADER + "\n")
                    for index, line in enumerate(workout_data):
                        reason = validate_entry(line)
                        if reason is not None:
                            skipped_count += 1
                            errors.append(f"Skipped invalid entry at index {index}: {line} ({reason})")
                            continue
                        fields = parse_csv_line(line)[:FIELD_COUNT]
                        fields[1] = normalize_exercise_name(fields[1])
                        f.write(to_csv_line(fields) + "\n")
                        success_count += 1
            except (OSError, UnicodeError) as e:
                self._discard_temp(temp_path)
                return Err(ErrorKind.IO, f"Failed to write workout data: {e}")
            except BaseException:
                self._discard_temp(temp_path)
                raise

            try:
                os.replace(temp_path, path)
            except OSError as e:
                self._discard_temp(temp_path)
                return Err(ErrorKind.IO, f"Failed to finalize save operation: {e}")

            self._record_operation()
            logger.info("Saved %d workouts to %s (skipped %d)", success_count, path, skipped_count)
            return Ok(
                OperationResult(None, len(workout_data), success_count, skipped_count, tuple(errors))
            )

    def load_workouts_with_result(self, file_path: str | None = None) -> Outcome[List[str]]:
        path = self._resolve(file_path)
        if not path:
            return Err(ErrorKind.PRECONDITION, "Cannot load from an empty file path")

        with self._file_lock.read_locked():
            workouts: List[str] = []
            errors: List[str] = []
            processed_count = 0
            skipped_count = 0

            try:
                with open(path, "r", encoding="utf-8") as f:
                    for line_number, raw in enumerate(f, start=1):
                        line = raw.rstrip("\n")
                        if line_number == 1 and line == CSV_HEADER:
                            continue
                        if not line.strip():
                            continue
                        processed_count += 1
                        fields = parse_csv_line(line)
                        reason = validate_fields(fields)
                        if reason is None:
                            workouts.append(to_csv_line(fields[:FIELD_COUNT]))
                        else:
                            skipped_count += 1
                            errors.append(f"Invalid entry at line {line_number}: {line} ({reason})")
            except FileNotFoundError:
                self._record_operation()
                return Ok(OperationResult([], 0, 0, 0))
            except (OSError, UnicodeDecodeError) as e:
                return Err(ErrorKind.IO, f"Failed to read workout data: {e}")

            self._record_operation()
            logger.info("Loaded %d workouts from %s (skipped %d)", len(workouts), path, skipped_count)
            return Ok(
                OperationResult(workouts, processed_count, len(workouts), skipped_count, tuple(errors))
            )

    # backups

    def backup_path_for(self, file_path: str, now: datetime.datetime | None = None) -> str:
        name = os.path.basename(file_path)
        stem = name[: -len(".csv")] if name.endswith(".csv") else name
        timestamp = (now or datetime.datetime.now()).strftime(TIMESTAMP_FORMAT)
        return os.path.join(self.backup_dir, f"{stem}{BACKUP_MARKER}{timestamp}.csv")

    def create_backup(self, file_path: str | None = None) -> bool:
        path = self._resolve(file_path)
        if not path:
            return False
        with self._file_lock.write_locked():
            return self._create_backup(path)

    def _create_backup(self, path: str) -> bool:
        if not self.file_exists(path):
            return False
        try:
            os.makedirs(self.backup_dir, exist_ok=True)
            backup_path = self.backup_path_for(path)
            shutil.copyfile(path, backup_path)
        except OSError as e:
            logger.warning("Backup failed: %s", e)
            return False
        logger.debug("Backed up %s to %s", path, backup_path)
        self._rotate_backups()
        return True

    def list_backups(self) -> List[str]:
        """Return backup file paths, oldest first."""
        paths = [
            os.path.join(self.backup_dir, name)
            for name in os.listdir(self.backup_dir)
            if BACKUP_MARKER in name
        ]
        paths = [p for p in paths if os.path.isfile(p)]
        return sorted(paths, key=os.path.getmtime)

    def restore_backup(self, backup_path: str, file_path: str | None = None) -> None:
        """Replace the data file with a copy of ``backup_path``.

        The current file is backed up first when auto-backup is on.
        """
        path = self._resolve(file_path)
        if not path:
            raise FileStorageError(ErrorKind.PRECONDITION, "Cannot restore to an empty file path")
        if not os.path.isfile(backup_path):
            raise FileStorageError(ErrorKind.PRECONDITION, f"Backup not found: {backup_path}")
        with self._file_lock.write_locked():
            temp_path = path + ".tmp"
            try:
                shutil.copyfile(backup_path, temp_path)
            except OSError as e:
                self._discard_temp(temp_path)
                raise FileStorageError(ErrorKind.IO, f"Failed to restore backup: {e}") from e
            # backup_path may be pruned by rotation once copied
            if self.auto_backup_enabled and self.file_exists(path):
                self._create_backup(path)
            try:
                os.replace(temp_path, path)
            except OSError as e:
                self._discard_temp(temp_path)
                raise FileStorageError(ErrorKind.IO, f"Failed to restore backup: {e}") from e
            logger.info("Restored %s from %s", path, backup_path)

    def _rotate_backups(self) -> None:
        try:
            backups = self.list_backups()
            for old in backups[: max(0, len(backups) - self.max_backups)]:
                os.remove(old)
                logger.debug("Removed old backup %s", old)
        except OSError as e:
            logger.warning("Backup rotation failed: %s", e)

    # helpers

    def is_valid_workout_entry(self, entry: Optional[str]) -> bool:
        return validate_entry(entry) is None

    @staticmethod
    def file_exists(file_path: str) -> bool:
        return os.path.exists(file_path)

    @staticmethod
    def delete_file(file_path: str) -> bool:
        try:
            os.remove(file_path)
            return True
        except OSError:
            return False

    def _resolve(self, file_path: str | None) -> str | None:
        return file_path if file_path is not None else self._current_file_path

    def _discard_temp(self, temp_path: str) -> None:
        if os.path.exists(temp_path) and not self.delete_file(temp_path):
            logger.warning("Could not remove temporary file %s", temp_path)

    def _initialize_directories(self) -> None:
        for directory in (self.data_dir, self.backup_dir):
            try:
                os.makedirs(directory, exist_ok=True)
            except OSError as e:
                logger.warning("Could not create storage directory %s: %s", directory, e)
