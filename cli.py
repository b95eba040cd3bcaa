import argparse
import json
import logging
import sys

from config import load_settings
from csv_codec import CSV_HEADER
from storage import FileStorage, FileStorageError


def list_workouts(storage: FileStorage) -> None:
    workouts = storage.load_workout_objects()
    if not workouts:
        print("No workouts stored.")
        return
    for index, workout in enumerate(workouts):
        print(f"[{index}] {workout}")


def validate_file(storage: FileStorage) -> int:
    result = storage.load_workouts_with_result().unwrap()
    for error in result.errors:
        print(error)
    print(
        f"{result.processed_count} rows processed, {result.success_count} valid, "
        f"{result.skipped_count} invalid"
    )
    return 1 if result.has_errors else 0


def backup_file(storage: FileStorage) -> int:
    if not storage.create_backup(storage.current_file_path):
        print(f"No backup created for {storage.current_file_path}")
        return 1
    print(f"Backup stored in {storage.backup_dir}")
    return 0


def export_workouts(storage: FileStorage, fmt: str, out_path: str) -> int:
    workouts = storage.load_workout_objects()
    with open(out_path, "w", encoding="utf-8") as f:
        if fmt == "json":
            json.dump([w.to_dict() for w in workouts], f, indent=2)
        else:
            f.write(CSV_HEADER + "\n")
            for workout in workouts:
                f.write(workout.to_csv_line() + "\n")
    return len(workouts)


def import_csv(storage: FileStorage, csv_path: str) -> int:
    """Append the valid rows of ``csv_path`` to the data file."""
    incoming = storage.load_workouts_with_result(csv_path).unwrap()
    for error in incoming.errors:
        print(f"Skipped: {error}")
    existing = storage.load_workouts()
    storage.save_workouts(existing + list(incoming.data))
    return incoming.success_count


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Workout journal utility commands")
    parser.add_argument("--settings", help="Path to settings YAML")
    parser.add_argument("--file", help="CSV file to use instead of the configured one")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("list")
    sub.add_parser("validate")
    sub.add_parser("backup")

    rst = sub.add_parser("restore")
    rst.add_argument("--from", dest="src", required=True)

    exp = sub.add_parser("export")
    exp.add_argument("--fmt", choices=["csv", "json"], default="csv")
    exp.add_argument("--out", required=True)

    imp = sub.add_parser("import")
    imp.add_argument("--csv", required=True)

    args = parser.parse_args(argv)

    settings = load_settings(args.settings)
    logging.basicConfig(level=settings.log_level, stream=sys.stderr)
    storage = FileStorage.from_settings(settings, args.file)

    try:
        if args.cmd == "list":
            list_workouts(storage)
        elif args.cmd == "validate":
            return validate_file(storage)
        elif args.cmd == "backup":
            return backup_file(storage)
        elif args.cmd == "restore":
            storage.restore_backup(args.src)
            print(f"Restored {storage.current_file_path} from {args.src}")
        elif args.cmd == "export":
            count = export_workouts(storage, args.fmt, args.out)
            print(f"Exported {count} workouts to {args.out}")
        elif args.cmd == "import":
            count = import_csv(storage, args.csv)
            print(f"Imported {count} workouts")
    except (FileStorageError, OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
