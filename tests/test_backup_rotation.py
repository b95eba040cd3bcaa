import datetime
import os
import sys
import time

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from storage import FileStorage


def make_storage(tmp_path, max_backups=5):
    data_dir = tmp_path / "data"
    backup_dir = data_dir / "backups"
    return FileStorage(
        str(data_dir / "workouts.csv"),
        data_dir=str(data_dir),
        backup_dir=str(backup_dir),
        max_backups=max_backups,
    )


def seed_backups(backup_dir, count):
    now = time.time()
    paths = []
    for i in range(count):
        path = os.path.join(backup_dir, f"workouts_backup_2025-01-0{i + 1}_00-00-00.csv")
        with open(path, "w", encoding="utf-8") as f:
            f.write("old\n")
        os.utime(path, (now - 1000 + i, now - 1000 + i))
        paths.append(path)
    return paths


def test_backup_name_pattern(tmp_path):
    storage = make_storage(tmp_path)
    stamp = datetime.datetime(2026, 2, 21, 7, 5, 9)
    assert storage.backup_path_for("data/workouts.csv", stamp) == os.path.join(
        storage.backup_dir, "workouts_backup_2026-02-21_07-05-09.csv"
    )
    assert storage.backup_path_for("log.txt", stamp).endswith("log.txt_backup_2026-02-21_07-05-09.csv")


def test_rotation_keeps_newest_five(tmp_path):
    storage = make_storage(tmp_path)
    old = seed_backups(storage.backup_dir, 7)
    storage.save_workouts(["2026-01-01,Squat,100,5,5,,true"])
    storage.save_workouts(["2026-01-02,Squat,100,5,5,,true"])
    remaining = storage.list_backups()
    assert len(remaining) == 5
    for path in old[:3]:
        assert not os.path.exists(path)
    assert len(set(remaining) - set(old)) == 1


def test_backup_bound_over_many_saves(tmp_path):
    storage = make_storage(tmp_path)
    seed_backups(storage.backup_dir, 4)
    for day in range(1, 8):
        storage.save_workouts([f"2026-01-0{day},Squat,100,5,5,,true"])
        names = [n for n in os.listdir(storage.backup_dir) if "_backup_" in n]
        assert len(names) <= 5


def test_custom_backup_limit(tmp_path):
    storage = make_storage(tmp_path, max_backups=2)
    seed_backups(storage.backup_dir, 3)
    storage.save_workouts([])
    assert storage.create_backup(storage.current_file_path)
    assert len(storage.list_backups()) == 2


def test_rotation_failure_is_swallowed(tmp_path, monkeypatch, caplog):
    storage = make_storage(tmp_path)
    seed_backups(storage.backup_dir, 6)
    storage.save_workouts([])

    def fail(path):
        raise PermissionError("read-only")

    monkeypatch.setattr(os, "remove", fail)
    assert storage.create_backup(storage.current_file_path)
    assert "Backup rotation failed" in caplog.text


def test_restore_backup(tmp_path):
    storage = make_storage(tmp_path)
    storage.save_workouts(["2026-01-01,Squat,100,5,5,first,true"])
    storage.save_workouts(["2026-01-02,Squat,105,5,5,second,true"])
    (backup,) = storage.list_backups()
    storage.restore_backup(backup)
    assert storage.load_workouts() == ["2026-01-01,Squat,100,5,5,first,true"]
    assert not os.path.exists(storage.current_file_path + ".tmp")
