"""Tests for saving/loading the workout list and the key-value storage backends."""

import io
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from mapty.core.errors import CorruptState
from mapty.db.base import Base
from mapty.schemas.workout import Cycling, Running
from mapty.services.persistence import WorkoutPersistence
from mapty.services.storage import MemoryStorage, SqlStorage
from mapty.services.workouts import create_cycling, create_running

BASE = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def records():
    run = create_running((50.0, 30.0), 5, 30, 170, created_at=BASE)
    ride = create_cycling((50.1, 30.2), 20, 60, -10, created_at=BASE + timedelta(seconds=1))
    ride.click()
    return [run, ride]


@pytest.fixture
def sql_storage(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'kv.db'}")
    Base.metadata.create_all(engine)
    yield SqlStorage(sessionmaker(engine, expire_on_commit=False))
    engine.dispose()


def test_round_trip_preserves_order_and_derived_fields(records):
    persistence = WorkoutPersistence(MemoryStorage())
    persistence.save(records)
    loaded = persistence.load()
    assert loaded == records
    assert isinstance(loaded[0], Running)
    assert isinstance(loaded[1], Cycling)
    assert loaded[0].pace_min_per_km == 6.0
    assert loaded[1].speed_km_per_h == 20.0
    assert loaded[1].click_count == 1


def test_blob_layout(records):
    storage = MemoryStorage()
    WorkoutPersistence(storage).save(records)
    data = json.loads(storage.get("workouts"))
    assert [d["type"] for d in data] == ["running", "cycling"]
    run = data[0]
    for key in ("id", "createdAt", "coordinates", "distanceKm", "durationMin", "clickCount", "label", "cadenceSpm", "paceMinPerKm"):
        assert key in run
    assert run["coordinates"] == [50.0, 30.0]
    assert "elevationGainM" in data[1] and "speedKmPerH" in data[1]


def test_missing_key_loads_none():
    assert WorkoutPersistence(MemoryStorage()).load() is None


def test_derived_fields_restored_verbatim(records):
    storage = MemoryStorage()
    WorkoutPersistence(storage).save(records)
    data = json.loads(storage.get("workouts"))
    data[0]["paceMinPerKm"] = 99.5
    data[0]["label"] = "Running on May 1"
    storage.set("workouts", json.dumps(data))
    loaded = WorkoutPersistence(storage).load()
    assert loaded[0].pace_min_per_km == 99.5
    assert loaded[0].label == "Running on May 1"


@pytest.mark.parametrize(
    "blob",
    [
        "not json",
        '{"type": "running"}',
        '[{"id": "1", "distanceKm": 5}]',
        '[{"type": "swimming", "id": "1"}]',
        '[{"type": "running", "id": "1", "createdAt": "2026-10-19T08:00:00Z"}]',
    ],
)
def test_corrupt_blob_raises(blob):
    storage = MemoryStorage({"workouts": blob})
    with pytest.raises(CorruptState):
        WorkoutPersistence(storage).load()


def test_save_overwrites_and_clear_removes(records):
    storage = MemoryStorage()
    persistence = WorkoutPersistence(storage)
    persistence.save(records)
    persistence.save(records[:1])
    assert len(persistence.load()) == 1
    persistence.clear()
    assert storage.get("workouts") is None
    persistence.clear()


def test_custom_key(records):
    storage = MemoryStorage()
    WorkoutPersistence(storage, key="other").save(records)
    assert storage.get("workouts") is None
    assert storage.get("other") is not None


def test_sql_storage_get_set_remove(sql_storage):
    assert sql_storage.get("workouts") is None
    sql_storage.set("workouts", "[]")
    sql_storage.set("workouts", '["x"]')
    assert sql_storage.get("workouts") == '["x"]'
    sql_storage.remove("workouts")
    assert sql_storage.get("workouts") is None
    sql_storage.remove("workouts")


def test_sql_storage_round_trip(sql_storage, records):
    persistence = WorkoutPersistence(sql_storage)
    persistence.save(records)
    assert WorkoutPersistence(sql_storage).load() == records


def test_migration_creates_storage_table_offline():
    buf = io.StringIO()
    cfg = Config(output_buffer=buf)
    cfg.set_main_option("script_location", str(Path(__file__).resolve().parents[1] / "alembic"))
    command.upgrade(cfg, "head", sql=True)
    sql = buf.getvalue()
    assert "CREATE TABLE storage_entries" in sql
    assert "INSERT INTO alembic_version (version_num) VALUES ('001')" in sql
