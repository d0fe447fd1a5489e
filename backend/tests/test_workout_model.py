"""Tests for workout construction, derived metrics and form input rules."""

import math
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from mapty.core.errors import InvalidMetric
from mapty.schemas.workout import Cycling, Running, WorkoutType
from mapty.services.workouts import (
    check_input,
    coerce_number,
    create_cycling,
    create_running,
    create_workout,
    derive_metric,
    describe,
    make_workout_id,
    validate_fields,
)

CREATED = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)


def test_running_pace_label_and_id():
    run = create_running((50.0, 30.0), 5, 30, 170, created_at=CREATED)
    assert isinstance(run, Running)
    assert run.type == "running"
    assert run.pace_min_per_km == 6.0
    assert run.label == "Running on October 19"
    assert run.click_count == 0
    assert run.coordinates == (50.0, 30.0)
    assert run.id == str(int(CREATED.timestamp() * 1000))[-10:]
    assert len(run.id) == 10


def test_cycling_speed_with_negative_elevation():
    ride = create_cycling((50.0, 30.0), 20, 60, -10, created_at=CREATED)
    assert isinstance(ride, Cycling)
    assert ride.speed_km_per_h == 20.0
    assert ride.elevation_gain_m == -10
    assert ride.label == "Cycling on October 19"


def test_derived_metric_formulas_are_exact():
    for distance, duration in [(3.7, 21.3), (0.0001, 1), (42.195, 180)]:
        assert create_running((0, 0), distance, duration, 160, CREATED).pace_min_per_km == duration / distance
        assert create_cycling((0, 0), distance, duration, 5, CREATED).speed_km_per_h == distance / (duration / 60)


@pytest.mark.parametrize("distance", [0, -1, math.nan, math.inf])
def test_invalid_distance_rejected(distance):
    with pytest.raises(InvalidMetric) as exc:
        create_running((50.0, 30.0), distance, 30, 170, created_at=CREATED)
    assert exc.value.field == "distance"


def test_invalid_duration_rejected():
    with pytest.raises(InvalidMetric) as exc:
        create_cycling((50.0, 30.0), 10, 0, 100, created_at=CREATED)
    assert exc.value.field == "duration"


def test_non_finite_coordinates_rejected():
    with pytest.raises(InvalidMetric) as exc:
        create_running((math.nan, 30.0), 5, 30, 170, created_at=CREATED)
    assert exc.value.field == "coordinates"


def test_click_only_changes_click_count():
    run = create_running((50.0, 30.0), 5, 30, 170, created_at=CREATED)
    run.click()
    run.click()
    assert run.click_count == 2
    assert run.pace_min_per_km == 6.0


@pytest.mark.parametrize("field", ["distance_km", "duration_min", "pace_min_per_km", "label", "id", "coordinates"])
def test_fields_other_than_click_count_are_frozen(field):
    run = create_running((50.0, 30.0), 5, 30, 170, created_at=CREATED)
    with pytest.raises(ValidationError):
        setattr(run, field, getattr(run, field))
    run.click_count = 3
    assert run.click_count == 3
    assert run.pace_min_per_km == 6.0
    assert run.label == "Running on October 19"


def test_derive_metric_unknown_type():
    with pytest.raises(ValueError):
        derive_metric("swimming", 1, 1)


def test_describe_and_id_helpers():
    assert describe(WorkoutType.CYCLING, datetime(2026, 1, 2, tzinfo=timezone.utc)) == "Cycling on January 2"
    assert make_workout_id(datetime(2026, 1, 2, tzinfo=timezone.utc)).isdigit()


def test_coerce_number_like_browser_unary_plus():
    assert coerce_number("") == 0.0
    assert coerce_number("   ") == 0.0
    assert coerce_number(" 5 ") == 5.0
    assert coerce_number("-5") == -5.0
    assert coerce_number(12) == 12.0
    assert math.isnan(coerce_number("abc"))
    assert math.isinf(coerce_number("inf"))


def test_check_input_boundaries():
    assert not check_input("distance", 0)
    assert check_input("distance", 0.0001)
    assert check_input("elevation", -5)
    assert check_input("elevation", 0)
    assert not check_input("elevation", math.nan)
    assert not check_input("elevation", math.inf)
    assert not check_input("cadence", 0)
    assert check_input("cadence", 170)


def test_validate_fields_stops_at_first_invalid():
    with pytest.raises(InvalidMetric) as exc:
        validate_fields("running", {"distance": "0", "duration": "abc", "cadence": "170"})
    assert exc.value.field == "distance"
    with pytest.raises(InvalidMetric) as exc:
        validate_fields("cycling", {"distance": "5", "duration": "30", "elevation": "NaN"})
    assert exc.value.field == "elevation"


def test_validate_fields_ignores_other_type_fields():
    values = validate_fields("cycling", {"distance": "20", "duration": "60", "cadence": "", "elevation": "-10"})
    assert values == {"distance": 20.0, "duration": 60.0, "elevation": -10.0}


def test_create_workout_dispatches_on_type():
    ride = create_workout("cycling", (1.0, 2.0), {"distance": 20, "duration": 60, "elevation": 0}, CREATED)
    assert isinstance(ride, Cycling)
    run = create_workout(WorkoutType.RUNNING, (1.0, 2.0), {"distance": 5, "duration": 30, "cadence": 170}, CREATED)
    assert isinstance(run, Running)
