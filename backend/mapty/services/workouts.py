"""
Workout construction: id, label and the derived metric are computed once here.
Also holds the form input rules (coercion of raw strings and the per-field check).
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import datetime

from mapty.core.errors import InvalidMetric
from mapty.schemas.workout import Cycling, Running, WorkoutType

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# Fields read from the form, in validation order, per workout type
FORM_FIELDS: dict[WorkoutType, tuple[str, ...]] = {
    WorkoutType.RUNNING: ("distance", "duration", "cadence"),
    WorkoutType.CYCLING: ("distance", "duration", "elevation"),
}

# Fields that only need to be finite (zero and negative allowed)
FINITE_ONLY_FIELDS = frozenset({"elevation"})


def now_local() -> datetime:
    return datetime.now().astimezone()


def make_workout_id(created_at: datetime) -> str:
    """Last 10 digits of the creation time in milliseconds. Not unique within one millisecond."""
    return str(int(created_at.timestamp() * 1000))[-10:]


def describe(kind: WorkoutType | str, created_at: datetime) -> str:
    """Label such as 'Running on October 19'."""
    name = WorkoutType(kind).value
    return f"{name[0].upper()}{name[1:]} on {MONTHS[created_at.month - 1]} {created_at.day}"


def derive_metric(kind: WorkoutType | str, distance_km: float, duration_min: float) -> float:
    """Pace (min/km) for running, speed (km/h) for cycling."""
    kind = WorkoutType(kind)
    if kind is WorkoutType.RUNNING:
        return duration_min / distance_km
    if kind is WorkoutType.CYCLING:
        return distance_km / (duration_min / 60)
    raise ValueError(f"Unknown workout type: {kind}")


def coerce_number(raw: str | float | int | None) -> float:
    """Convert a raw form value the way a browser's unary + does: blank is 0, garbage is NaN."""
    if raw is None:
        return 0.0
    if isinstance(raw, (int, float)):
        return float(raw)
    text = raw.strip()
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return math.nan


def check_input(field: str, value: float) -> bool:
    """Finite and positive; elevation only needs to be finite."""
    if not math.isfinite(value):
        return False
    if field in FINITE_ONLY_FIELDS:
        return True
    return value > 0


def validate_fields(kind: WorkoutType | str, raw: Mapping[str, str | float | None]) -> dict[str, float]:
    """
    Coerce and check the form fields of one submission in order.
    Raises InvalidMetric for the first bad field; nothing after it is checked.
    """
    values: dict[str, float] = {}
    for field in FORM_FIELDS[WorkoutType(kind)]:
        value = coerce_number(raw.get(field))
        if not check_input(field, value):
            raise InvalidMetric(field, raw.get(field))
        values[field] = value
    return values


def _check_base(coords: tuple[float, float], distance_km: float, duration_min: float) -> tuple[float, float]:
    lat, lng = coords
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InvalidMetric("coordinates", coords)
    if not math.isfinite(distance_km) or distance_km <= 0:
        raise InvalidMetric("distance", distance_km)
    if not math.isfinite(duration_min) or duration_min <= 0:
        raise InvalidMetric("duration", duration_min)
    return float(lat), float(lng)


def create_running(
    coords: tuple[float, float],
    distance_km: float,
    duration_min: float,
    cadence_spm: float,
    created_at: datetime | None = None,
) -> Running:
    lat, lng = _check_base(coords, distance_km, duration_min)
    created_at = created_at or now_local()
    return Running(
        id=make_workout_id(created_at),
        created_at=created_at,
        coordinates=(lat, lng),
        distance_km=distance_km,
        duration_min=duration_min,
        cadence_spm=cadence_spm,
        pace_min_per_km=derive_metric(WorkoutType.RUNNING, distance_km, duration_min),
        label=describe(WorkoutType.RUNNING, created_at),
    )


def create_cycling(
    coords: tuple[float, float],
    distance_km: float,
    duration_min: float,
    elevation_gain_m: float,
    created_at: datetime | None = None,
) -> Cycling:
    lat, lng = _check_base(coords, distance_km, duration_min)
    created_at = created_at or now_local()
    return Cycling(
        id=make_workout_id(created_at),
        created_at=created_at,
        coordinates=(lat, lng),
        distance_km=distance_km,
        duration_min=duration_min,
        elevation_gain_m=elevation_gain_m,
        speed_km_per_h=derive_metric(WorkoutType.CYCLING, distance_km, duration_min),
        label=describe(WorkoutType.CYCLING, created_at),
    )


def create_workout(
    kind: WorkoutType | str,
    coords: tuple[float, float],
    values: Mapping[str, float],
    created_at: datetime | None = None,
) -> Running | Cycling:
    """Build a workout from validated form values (see validate_fields)."""
    kind = WorkoutType(kind)
    if kind is WorkoutType.RUNNING:
        return create_running(coords, values["distance"], values["duration"], values["cadence"], created_at)
    return create_cycling(coords, values["distance"], values["duration"], values["elevation"], created_at)
