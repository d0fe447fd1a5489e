"""
Domain errors for the workout tracker.
Each carries the HTTP status the API answers with; main.py registers one handler for MaptyError.
"""

from __future__ import annotations


class MaptyError(Exception):
    status_code: int = 400

    def to_dict(self) -> dict:
        return {"detail": str(self)}


class InvalidMetric(MaptyError):
    """A numeric workout input is not acceptable (non-finite, or not positive where required)."""

    status_code = 422

    def __init__(self, field: str, value: object, message: str | None = None):
        self.field = field
        self.value = value
        super().__init__(message or f"Invalid value for {field}: {value!r}")

    def to_dict(self) -> dict:
        return {"detail": str(self), "field": self.field}


class NotFound(MaptyError):
    status_code = 404

    def __init__(self, workout_id: str):
        self.workout_id = workout_id
        super().__init__(f"Workout {workout_id} not found")


class DuplicateId(MaptyError):
    """Two workouts got the same time-based id (created within the same millisecond)."""

    status_code = 409

    def __init__(self, workout_id: str):
        self.workout_id = workout_id
        super().__init__(f"Workout id {workout_id} already exists")


class InvalidTransition(MaptyError):
    """The form is not in a state that accepts this event."""

    status_code = 409


class MapUnavailable(MaptyError):
    """Map not loaded yet (no position received) or geolocation failed."""

    status_code = 409


class CorruptState(MaptyError):
    """Persisted workouts blob cannot be parsed into workouts."""

    status_code = 500
