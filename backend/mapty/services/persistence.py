"""Save / load the workout collection as one JSON blob under a single storage key."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pydantic import ValidationError

from mapty.core.errors import CorruptState
from mapty.schemas.workout import Workout, workout_list_adapter
from mapty.services.storage import KeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "workouts"


class WorkoutPersistence:
    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_STORAGE_KEY):
        self._storage = storage
        self.key = key

    def save(self, records: Sequence[Workout]) -> None:
        """Overwrite the stored blob with the whole collection, in the given order."""
        blob = workout_list_adapter.dump_json(list(records), by_alias=True).decode("utf-8")
        self._storage.set(self.key, blob)
        logger.debug("Saved %d workouts under %r", len(records), self.key)

    def load(self) -> list[Workout] | None:
        """
        Rebuild typed workouts from the stored blob; None when nothing is stored.
        Derived fields (label, pace, speed) are taken as stored, not recomputed.
        Raises CorruptState for unparsable JSON, a non-array payload, or an entry
        with a missing/unknown type or missing fields.
        """
        blob = self._storage.get(self.key)
        if blob is None:
            return None
        try:
            return workout_list_adapter.validate_json(blob)
        except ValidationError as e:
            raise CorruptState(f"Stored {self.key!r} blob is not a valid workout list: {e.error_count()} error(s)") from e

    def clear(self) -> None:
        self._storage.remove(self.key)
