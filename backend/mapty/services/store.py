"""Canonical, insertion-ordered workout collection with an id index."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from operator import attrgetter

from mapty.core.errors import DuplicateId, NotFound
from mapty.schemas.workout import SortKey, Workout

SORT_ATTRIBUTES: dict[SortKey, str] = {
    SortKey.DISTANCE: "distance_km",
    SortKey.DURATION: "duration_min",
}


class WorkoutStore:
    """
    Owns the order workouts were added in (canonical order).
    Sorting returns a new list; nothing but add/remove/replace/clear changes canonical order.
    Not thread-safe: callers run one event at a time.
    """

    def __init__(self, records: Iterable[Workout] = ()):
        self._records: list[Workout] = []
        self._index: dict[str, int] = {}
        for record in records:
            self.add(record)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Workout]:
        return iter(list(self._records))

    def __contains__(self, workout_id: object) -> bool:
        return workout_id in self._index

    def _reindex(self) -> None:
        self._index = {record.id: i for i, record in enumerate(self._records)}

    def _position(self, workout_id: str) -> int:
        try:
            return self._index[workout_id]
        except KeyError:
            raise NotFound(workout_id) from None

    def add(self, record: Workout) -> None:
        if record.id in self._index:
            raise DuplicateId(record.id)
        self._index[record.id] = len(self._records)
        self._records.append(record)

    def remove_by_id(self, workout_id: str) -> Workout:
        record = self._records.pop(self._position(workout_id))
        self._reindex()
        return record

    def find_by_id(self, workout_id: str) -> Workout:
        return self._records[self._position(workout_id)]

    def replace(self, workout_id: str, new_record: Workout) -> Workout:
        """Remove workout_id and append new_record. On any error the collection is unchanged."""
        position = self._position(workout_id)
        if new_record.id != workout_id and new_record.id in self._index:
            raise DuplicateId(new_record.id)
        old = self._records.pop(position)
        self._records.append(new_record)
        self._reindex()
        return old

    def sorted_view(self, key: SortKey | str, ascending: bool = True) -> list[Workout]:
        """Stable sort by distance or duration; equal keys keep canonical relative order."""
        attribute = SORT_ATTRIBUTES[SortKey(key)]
        return sorted(self._records, key=attrgetter(attribute), reverse=not ascending)

    def all(self) -> list[Workout]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()
        self._index.clear()
