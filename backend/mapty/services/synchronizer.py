"""Keeps the workout list and the map markers in line with the store."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from mapty.schemas.workout import Workout
from mapty.services.map_view import LeafletMap, MarkerHandle
from mapty.services.page_view import WorkoutListView
from mapty.services.renderer import popup_content, render_workout
from mapty.services.store import WorkoutStore

logger = logging.getLogger(__name__)


class ViewSynchronizer:
    def __init__(self, store: WorkoutStore, map_view: LeafletMap, list_view: WorkoutListView):
        self.store = store
        self.map_view = map_view
        self.list_view = list_view
        self._markers: list[MarkerHandle] = []

    def render_list(self, records: Sequence[Workout]) -> None:
        """Replace every list item with one per record, emitted in the given order."""
        self.list_view.clear_items()
        for record in records:
            self.list_view.insert_after_anchor(render_workout(record))

    def render_markers(self, records: Sequence[Workout]) -> None:
        """Replace every marker with one per record. No-op for placement until the map exists."""
        for handle in self._markers:
            self.map_view.remove_marker(handle)
        self._markers = []
        if not self.map_view.is_ready:
            return
        for record in records:
            handle = self.map_view.place_marker(record.coordinates).bind_popup(
                popup_content(record),
                class_name=f"{record.type}-popup",
                max_width=250,
                min_width=100,
                auto_close=False,
                close_on_click=False,
            )
            self._markers.append(handle)

    def center_on(
        self,
        coords: tuple[float, float],
        zoom: int,
        animate: bool = True,
        pan_duration: float | None = 1.0,
    ) -> None:
        if not self.map_view.is_ready:
            logger.debug("center_on %s skipped: map not loaded", coords)
            return
        self.map_view.set_view(coords, zoom, animate=animate, pan_duration=pan_duration)

    def reconcile_after_mutation(self) -> None:
        """Re-derive list and markers from canonical order (not used after a sort)."""
        records = self.store.all()
        self.render_list(records)
        self.render_markers(records)
