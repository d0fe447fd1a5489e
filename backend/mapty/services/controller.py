"""
Interaction controller: turns map, form, list and sidebar events into store mutations,
persistence snapshots and view updates. One event is handled to completion before the next.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from enum import Enum

from prometheus_client import Counter

from mapty.config import settings
from mapty.core.errors import CorruptState, DuplicateId, InvalidMetric, InvalidTransition, MapUnavailable
from mapty.schemas.view import ViewState
from mapty.schemas.workout import SortKey, Workout, WorkoutType
from mapty.services.geolocation import POSITION_ERROR_MESSAGE, initial_view
from mapty.services.map_view import LeafletMap
from mapty.services.page_view import FormView, WorkoutListView
from mapty.services.persistence import WorkoutPersistence
from mapty.services.renderer import spoken_details
from mapty.services.speech import SpeechAnnouncer
from mapty.services.storage import KeyValueStorage
from mapty.services.store import WorkoutStore
from mapty.services.synchronizer import ViewSynchronizer
from mapty.services.workouts import FORM_FIELDS, create_workout, now_local, validate_fields

logger = logging.getLogger(__name__)

WORKOUT_EVENTS = Counter(
    "mapty_workout_events_total",
    "Workout mutations handled by the controller",
    ["action"],
)

SORT_ANNOUNCEMENTS = {
    SortKey.DISTANCE: "Sorted by distance",
    SortKey.DURATION: "Sorted by time",
}


class FormMode(str, Enum):
    IDLE = "idle"
    FORM_OPEN = "form_open"


class InteractionController:
    def __init__(
        self,
        store: WorkoutStore,
        persistence: WorkoutPersistence,
        synchronizer: ViewSynchronizer,
        form: FormView,
        announcer: SpeechAnnouncer,
        clock: Callable[[], datetime] = now_local,
    ):
        self.store = store
        self.persistence = persistence
        self.synchronizer = synchronizer
        self.map_view: LeafletMap = synchronizer.map_view
        self.list_view: WorkoutListView = synchronizer.list_view
        self.form = form
        self.announcer = announcer
        self.clock = clock
        self.state = FormMode.IDLE
        self.pending_coordinates: tuple[float, float] | None = None
        self.sorted_by: dict[SortKey, bool] = {SortKey.DISTANCE: False, SortKey.DURATION: False}
        self._click_handler_registered = False

    # --- startup / persistence -------------------------------------------------

    def _load_records(self) -> list[Workout]:
        try:
            return self.persistence.load() or []
        except CorruptState as e:
            logger.warning("Ignoring stored workouts: %s", e)
            return []

    def _reload(self) -> None:
        self.store.clear()
        for record in self._load_records():
            try:
                self.store.add(record)
            except DuplicateId:
                logger.warning("Skipping stored workout with duplicate id %s", record.id)

    def _persist(self) -> None:
        """Best effort: a failed write is logged, the in-memory state stays authoritative."""
        try:
            self.persistence.save(self.store.all())
        except Exception:
            logger.exception("Failed to save %d workouts", len(self.store))

    def start(self) -> None:
        """Load saved workouts and render the list (markers follow once the map loads)."""
        self._reload()
        self.synchronizer.render_list(self.store.all())
        logger.info("Tracker started with %d saved workouts", len(self.store))

    # --- map / geolocation -----------------------------------------------------

    def load_map(self, position: tuple[float, float]) -> None:
        center, zoom = initial_view(
            position,
            self.store.all(),
            settings.map_zoom_level,
            settings.map_spread_zoom_level,
        )
        self.map_view.create_view(center, zoom)
        self.map_view.add_tile_layer(settings.tile_url, settings.tile_attribution)
        if not self._click_handler_registered:
            self.map_view.on_click(self._on_map_click)
            self._click_handler_registered = True
        self.synchronizer.render_markers(self.store.all())

    def position_unavailable(self) -> None:
        logger.warning("Geolocation failed, map disabled")
        self.map_view.show_error(POSITION_ERROR_MESSAGE)
        self._click_handler_registered = False

    def click_map(self, coords: tuple[float, float]) -> None:
        """Deliver a click on the map; the map calls back into _on_map_click."""
        if not self.map_view.is_ready:
            raise MapUnavailable(self.map_view.error or "Map is not loaded yet")
        self.map_view.click(coords)

    def _on_map_click(self, coords: tuple[float, float]) -> None:
        if self.state is not FormMode.IDLE:
            logger.debug("Map click at %s ignored: form already open", coords)
            return
        self._open_form(coords)

    def _open_form(self, coords: tuple[float, float]) -> None:
        self.pending_coordinates = coords
        self.form.show()
        self.state = FormMode.FORM_OPEN

    def _close_form(self) -> None:
        self.pending_coordinates = None
        self.form.hide()
        self.state = FormMode.IDLE

    def _reset_sort(self) -> None:
        self.sorted_by = dict.fromkeys(self.sorted_by, False)

    # --- form ------------------------------------------------------------------

    def change_type(self, kind: WorkoutType | str) -> None:
        self.form.set_type(kind)

    def _validate_form(self) -> dict[str, float]:
        """Validate the form inputs in order, marking each checked field."""
        kind = self.form.type
        raw = self.form.read_all()
        try:
            values = validate_fields(kind, raw)
        except InvalidMetric as e:
            for field in FORM_FIELDS[kind]:
                if field == e.field:
                    self.form.mark_invalid(field)
                    break
                self.form.mark_valid(field)
            raise
        for field in FORM_FIELDS[kind]:
            self.form.mark_valid(field)
        return values

    def submit(
        self,
        kind: WorkoutType | str | None = None,
        raw: Mapping[str, str | float | None] | None = None,
    ) -> Workout:
        """Create a workout from the open form, after typing kind/raw into it when given."""
        if self.state is not FormMode.FORM_OPEN or self.pending_coordinates is None:
            raise InvalidTransition("No open workout form: click on the map first")
        if kind is not None:
            self.form.set_type(kind)
        if raw:
            self.form.fill(raw)
        values = self._validate_form()
        workout = create_workout(self.form.type, self.pending_coordinates, values, self.clock())
        self.store.add(workout)
        self._persist()
        self.synchronizer.reconcile_after_mutation()
        self._close_form()
        self.announcer.speak("Workout created or changed")
        WORKOUT_EVENTS.labels(action="create").inc()
        logger.info("Created %s workout %s", workout.type, workout.id)
        return workout

    def cancel(self) -> None:
        """Close the form and go back to the saved state (restores a workout whose edit was abandoned)."""
        if self.state is not FormMode.FORM_OPEN:
            return
        self._close_form()
        self._reload()
        self._reset_sort()
        self.synchronizer.reconcile_after_mutation()

    # --- list items ------------------------------------------------------------

    def _focus(self, workout: Workout) -> None:
        self.synchronizer.center_on(
            workout.coordinates,
            settings.focus_zoom_level,
            animate=True,
            pan_duration=settings.pan_duration_seconds,
        )
        self.announcer.cancel()
        for sentence in spoken_details(workout):
            self.announcer.speak(sentence)

    def focus_workout(self, workout_id: str) -> Workout:
        workout = self.store.find_by_id(workout_id)
        self._focus(workout)
        workout.click()
        return workout

    def delete_workout(self, workout_id: str) -> Workout:
        workout = self.store.find_by_id(workout_id)
        self._focus(workout)
        self.announcer.cancel()
        self.announcer.speak("Workout deleted")
        self.store.remove_by_id(workout_id)
        self._persist()
        self._reset_sort()
        self.synchronizer.reconcile_after_mutation()
        # Counted on the removed record, after removal
        workout.click()
        WORKOUT_EVENTS.labels(action="delete").inc()
        logger.info("Deleted workout %s", workout_id)
        return workout

    def edit_workout(self, workout_id: str) -> Workout:
        """Drop the workout and reopen the form at its location; the user enters it again."""
        workout = self.store.find_by_id(workout_id)
        self._focus(workout)
        self.announcer.cancel()
        self.store.remove_by_id(workout_id)
        self._open_form(workout.coordinates)
        self.synchronizer.reconcile_after_mutation()
        workout.click()
        WORKOUT_EVENTS.labels(action="edit").inc()
        return workout

    def replace_workout(self, workout_id: str, kind: WorkoutType | str, raw: Mapping[str, str | float | None]) -> Workout:
        """Single-step edit: validate new values and swap them in at the old workout's location."""
        old = self.store.find_by_id(workout_id)
        values = validate_fields(kind, raw)
        workout = create_workout(kind, old.coordinates, values, self.clock())
        self.store.replace(workout_id, workout)
        self._persist()
        self.synchronizer.reconcile_after_mutation()
        self.announcer.speak("Workout created or changed")
        WORKOUT_EVENTS.labels(action="replace").inc()
        logger.info("Replaced workout %s with %s", workout_id, workout.id)
        return workout

    # --- sidebar ---------------------------------------------------------------

    def toggle_sort(self, key: SortKey | str) -> list[Workout]:
        """Sort the list by key, or back to canonical order on the next click. Markers are untouched."""
        key = SortKey(key)
        self.sorted_by[key] = not self.sorted_by[key]
        records = self.store.sorted_view(key, ascending=True) if self.sorted_by[key] else self.store.all()
        self.synchronizer.render_list(records)
        self.announcer.cancel()
        self.announcer.speak(SORT_ANNOUNCEMENTS[key])
        return records

    def clear_all(self) -> None:
        self.store.clear()
        self.persistence.clear()
        self._close_form()
        self._reset_sort()
        self.synchronizer.reconcile_after_mutation()
        self.announcer.cancel()
        self.announcer.speak("All workouts deleted")
        WORKOUT_EVENTS.labels(action="clear").inc()
        logger.info("All workouts deleted")

    def snapshot(self) -> ViewState:
        return ViewState(
            state=self.state.value,
            pending_coordinates=self.pending_coordinates,
            sorted_by={key.value: value for key, value in self.sorted_by.items()},
            map=self.map_view.snapshot(),
            form=self.form.snapshot(),
            list_items=self.list_view.items,
        )


def build_controller(
    storage: KeyValueStorage,
    clock: Callable[[], datetime] = now_local,
) -> InteractionController:
    """Wire store, persistence, views and speech around one storage backend."""
    store = WorkoutStore()
    synchronizer = ViewSynchronizer(store, LeafletMap(), WorkoutListView())
    controller = InteractionController(
        store=store,
        persistence=WorkoutPersistence(storage, settings.storage_key),
        synchronizer=synchronizer,
        form=FormView(),
        announcer=SpeechAnnouncer(settings.speech_lang, settings.speech_rate, settings.speech_enabled),
        clock=clock,
    )
    controller.start()
    return controller
