"""Form and workout list: the DOM pieces the controller and synchronizer work through."""

from __future__ import annotations

from collections.abc import Mapping

from mapty.schemas.view import FieldState, FormState
from mapty.schemas.workout import WorkoutType

FORM_INPUTS = ("distance", "duration", "cadence", "elevation")

ERROR_CLASS = "form__input--error"
SUCCESS_CLASS = "form__input--success"


class FormView:
    def __init__(self) -> None:
        self.hidden = True
        self.type = WorkoutType.RUNNING
        self.fields: dict[str, FieldState] = {name: FieldState() for name in FORM_INPUTS}
        self._sync_rows()

    def _sync_rows(self) -> None:
        # Running shows cadence, cycling shows elevation
        self.fields["cadence"].row_hidden = self.type is WorkoutType.CYCLING
        self.fields["elevation"].row_hidden = self.type is WorkoutType.RUNNING

    def show(self) -> None:
        self.hidden = False

    def hide(self) -> None:
        """Hide the form and reset all inputs."""
        self.hidden = True
        for state in self.fields.values():
            state.value = ""
            if SUCCESS_CLASS in state.classes:
                state.classes.remove(SUCCESS_CLASS)

    def set_type(self, kind: WorkoutType | str) -> None:
        self.type = WorkoutType(kind)
        self._sync_rows()

    def fill(self, values: Mapping[str, object]) -> None:
        """Set input values as if typed; unknown names are ignored."""
        for name, value in values.items():
            if name in self.fields and value is not None:
                self.fields[name].value = str(value)

    def read_all(self) -> dict[str, str]:
        return {name: state.value for name, state in self.fields.items()}

    def mark_invalid(self, name: str) -> None:
        state = self.fields[name]
        if ERROR_CLASS not in state.classes:
            state.classes.append(ERROR_CLASS)
        state.hint_visible = True

    def mark_valid(self, name: str) -> None:
        state = self.fields[name]
        if ERROR_CLASS in state.classes:
            state.classes.remove(ERROR_CLASS)
        if SUCCESS_CLASS not in state.classes:
            state.classes.append(SUCCESS_CLASS)
        state.hint_visible = False

    def snapshot(self) -> FormState:
        return FormState(
            hidden=self.hidden,
            type=self.type,
            fields={name: state.model_copy(deep=True) for name, state in self.fields.items()},
        )


class WorkoutListView:
    """
    Workout <li> fragments in document order. New items go right after the form
    anchor, so the item inserted last is shown first.
    """

    def __init__(self) -> None:
        self._items: list[str] = []

    @property
    def items(self) -> list[str]:
        return list(self._items)

    def insert_after_anchor(self, html: str) -> None:
        self._items.insert(0, html)

    def clear_items(self) -> None:
        self._items.clear()
