"""Workouts API: form submit, list item clicks (focus / delete / edit), sort toggles and clear-all."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from mapty.api.deps import get_controller
from mapty.schemas.view import ViewState
from mapty.schemas.workout import SortKey, Workout, WorkoutSubmission
from mapty.services.controller import InteractionController

router = APIRouter(prefix="/workouts", tags=["workouts"])

Controller = Annotated[InteractionController, Depends(get_controller)]


def _to_response(workout: Workout) -> dict:
    return workout.model_dump(mode="json", by_alias=True)


def _raw_fields(body: WorkoutSubmission) -> dict:
    return body.model_dump(exclude={"type"})


@router.get("", summary="List workouts in canonical order")
async def list_workouts(controller: Controller) -> list[dict]:
    return [_to_response(w) for w in controller.store.all()]


@router.post(
    "",
    status_code=201,
    summary="Submit the workout form",
    responses={409: {"description": "Form not open"}, 422: {"description": "Invalid field"}},
)
async def create_workout(controller: Controller, body: WorkoutSubmission) -> dict:
    """Create a workout at the clicked map location from raw form values."""
    workout = controller.submit(body.type, _raw_fields(body))
    return _to_response(workout)


@router.delete("", status_code=204, summary="Delete all workouts")
async def clear_workouts(controller: Controller) -> Response:
    controller.clear_all()
    return Response(status_code=204)


@router.post("/sort/{key}", summary="Toggle list sort by distance or time")
async def toggle_sort(controller: Controller, key: SortKey) -> dict:
    """First click sorts ascending, second click restores canonical order. Markers are not touched."""
    records = controller.toggle_sort(key)
    return {
        "key": key.value,
        "sorted": controller.sorted_by[key],
        "order": [w.id for w in records],
        "list_items": controller.list_view.items,
    }


@router.get("/{workout_id}", summary="Get one workout", responses={404: {"description": "Not found"}})
async def get_workout(controller: Controller, workout_id: str) -> dict:
    return _to_response(controller.store.find_by_id(workout_id))


@router.put(
    "/{workout_id}",
    summary="Replace a workout (single-step edit)",
    responses={404: {"description": "Not found"}, 422: {"description": "Invalid field"}},
)
async def replace_workout(controller: Controller, workout_id: str, body: WorkoutSubmission) -> dict:
    workout = controller.replace_workout(workout_id, body.type, _raw_fields(body))
    return _to_response(workout)


@router.delete("/{workout_id}", status_code=204, responses={404: {"description": "Not found"}})
async def delete_workout(controller: Controller, workout_id: str) -> Response:
    controller.delete_workout(workout_id)
    return Response(status_code=204)


@router.post("/{workout_id}/focus", summary="Center the map on a workout", responses={404: {"description": "Not found"}})
async def focus_workout(controller: Controller, workout_id: str) -> dict:
    return _to_response(controller.focus_workout(workout_id))


@router.post(
    "/{workout_id}/edit",
    response_model=ViewState,
    summary="Remove a workout and reopen the form at its location",
    responses={404: {"description": "Not found"}},
)
async def edit_workout(controller: Controller, workout_id: str) -> ViewState:
    controller.edit_workout(workout_id)
    return controller.snapshot()
