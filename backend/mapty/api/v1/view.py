"""View API: form state and type switch, cancel, full view snapshot and queued speech."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from mapty.api.deps import get_controller
from mapty.schemas.view import FormState, Utterance, ViewState
from mapty.schemas.workout import WorkoutType
from mapty.services.controller import InteractionController

router = APIRouter(tags=["view"])

Controller = Annotated[InteractionController, Depends(get_controller)]


class FormTypeBody(BaseModel):
    type: WorkoutType


@router.get("/view", response_model=ViewState, summary="Everything the page draws")
async def get_view(controller: Controller) -> ViewState:
    return controller.snapshot()


@router.get("/form", response_model=FormState)
async def get_form(controller: Controller) -> FormState:
    return controller.form.snapshot()


@router.post("/form/type", response_model=FormState, summary="Switch between running and cycling fields")
async def change_form_type(controller: Controller, body: FormTypeBody) -> FormState:
    controller.change_type(body.type)
    return controller.form.snapshot()


@router.post("/form/cancel", response_model=ViewState, summary="Close the form and return to the saved state")
async def cancel_form(controller: Controller) -> ViewState:
    controller.cancel()
    return controller.snapshot()


@router.get("/speech", response_model=list[Utterance], summary="Take queued utterances")
async def drain_speech(controller: Controller) -> list[Utterance]:
    return controller.announcer.drain()
