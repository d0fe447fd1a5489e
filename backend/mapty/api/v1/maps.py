"""Map API: geolocation result, map clicks and the current map state."""

from typing import Annotated

from fastapi import APIRouter, Depends

from mapty.api.deps import get_controller
from mapty.schemas.view import MapState, Position, ViewState
from mapty.services.controller import InteractionController

router = APIRouter(prefix="/map", tags=["map"])

Controller = Annotated[InteractionController, Depends(get_controller)]


@router.get("", response_model=MapState, summary="Current map view and markers")
async def get_map(controller: Controller) -> MapState:
    return controller.map_view.snapshot()


@router.post("/position", response_model=MapState, summary="Load the map at the user's position")
async def report_position(controller: Controller, body: Position) -> MapState:
    controller.load_map(body.coords)
    return controller.map_view.snapshot()


@router.post("/position/error", response_model=MapState, summary="Geolocation failed or was denied")
async def report_position_error(controller: Controller) -> MapState:
    controller.position_unavailable()
    return controller.map_view.snapshot()


@router.post(
    "/click",
    response_model=ViewState,
    summary="Click on the map (opens the workout form)",
    responses={409: {"description": "Map not loaded"}},
)
async def click_map(controller: Controller, body: Position) -> ViewState:
    controller.click_map(body.coords)
    return controller.snapshot()
