"""FastAPI dependencies: the per-process tracker controller."""

from fastapi import HTTPException, Request

from mapty.services.controller import InteractionController


def get_controller(request: Request) -> InteractionController:
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise HTTPException(status_code=503, detail="Tracker not started")
    return controller
