"""
Server-side mirror of the Leaflet map. The page script draws whatever snapshot() returns;
the tracker only talks to the map through this object.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable

from mapty.schemas.view import MapState, MarkerState, PopupState, TileLayerState, ViewportState

logger = logging.getLogger(__name__)

ClickHandler = Callable[[tuple[float, float]], None]


class MarkerHandle:
    """Returned by place_marker; lets the caller attach a popup."""

    def __init__(self, state: MarkerState):
        self.state = state

    @property
    def id(self) -> int:
        return self.state.id

    def bind_popup(
        self,
        content: str,
        class_name: str = "",
        max_width: int = 250,
        min_width: int = 100,
        auto_close: bool = False,
        close_on_click: bool = False,
        open_popup: bool = True,
    ) -> MarkerHandle:
        self.state.popup = PopupState(
            content=content,
            class_name=class_name,
            max_width=max_width,
            min_width=min_width,
            auto_close=auto_close,
            close_on_click=close_on_click,
            is_open=open_popup,
        )
        return self


class LeafletMap:
    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._markers: dict[int, MarkerState] = {}
        self._click_handlers: list[ClickHandler] = []
        self.viewport: ViewportState | None = None
        self.tile_layer: TileLayerState | None = None
        self.error: str | None = None

    @property
    def is_ready(self) -> bool:
        return self.viewport is not None

    @property
    def markers(self) -> list[MarkerState]:
        return list(self._markers.values())

    def create_view(self, center: tuple[float, float], zoom: int) -> None:
        self.viewport = ViewportState(center=center, zoom=zoom)
        self.error = None
        logger.debug("Map view created at %s zoom %d", center, zoom)

    def add_tile_layer(self, url: str, attribution: str) -> None:
        self.tile_layer = TileLayerState(url=url, attribution=attribution)

    def on_click(self, handler: ClickHandler) -> None:
        self._click_handlers.append(handler)

    def click(self, coords: tuple[float, float]) -> None:
        """Emit a click at coords to every registered handler."""
        for handler in self._click_handlers:
            handler(coords)

    def place_marker(self, coords: tuple[float, float]) -> MarkerHandle:
        state = MarkerState(id=next(self._ids), coordinates=coords)
        self._markers[state.id] = state
        return MarkerHandle(state)

    def remove_marker(self, handle: MarkerHandle) -> None:
        self._markers.pop(handle.id, None)

    def set_view(
        self,
        coords: tuple[float, float],
        zoom: int,
        animate: bool = False,
        pan_duration: float | None = None,
    ) -> None:
        self.viewport = ViewportState(center=coords, zoom=zoom, animate=animate, pan_duration=pan_duration)

    def show_error(self, message: str) -> None:
        """Replace the map with a static message (geolocation failure)."""
        self.error = message
        self.viewport = None
        self._click_handlers.clear()

    def snapshot(self) -> MapState:
        return MapState(
            ready=self.is_ready,
            error=self.error,
            viewport=self.viewport,
            tile_layer=self.tile_layer,
            markers=self.markers,
        )
