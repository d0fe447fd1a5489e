"""Pydantic schemas for the view state the browser redraws from (map, form, list, speech)."""

from pydantic import BaseModel, Field

from mapty.schemas.workout import WorkoutType


class Position(BaseModel):
    """Geolocation result or map click location."""

    # Unwrapped: clicks on a panned world copy report longitudes past +/-180
    latitude: float = Field(allow_inf_nan=False)
    longitude: float = Field(allow_inf_nan=False)

    @property
    def coords(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


class PopupState(BaseModel):
    content: str = ""
    class_name: str = ""
    max_width: int = 250
    min_width: int = 100
    auto_close: bool = False
    close_on_click: bool = False
    is_open: bool = False


class MarkerState(BaseModel):
    id: int
    coordinates: tuple[float, float]
    popup: PopupState | None = None


class TileLayerState(BaseModel):
    url: str
    attribution: str


class ViewportState(BaseModel):
    center: tuple[float, float]
    zoom: int
    animate: bool = False
    pan_duration: float | None = None


class MapState(BaseModel):
    ready: bool = False
    error: str | None = None
    viewport: ViewportState | None = None
    tile_layer: TileLayerState | None = None
    markers: list[MarkerState] = []


class FieldState(BaseModel):
    value: str = ""
    classes: list[str] = []
    hint_visible: bool = False
    row_hidden: bool = False


class FormState(BaseModel):
    hidden: bool = True
    type: WorkoutType = WorkoutType.RUNNING
    fields: dict[str, FieldState] = {}


class Utterance(BaseModel):
    text: str
    lang: str = "en-US"
    rate: float = 0.7


class ViewState(BaseModel):
    state: str
    pending_coordinates: tuple[float, float] | None = None
    sorted_by: dict[str, bool] = {}
    map: MapState
    form: FormState
    list_items: list[str] = []
