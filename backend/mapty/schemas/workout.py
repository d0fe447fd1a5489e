"""Pydantic schemas for workout records (running / cycling) and the raw form submission."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class WorkoutType(str, Enum):
    RUNNING = "running"
    CYCLING = "cycling"


class SortKey(str, Enum):
    DISTANCE = "distance"
    DURATION = "time"


class WorkoutBase(BaseModel):
    """
    Fields shared by every workout. Stored and returned with camelCase keys.
    Everything except click_count is frozen once constructed.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)

    id: str = Field(frozen=True)
    created_at: datetime = Field(frozen=True)
    coordinates: tuple[float, float] = Field(frozen=True)  # (lat, lng)
    distance_km: float = Field(gt=0, frozen=True)
    duration_min: float = Field(gt=0, frozen=True)
    click_count: int = Field(default=0, ge=0)
    label: str = Field(frozen=True)

    def click(self) -> None:
        self.click_count += 1


class Running(WorkoutBase):
    type: Literal["running"] = Field(default="running", frozen=True)
    cadence_spm: float = Field(frozen=True)
    pace_min_per_km: float = Field(frozen=True)


class Cycling(WorkoutBase):
    type: Literal["cycling"] = Field(default="cycling", frozen=True)
    elevation_gain_m: float = Field(frozen=True)
    speed_km_per_h: float = Field(frozen=True)


Workout = Annotated[Union[Running, Cycling], Field(discriminator="type")]

# Rebuilds the right variant from plain data by the "type" discriminant.
workout_list_adapter: TypeAdapter[list[Workout]] = TypeAdapter(list[Workout])


class WorkoutSubmission(BaseModel):
    """Raw form fields as typed by the user; coerced and validated by the controller."""

    type: WorkoutType = WorkoutType.RUNNING
    distance: str | float = ""
    duration: str | float = ""
    cadence: str | float = ""
    elevation: str | float = ""
