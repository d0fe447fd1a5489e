"""Where the map opens: the user's position, or the middle of the saved workouts."""

from __future__ import annotations

from collections.abc import Sequence

from mapty.schemas.workout import Workout

POSITION_ERROR_MESSAGE = "❌  Could not get your position!"

# Spread of saved workouts (degrees) above which the map zooms out one level
LAT_SPREAD_THRESHOLD = 0.086
LNG_SPREAD_THRESHOLD = 0.2


def initial_view(
    position: tuple[float, float],
    workouts: Sequence[Workout],
    zoom: int,
    spread_zoom: int,
) -> tuple[tuple[float, float], int]:
    """
    Return (center, zoom). With no workouts: the position at zoom.
    Otherwise the mean workout coordinate rounded to 2 decimals, at spread_zoom when
    the workouts span at least 0.086 deg latitude or 0.2 deg longitude.
    """
    if not workouts:
        return position, zoom
    lats = [w.coordinates[0] for w in workouts]
    lngs = [w.coordinates[1] for w in workouts]
    center = (round(sum(lats) / len(lats), 2), round(sum(lngs) / len(lngs), 2))
    if max(lats) - min(lats) >= LAT_SPREAD_THRESHOLD or max(lngs) - min(lngs) >= LNG_SPREAD_THRESHOLD:
        zoom = spread_zoom
    return center, zoom
