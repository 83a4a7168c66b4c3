"""
Distance Service

Scores a guessed country against the target: great-circle distance between
centroids, compass bearing toward the target and a proximity percentage.
Everything here is pure and safe to call from any thread.
"""

import math
from typing import Optional

from ..config.game_settings import EARTH_RADIUS_KM, KM_TO_MILES, MAX_DISTANCE_ON_EARTH_KM
from ..models.country import CountryRecord
from ..models.game import Direction, GuessEvaluation
from ..models.settings import DistanceUnit

_COMPASS = list(Direction)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres between two points given in decimal degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push h a hair past 1 for antipodal points
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


def bearing_degrees(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Initial compass bearing from point 1 toward point 2, in [0, 360).

    Coincident points have no bearing; 0 is returned for them.
    """
    if lat1 == lat2 and lon1 == lon2:
        return 0.0

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_lambda = math.radians(lon2 - lon1)

    y = math.sin(d_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(d_lambda)
    if x == 0 and y == 0:
        return 0.0

    bearing = math.degrees(math.atan2(y, x)) % 360.0
    return 0.0 if bearing >= 360.0 else bearing


def proximity_percent(distance_km: float) -> int:
    """
    Proximity score: 100 at distance 0, 0 at half the Earth's circumference.

    The remaining fraction of the maximum distance is squared, so neighbours
    score high and other continents score low. Any non-zero distance scores
    at most 99.
    """
    if distance_km <= 0:
        return 100

    remaining = max(MAX_DISTANCE_ON_EARTH_KM - distance_km, 0.0) / MAX_DISTANCE_ON_EARTH_KM
    return min(99, math.floor(remaining ** 2 * 100))


def direction_from_bearing(bearing: float) -> Direction:
    """Snap a bearing to the nearest of the 16 compass points."""
    index = int(((bearing % 360.0) + 11.25) // 22.5) % len(_COMPASS)
    return _COMPASS[index]


def format_distance(distance_km: float, unit: DistanceUnit = DistanceUnit.KM) -> str:
    """Render a distance for display, e.g. '7893km' or '4905mi'."""
    if unit == DistanceUnit.MILES:
        return f"{round(distance_km * KM_TO_MILES)}mi"
    return f"{round(distance_km)}km"


class DistanceEngine:
    """Evaluates guesses against the target country."""

    def evaluate(self, target: CountryRecord, guessed: CountryRecord) -> GuessEvaluation:
        """
        Score a guess.

        Args:
            target: The country the player is looking for
            guessed: The country the player submitted

        Returns:
            GuessEvaluation with distance, bearing from the guess toward the
            target, proximity and compass direction (None for an exact hit)
        """
        distance = haversine_km(guessed.latitude, guessed.longitude, target.latitude, target.longitude)
        bearing = bearing_degrees(guessed.latitude, guessed.longitude, target.latitude, target.longitude)

        direction: Optional[Direction] = None
        if distance > 0:
            direction = direction_from_bearing(bearing)

        return GuessEvaluation(
            distance_km=distance,
            bearing_degrees=bearing,
            proximity_percent=proximity_percent(distance),
            direction=direction,
        )
