"""
Wind decomposition relative to the shot line.

Directions are compass bearings in degrees, clockwise, naming where the wind
comes FROM; shot direction 0 points downrange (+x), 90 points right (+z).

Sign convention:
  headwind  > 0  wind blows against the shot (shortens it)
  crosswind > 0  wind blows from right to left (pushes the ball left)
"""

import math
from dataclasses import dataclass
from typing import Tuple

from flight_types import Vector3, require_finite, require_non_negative, require_vector

# Height (m) -> wind speed multiplier, nearest entry wins.
WIND_HEIGHT_MULTIPLIERS = {
    0.0: 0.75,
    10.0: 0.85,
    50.0: 1.0,
    100.0: 1.15,
    150.0: 1.25,
}


@dataclass(frozen=True)
class WindComponents:
    headwind: float
    crosswind: float


def resolve_wind(wind_speed: float, wind_direction: float, shot_direction: float = 0.0) -> WindComponents:
    """Split a wind into headwind/crosswind along the shot line (same speed units in and out)."""
    wind_speed = require_non_negative("wind_speed", wind_speed)
    wind_direction = require_finite("wind_direction", wind_direction)
    shot_direction = require_finite("shot_direction", shot_direction)
    angle = math.radians(wind_direction - shot_direction)
    return WindComponents(
        headwind=wind_speed * math.cos(angle),
        crosswind=wind_speed * math.sin(angle),
    )


def wind_vector(wind_speed: float, wind_direction: float) -> Vector3:
    """Air velocity (m/s, ball frame) for a wind of given speed blowing FROM ``wind_direction``."""
    wind_speed = require_non_negative("wind_speed", wind_speed)
    rad = math.radians(require_finite("wind_direction", wind_direction))
    return Vector3(-wind_speed * math.cos(rad), 0.0, -wind_speed * math.sin(rad))


def wind_components(wind: Vector3) -> Tuple[float, float]:
    """Inverse of ``wind_vector``: (horizontal speed, FROM-bearing in [0, 360))."""
    require_vector("wind", wind)
    speed = math.hypot(wind.x, wind.z)
    if speed == 0:
        return 0.0, 0.0
    direction = math.degrees(math.atan2(-wind.z, -wind.x)) % 360.0
    return speed, direction


def wind_height_multiplier(height_m: float) -> float:
    nearest = min(WIND_HEIGHT_MULTIPLIERS, key=lambda h: abs(h - height_m))
    return WIND_HEIGHT_MULTIPLIERS[nearest]


def wind_at_height(wind: Vector3, height_m: float) -> Vector3:
    return wind * wind_height_multiplier(height_m)
