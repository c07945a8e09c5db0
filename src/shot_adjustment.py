"""
Fast, non-integrated shot adjustments plus the estimator interface shared with
the full integrator.

The heuristic model adds capped percentage effects (air density, temperature,
altitude) and wind yardages. Humidity is not a separate term: it only enters
through the air density from the conditioner, which is a known approximation.

Temperature and altitude effects describe how the ball will fly relative to
standard conditions: positive means the ball carries farther. The density
term is the calibrated ``(ratio - 1) * scale`` and is positive in air denser
than standard; flip ``density_effect_scale`` for the physical direction.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import List, Optional

from air_density import condition
from flight_constants import DEFAULT_CONSTANTS, MS_TO_MPH, ModelConstants
from flight_types import (
    BallProperties,
    BallState,
    Environment,
    ShotAdjustments,
    check_environment,
    check_properties,
    launch_state,
    require_finite,
    require_positive,
)
from golf_ball_trajectory import integrate
from wind_resolver import resolve_wind, wind_components

logger = logging.getLogger(__name__)

# (upper yardage bound, club), shortest first
CLUB_TABLE = [
    (100.0, "PW"),
    (120.0, "9i"),
    (130.0, "8i"),
    (140.0, "7i"),
    (150.0, "6i"),
    (160.0, "5i"),
    (170.0, "4i"),
    (180.0, "3i"),
    (200.0, "Hybrid"),
    (230.0, "3w"),
]
LONGEST_CLUB = "Driver"


@dataclass(frozen=True)
class AdjustedDistance:
    adjusted_distance: int
    density_effect: float       # %
    temperature_effect: float   # %
    altitude_effect: float      # %
    total_effect: float         # %


@dataclass(frozen=True)
class ClubRecommendation:
    primary: str
    secondary: Optional[str] = None


def _clamp(value: float, cap: float) -> float:
    return max(-cap, min(cap, value))


def adjusted_distance(
    target_distance: float,
    env: Environment,
    props: BallProperties,
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> AdjustedDistance:
    target_distance = require_positive("target_distance", target_distance)
    check_properties(props)
    air = condition(env, constants)
    c = constants

    density = _clamp((air.density_ratio - 1.0) * c.density_effect_scale, c.density_effect_cap)
    temperature = _clamp(
        (env.temperature_f - c.standard_temperature_f) / c.temperature_step_f * c.temperature_effect_per_step,
        c.temperature_effect_cap,
    )
    altitude = min(max(env.altitude_ft / 1000.0 * c.altitude_effect_per_1000ft, 0.0), c.altitude_effect_cap)
    total = density + temperature + altitude

    return AdjustedDistance(
        adjusted_distance=round(target_distance * (1.0 + total / 100.0)),
        density_effect=density,
        temperature_effect=temperature,
        altitude_effect=altitude,
        total_effect=total,
    )


def adjust_shot(
    target_distance: float,
    env: Environment,
    props: BallProperties,
    shot_direction: float = 0.0,
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> ShotAdjustments:
    """Heuristic adjustments for a shot of ``target_distance`` yards."""
    shot_direction = require_finite("shot_direction", shot_direction)
    distance = adjusted_distance(target_distance, env, props, constants)
    air = condition(env, constants)
    c = constants

    speed, direction = wind_components(env.wind)
    wind = resolve_wind(speed * MS_TO_MPH, direction, shot_direction)
    shift = wind.headwind * c.headwind_yards_per_mph + abs(wind.crosswind) * c.crosswind_yards_per_mph
    shift = _clamp(shift, c.wind_shift_cap_yards)

    return ShotAdjustments(
        distance_adjustment=round(distance.total_effect),
        trajectory_shift=round(shift),
        spin_adjustment=round((air.density_ratio - 1.0) * c.spin_adjustment_scale),
        launch_angle_adjustment=round(wind.headwind * c.launch_adjustment_per_mph, 1),
    )


def recommend_club(adjusted_yards: float) -> ClubRecommendation:
    """Club for a plays-like distance; a distance exactly on a boundary takes the longer club."""
    adjusted_yards = require_finite("adjusted_yards", adjusted_yards)
    for i, (limit, club) in enumerate(CLUB_TABLE):
        if adjusted_yards < limit:
            longer = CLUB_TABLE[i + 1][1] if i + 1 < len(CLUB_TABLE) else LONGEST_CLUB
            return ClubRecommendation(primary=club, secondary=longer)
    return ClubRecommendation(primary=LONGEST_CLUB)


def playing_recommendations(
    env: Environment,
    shot_direction: float = 0.0,
) -> List[str]:
    check_environment(env)
    speed, direction = wind_components(env.wind)
    wind = resolve_wind(speed * MS_TO_MPH, direction, shot_direction)
    notes = []
    if abs(wind.headwind) > 5:
        notes.append(
            "Into wind: club up and swing easier for better control"
            if wind.headwind > 0
            else "Downwind: club down and expect reduced spin and control"
        )
    if abs(wind.crosswind) > 5:
        notes.append("Significant crosswind: allow for shot shape into the wind")
    if env.temperature_f < 50:
        notes.append("Cold conditions: ball will fly shorter, consider clubbing up")
    if env.humidity > 0.8:
        notes.append("High humidity: expect a softer feel off the face")
    if env.altitude_ft > 3000:
        notes.append("High altitude: ball will fly further, consider clubbing down")
    return notes


# -----------------------
# Estimators
# -----------------------
class ShotEstimator(ABC):
    """Anything that turns a target and conditions into shot adjustments."""

    @abstractmethod
    def estimate(self, target_distance: float, env: Environment, props: BallProperties) -> ShotAdjustments:
        ...


class HeuristicEstimator(ShotEstimator):
    def __init__(self, shot_direction: float = 0.0, constants: ModelConstants = DEFAULT_CONSTANTS):
        self.shot_direction = shot_direction
        self.constants = constants

    def estimate(self, target_distance, env, props):
        return adjust_shot(target_distance, env, props, self.shot_direction, self.constants)


class IntegratedEstimator(ShotEstimator):
    """Flies a reference launch under the given and the standard environment and
    reports the difference as adjustments.

    distance_adjustment: carry change in %
    trajectory_shift: landing lateral change in yards, scaled to the target
    spin_adjustment: change in spin remaining at landing in %
    launch_angle_adjustment: change in descent angle in degrees
    """

    def __init__(
        self,
        reference: Optional[BallState] = None,
        dt: Optional[float] = None,
        constants: ModelConstants = DEFAULT_CONSTANTS,
    ):
        self.reference = reference or launch_state(70.0, 23.0, 0.0, 2500.0)
        self.dt = dt
        self.constants = constants

    def _fly(self, env, props):
        reference = replace(self.reference, mass=props.mass)
        return integrate(reference, env, props, self.dt, constants=self.constants)

    @staticmethod
    def _descent_angle(points) -> float:
        v = points[-1].velocity
        return math.degrees(math.atan2(-v.y, math.hypot(v.x, v.z)))

    def estimate(self, target_distance, env, props):
        target_distance = require_positive("target_distance", target_distance)
        base_points, base = self._fly(Environment.standard(), props)
        points, metrics = self._fly(env, props)
        if base.carry_distance > 0:
            scale = target_distance / base.carry_distance
            carry_change = (metrics.carry_distance / base.carry_distance - 1.0) * 100.0
        else:
            scale, carry_change = 1.0, 0.0
        base_spin = base_points[-1].spin
        spin_change = (points[-1].spin / base_spin - 1.0) * 100.0 if base_spin > 0 else 0.0
        logger.debug("integrated estimate: carry %.1f yd vs %.1f yd standard",
                     metrics.carry_distance, base.carry_distance)
        return ShotAdjustments(
            distance_adjustment=round(carry_change, 1),
            trajectory_shift=round((metrics.lateral_deviation - base.lateral_deviation) * scale, 1),
            spin_adjustment=round(spin_change, 1),
            launch_angle_adjustment=round(self._descent_angle(points) - self._descent_angle(base_points), 1),
        )
