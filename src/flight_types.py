"""
Value types shared by the ball flight core, plus the input checks each public
entry point runs before computing anything.

Frame: x downrange, y up, z lateral (positive = right of the target line).
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

import numpy as np

from flight_errors import InvalidInput


@dataclass(frozen=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_array(cls, arr) -> "Vector3":
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    def norm(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, k: float) -> "Vector3":
        return Vector3(self.x * k, self.y * k, self.z * k)

    __rmul__ = __mul__

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)


ZERO = Vector3()


class PressureUnit(str, Enum):
    PA = "pa"
    HPA = "hpa"
    INHG = "inhg"


class BallConstruction(str, Enum):
    TWO_PIECE = "2-piece"
    THREE_PIECE = "3-piece"
    FOUR_PIECE = "4-piece"
    FIVE_PIECE = "5-piece"


@dataclass(frozen=True)
class Environment:
    """Immutable weather snapshot.

    temperature_f: degrees Fahrenheit
    pressure: station pressure, in ``pressure_unit``
    altitude_ft: feet above sea level (negative is out-of-model but accepted)
    humidity: relative humidity as a fraction 0..1
    wind: air velocity in m/s, same frame as the ball
    """

    temperature_f: float = 70.0
    pressure: float = 1013.25
    pressure_unit: PressureUnit = PressureUnit.HPA
    altitude_ft: float = 0.0
    humidity: float = 0.5
    wind: Vector3 = ZERO

    @classmethod
    def standard(cls) -> "Environment":
        return cls()


def humidity_from_percent(percent: float) -> float:
    """Convert a 0-100 relative humidity reading to the fractional form used here."""
    return percent / 100.0


@dataclass(frozen=True)
class BallProperties:
    mass: float = 0.0459               # kg
    radius: float = 0.02135            # m
    area: Optional[float] = None       # m^2 override; pi r^2 when None
    drag_coefficient: float = 0.22     # zero-spin Cd
    lift_coefficient: float = 0.36     # peak Cl at high backspin ratio
    magnus_coefficient: float = 0.23
    spin_decay_rate: float = 0.08      # fraction of spin lost per second
    construction: BallConstruction = BallConstruction.THREE_PIECE

    @property
    def cross_section_area(self) -> float:
        return math.pi * self.radius ** 2 if self.area is None else self.area


@dataclass(frozen=True)
class SpinState:
    rate: float = 0.0                          # rpm
    axis: Vector3 = Vector3(0.0, 0.0, 1.0)     # (0, 0, 1) is pure backspin


@dataclass(frozen=True)
class BallState:
    position: Vector3 = ZERO
    velocity: Vector3 = ZERO
    spin: SpinState = field(default_factory=SpinState)
    mass: float = 0.0459


@dataclass(frozen=True)
class TrajectoryPoint:
    position: Vector3
    velocity: Vector3
    spin: float        # rpm
    time: float        # s


@dataclass(frozen=True)
class ForceSample:
    drag: Vector3
    lift: Vector3
    magnus: Vector3

    @property
    def total(self) -> Vector3:
        return self.drag + self.lift + self.magnus


@dataclass(frozen=True)
class ShotAdjustments:
    distance_adjustment: float        # %
    trajectory_shift: float           # yards
    spin_adjustment: float            # %
    launch_angle_adjustment: float    # degrees


@dataclass(frozen=True)
class FlightMetrics:
    carry_distance: float     # yd
    total_distance: float     # yd
    max_height: float         # yd
    time_of_flight: float     # s
    spin_rate: float          # rpm at launch
    launch_angle: float       # deg
    launch_direction: float   # deg, positive = right
    ball_speed: float         # m/s
    lateral_deviation: float = 0.0  # yd at landing, positive = right

    def as_dict(self) -> dict:
        return {
            "carry_distance": self.carry_distance,
            "total_distance": self.total_distance,
            "max_height": self.max_height,
            "time_of_flight": self.time_of_flight,
            "spin_rate": self.spin_rate,
            "launch_angle": self.launch_angle,
            "launch_direction": self.launch_direction,
            "ball_speed": self.ball_speed,
        }


def launch_state(
    ball_speed: float,
    launch_angle_deg: float,
    launch_direction_deg: float = 0.0,
    spin_rpm: float = 0.0,
    spin_axis: Vector3 = Vector3(0.0, 0.0, 1.0),
    mass: float = 0.0459,
) -> BallState:
    """Build an initial BallState from launch-monitor numbers (m/s, degrees, rpm)."""
    require_finite("ball_speed", ball_speed)
    require_finite("launch_angle_deg", launch_angle_deg)
    require_finite("launch_direction_deg", launch_direction_deg)
    theta = math.radians(launch_angle_deg)
    phi = math.radians(launch_direction_deg)
    velocity = Vector3(
        ball_speed * math.cos(theta) * math.cos(phi),
        ball_speed * math.sin(theta),
        ball_speed * math.cos(theta) * math.sin(phi),
    )
    return BallState(velocity=velocity, spin=SpinState(rate=spin_rpm, axis=spin_axis), mass=mass)


# -----------------------
# Input checks
# -----------------------
def require_finite(name: str, value: Any) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidInput(name, value, "not a number") from None
    if not math.isfinite(value):
        raise InvalidInput(name, value, "must be finite")
    return value


def require_positive(name: str, value: Any) -> float:
    value = require_finite(name, value)
    if value <= 0:
        raise InvalidInput(name, value, "must be > 0")
    return value


def require_non_negative(name: str, value: Any) -> float:
    value = require_finite(name, value)
    if value < 0:
        raise InvalidInput(name, value, "must be >= 0")
    return value


def require_vector(name: str, vec: Vector3) -> Vector3:
    if not isinstance(vec, Vector3):
        raise InvalidInput(name, vec, "expected a Vector3")
    if not vec.is_finite():
        raise InvalidInput(name, vec, "components must be finite")
    return vec


def coerce_construction(value: Union[str, BallConstruction]) -> BallConstruction:
    try:
        return BallConstruction(value)
    except ValueError:
        raise InvalidInput("construction", value, "unrecognized construction class") from None


def check_environment(env: Environment) -> Environment:
    require_finite("temperature_f", env.temperature_f)
    require_positive("pressure", env.pressure)
    require_finite("altitude_ft", env.altitude_ft)
    humidity = require_finite("humidity", env.humidity)
    if not 0.0 <= humidity <= 1.0:
        raise InvalidInput("humidity", humidity, "expected a fraction in [0, 1]; see humidity_from_percent")
    try:
        PressureUnit(env.pressure_unit)
    except ValueError:
        raise InvalidInput("pressure_unit", env.pressure_unit, "unknown pressure unit") from None
    require_vector("wind", env.wind)
    return env


def check_properties(props: BallProperties) -> BallProperties:
    require_positive("mass", props.mass)
    require_positive("radius", props.radius)
    if props.area is not None:
        require_positive("area", props.area)
    require_non_negative("drag_coefficient", props.drag_coefficient)
    require_non_negative("lift_coefficient", props.lift_coefficient)
    require_non_negative("magnus_coefficient", props.magnus_coefficient)
    require_non_negative("spin_decay_rate", props.spin_decay_rate)
    coerce_construction(props.construction)
    return props


def check_spin(spin: SpinState) -> SpinState:
    require_finite("spin.rate", spin.rate)
    require_vector("spin.axis", spin.axis)
    if spin.rate > 0 and spin.axis.norm() == 0:
        raise InvalidInput("spin.axis", spin.axis, "zero axis with non-zero spin")
    return spin


def check_ball_state(state: BallState) -> BallState:
    require_vector("position", state.position)
    require_vector("velocity", state.velocity)
    check_spin(state.spin)
    require_positive("state.mass", state.mass)
    return state
