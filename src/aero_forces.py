import numpy as np
from typing import Optional, Tuple

from air_density import condition, humidity_spin_factor
from flight_constants import DEFAULT_CONSTANTS, RPM_TO_RAD_S, ModelConstants
from flight_errors import InvalidInput
from flight_types import (
    BallProperties,
    Environment,
    ForceSample,
    SpinState,
    Vector3,
    check_environment,
    check_properties,
    check_spin,
    require_vector,
)

_UP = np.array([0.0, 1.0, 0.0])
_EPS = 1e-12

# Spin ratio S = r * omega / v
DRAG_SPIN_SLOPE = 0.3
MAX_DRAG_COEFFICIENT = 0.55
LIFT_ONSET_SPIN_RATIO = 0.095
LIFT_FULL_SPIN_RATIO = 0.155


def spin_ratio(spin_rpm, radius, speed):
    if speed < _EPS or spin_rpm <= 0:
        return 0.0
    return radius * spin_rpm * RPM_TO_RAD_S / speed


def drag_coefficient(spin_ratio, base=0.22):
    # Cd rises with spin ratio, capped
    return min(base + DRAG_SPIN_SLOPE * max(spin_ratio, 0.0), MAX_DRAG_COEFFICIENT)


def lift_coefficient(spin_ratio, peak=0.36):
    """Lift coefficient from the backspin ratio.

    Zero below ``LIFT_ONSET_SPIN_RATIO``, rising linearly to ``peak`` at
    ``LIFT_FULL_SPIN_RATIO`` and flat above it. Continuous in the spin ratio,
    so a ball with almost no spin gets almost no lift.
    """
    ramp = (spin_ratio - LIFT_ONSET_SPIN_RATIO) / (LIFT_FULL_SPIN_RATIO - LIFT_ONSET_SPIN_RATIO)
    return peak * min(max(ramp, 0.0), 1.0)


def force_vectors(
    velocity: np.ndarray,
    spin_rpm: float,
    spin_axis: np.ndarray,
    props: BallProperties,
    rho: float,
    wind: np.ndarray,
    spin_factor: float = 1.0,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Drag, lift and Magnus force vectors (N) on arrays, no input checks.

    Forces act on the velocity relative to the air. The spin vector is split
    into backspin about the horizontal axis across the flight path and the
    remainder. Backspin drives lift in the vertical plane through the relative
    velocity; the remainder drives the Magnus force ``Cm rho A r (w x v)``,
    which curves the ball. ``spin_factor`` scales both spin forces.
    """
    v_rel = velocity - wind
    v = np.sqrt(v_rel @ v_rel)
    zero = np.zeros(3)
    if v < _EPS:
        return zero, zero.copy(), zero.copy()
    v_hat = v_rel / v
    area = props.cross_section_area
    q = 0.5 * rho * v**2 * area

    drag = -q * drag_coefficient(spin_ratio(spin_rpm, props.radius, v), props.drag_coefficient) * v_hat

    lift = zero.copy()
    magnus = zero.copy()
    axis_norm = np.sqrt(spin_axis @ spin_axis)
    if spin_rpm <= 0 or axis_norm < _EPS:
        return drag, lift, magnus

    omega = spin_rpm * RPM_TO_RAD_S * spin_axis / axis_norm
    back_axis = np.cross(v_hat, _UP)
    n = np.sqrt(back_axis @ back_axis)
    if n > _EPS:
        back_axis = back_axis / n
        backspin = omega @ back_axis
        side = omega - backspin * back_axis
    else:
        # Travelling straight up or down: no horizontal axis to spin about.
        backspin = 0.0
        side = omega

    if backspin > 0:
        cl = lift_coefficient(props.radius * backspin / v, props.lift_coefficient)
        lift_dir = _UP - (_UP @ v_hat) * v_hat
        n = np.sqrt(lift_dir @ lift_dir)
        if n > _EPS:
            lift = q * cl * spin_factor * lift_dir / n

    magnus = props.magnus_coefficient * spin_factor * rho * area * props.radius * np.cross(side, v_rel)
    return drag, lift, magnus


def forces(
    velocity: Vector3,
    spin: SpinState,
    props: BallProperties,
    env: Environment,
    constants: ModelConstants = DEFAULT_CONSTANTS,
    air_density: Optional[float] = None,
) -> ForceSample:
    """Instantaneous aerodynamic forces on the ball.

    Pure: identical inputs always give identical output. ``air_density``
    skips conditioning when the caller already has it.
    """
    require_vector("velocity", velocity)
    check_spin(spin)
    check_environment(env)
    check_properties(props)
    rho = condition(env, constants).air_density if air_density is None else air_density
    if not np.isfinite(rho) or rho <= 0:
        raise InvalidInput("air_density", rho, "must be finite and > 0")

    drag, lift, magnus = force_vectors(
        velocity.to_array(),
        spin.rate,
        spin.axis.to_array(),
        props,
        rho,
        env.wind.to_array(),
        humidity_spin_factor(env.humidity, constants),
    )
    sample = ForceSample(
        drag=Vector3.from_array(drag),
        lift=Vector3.from_array(lift),
        magnus=Vector3.from_array(magnus),
    )
    if not sample.total.is_finite():
        raise InvalidInput("velocity", velocity, "force evaluation overflowed")
    return sample


def acceleration(sample: ForceSample, mass: float) -> Vector3:
    """Aerodynamic acceleration (gravity excluded)."""
    return sample.total * (1.0 / mass)
