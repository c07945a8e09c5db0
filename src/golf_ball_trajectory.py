import logging
import math
from collections import namedtuple
from typing import Iterator, Optional, Sequence

import numpy as np

from air_density import condition, humidity_spin_factor
from aero_forces import force_vectors
from flight_constants import DEFAULT_CONSTANTS, GRAVITY, METERS_TO_YARDS, ModelConstants
from flight_errors import InvalidInput, NonConvergent
from flight_types import (
    BallProperties,
    BallState,
    Environment,
    FlightMetrics,
    TrajectoryPoint,
    Vector3,
    check_ball_state,
    check_environment,
    check_properties,
    require_positive,
)
from three_d_body import ThreeDBody
from wind_resolver import wind_height_multiplier

logger = logging.getLogger(__name__)

FlightResult = namedtuple("FlightResult", ["points", "metrics"])

GROUND_LEVEL = 0.0


def rk4_step(f, y, t, dt):
    k1 = f(y, t)
    k2 = f(y + 0.5 * dt * k1, t + 0.5 * dt)
    k3 = f(y + 0.5 * dt * k2, t + 0.5 * dt)
    k4 = f(y + dt * k3, t + dt)
    return y + (dt / 6.0) * (k1 + 2*k2 + 2*k3 + k4)


class GolfBallTrajectory:
    """Fixed-step RK4 flight of one ball, airborne until it crosses the ground descending.

    State vector: [x, y, z, vx, vy, vz, spin_rpm]. The spin axis is held fixed;
    the spin rate decays continuously at ``props.spin_decay_rate`` per second.

    ``points()`` yields each sample once, in time order, and cannot be restarted.
    """

    def __init__(
        self,
        initial: BallState,
        env: Environment,
        props: BallProperties,
        dt: Optional[float] = None,
        constants: ModelConstants = DEFAULT_CONSTANTS,
        max_steps: Optional[int] = None,
        wind_profile: bool = False,
    ):
        check_ball_state(initial)
        check_environment(env)
        check_properties(props)
        if not math.isclose(initial.mass, props.mass, rel_tol=1e-9):
            raise InvalidInput("state.mass", initial.mass, f"does not match ball mass {props.mass!r}")
        self.dt = require_positive("dt", constants.default_dt if dt is None else dt)
        self.max_steps = int(constants.max_steps if max_steps is None else max_steps)
        if self.max_steps <= 0:
            raise InvalidInput("max_steps", max_steps, "must be > 0")
        self.initial = initial
        self.env = env
        self.props = props
        self.constants = constants
        self.wind_profile = wind_profile
        # Conditions do not change during a flight: condition once.
        self.rho = condition(env, constants).air_density
        self.spin_factor = humidity_spin_factor(env.humidity, constants)
        self._wind = env.wind.to_array()
        self._axis = initial.spin.axis.to_array()
        self._gravity = np.array([0.0, -GRAVITY, 0.0])
        self._consumed = False
        self.steps = 0
        self.landed = False

    def _wind_at(self, height: float) -> np.ndarray:
        if not self.wind_profile:
            return self._wind
        return self._wind * wind_height_multiplier(height)

    def _deriv(self, state, t):
        vel = state[3:6]
        spin_rpm = state[6]
        drag, lift, magnus = force_vectors(
            vel, spin_rpm, self._axis, self.props, self.rho, self._wind_at(state[1]), self.spin_factor
        )
        acc = (drag + lift + magnus) / self.props.mass + self._gravity
        dspin = -self.props.spin_decay_rate * spin_rpm
        return np.array([vel[0], vel[1], vel[2], acc[0], acc[1], acc[2], dspin])

    @staticmethod
    def _point(state, t) -> TrajectoryPoint:
        return TrajectoryPoint(
            position=Vector3(float(state[0]), float(state[1]), float(state[2])),
            velocity=Vector3(float(state[3]), float(state[4]), float(state[5])),
            spin=float(state[6]),
            time=float(t),
        )

    def points(self) -> Iterator[TrajectoryPoint]:
        if self._consumed:
            raise RuntimeError("trajectory already produced; build a new GolfBallTrajectory")
        self._consumed = True
        return self._run()

    def _run(self) -> Iterator[TrajectoryPoint]:
        p, v = self.initial.position, self.initial.velocity
        state = np.array([p.x, p.y, p.z, v.x, v.y, v.z, self.initial.spin.rate], dtype=float)
        t = 0.0
        yield self._point(state, t)

        for step in range(1, self.max_steps + 1):
            new_state = rk4_step(self._deriv, state, t, self.dt)
            self.steps = step
            if not np.all(np.isfinite(new_state)):
                raise NonConvergent(step, t, "integration state became non-finite")
            if new_state[1] <= GROUND_LEVEL and new_state[4] < 0:
                drop = state[1] - new_state[1]
                frac = (state[1] - GROUND_LEVEL) / drop if drop > 0 else 1.0
                frac = min(max(frac, 0.0), 1.0)
                landed = state + frac * (new_state - state)
                landed[1] = GROUND_LEVEL
                self.landed = True
                logger.debug("landed after %d steps at t=%.3f s, x=%.2f m", step, t + frac * self.dt, landed[0])
                yield self._point(landed, t + frac * self.dt)
                return
            state = new_state
            t += self.dt
            yield self._point(state, t)

        raise NonConvergent(self.max_steps, t)

    def run(self) -> FlightResult:
        pts = tuple(self.points())
        return FlightResult(pts, summarize(pts, self.constants))


def summarize(points: Sequence[TrajectoryPoint], constants: ModelConstants = DEFAULT_CONSTANTS) -> FlightMetrics:
    """Post-hoc flight metrics from a landed trajectory (yards, seconds, degrees)."""
    body = ThreeDBody.from_points(points)
    first, last = points[0], points[-1]
    v0 = first.velocity
    horizontal_speed = math.hypot(v0.x, v0.z)

    carry_m = float(body.horizontal_range()[-1])
    carry = carry_m * METERS_TO_YARDS
    return FlightMetrics(
        carry_distance=carry,
        total_distance=carry + constants.roll_out_yards,
        max_height=float(body.y.max()) * METERS_TO_YARDS,
        time_of_flight=last.time - first.time,
        spin_rate=first.spin,
        launch_angle=math.degrees(math.atan2(v0.y, horizontal_speed)),
        launch_direction=math.degrees(math.atan2(v0.z, v0.x)),
        ball_speed=v0.norm(),
        lateral_deviation=(last.position.z - first.position.z) * METERS_TO_YARDS,
    )


def iter_trajectory(
    initial: BallState,
    env: Environment,
    props: BallProperties,
    dt: Optional[float] = None,
    **kwargs,
) -> Iterator[TrajectoryPoint]:
    """Lazy trajectory samples; raises NonConvergent while iterating if the ball never lands."""
    return GolfBallTrajectory(initial, env, props, dt, **kwargs).points()


def integrate(
    initial: BallState,
    env: Environment,
    props: BallProperties,
    dt: Optional[float] = None,
    **kwargs,
) -> FlightResult:
    """Integrate a full flight. Unpacks as ``points, metrics``."""
    return GolfBallTrajectory(initial, env, props, dt, **kwargs).run()


# Example usage:
if __name__ == "__main__":
    from flight_types import launch_state

    logging.basicConfig(level=logging.DEBUG)
    state = launch_state(ball_speed=70, launch_angle_deg=15, spin_rpm=3000)
    points, metrics = integrate(state, Environment.standard(), BallProperties())
    print(f"{len(points)} samples")
    print(f"Carry: {metrics.carry_distance:.1f} yd, apex {metrics.max_height:.1f} yd, "
          f"flight {metrics.time_of_flight:.2f} s")
